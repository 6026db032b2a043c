"""Blocking serial port I/O with a settings builder, port listing and command-line tools."""

__version__ = "4.7.2"