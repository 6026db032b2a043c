"""Line settings of a serial port."""

from __future__ import annotations

from enum import Enum


class DataBits(Enum):
    """Number of bits per character; the value is the bit count."""

    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    def __str__(self) -> str:
        return self.name.capitalize()


class Parity(Enum):
    """Parity checking mode.

    With ``ODD`` or ``EVEN`` an extra bit makes the number of 1 bits in each
    character odd or even; ``NONE`` sends no parity bit.
    """

    NONE = "none"
    ODD = "odd"
    EVEN = "even"

    def __str__(self) -> str:
        return self.name.capitalize()


class StopBits(Enum):
    """Number of stop bits sent after every character."""

    ONE = 1
    TWO = 2

    def __str__(self) -> str:
        return self.name.capitalize()


_FLOW_CONTROL_ALIASES = {
    "None": "NONE",
    "none": "NONE",
    "n": "NONE",
    "Software": "SOFTWARE",
    "software": "SOFTWARE",
    "SW": "SOFTWARE",
    "sw": "SOFTWARE",
    "s": "SOFTWARE",
    "Hardware": "HARDWARE",
    "hardware": "HARDWARE",
    "HW": "HARDWARE",
    "hw": "HARDWARE",
    "h": "HARDWARE",
}


class FlowControl(Enum):
    """Flow control mode."""

    NONE = "none"
    """No flow control."""
    SOFTWARE = "software"
    """XON/XOFF bytes."""
    HARDWARE = "hardware"
    """RTS/CTS signals."""

    def __str__(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, text: str) -> FlowControl:
        """Parse a flow control name such as ``"sw"`` or ``"Hardware"``."""
        try:
            return cls[_FLOW_CONTROL_ALIASES[text]]
        except KeyError:
            raise ValueError(f"unknown flow control {text!r}") from None


class ClearBuffer(Enum):
    """Which buffer or buffers to discard."""

    INPUT = "input"
    """Data received but not read."""
    OUTPUT = "output"
    """Data written but not yet transmitted."""
    ALL = "all"
    """Both."""