"""Errors raised by serial port operations."""

from __future__ import annotations

import errno as _errno
from enum import Enum


class ErrorKind(Enum):
    """Categories of errors that can occur when working with serial ports."""

    NO_DEVICE = "no_device"
    """The device is not available: in use elsewhere or disconnected."""

    INVALID_INPUT = "invalid_input"
    """A parameter was incorrect."""

    UNKNOWN = "unknown"
    """An unknown error occurred."""

    IO = "io"
    """An I/O error occurred; ``SerialError.errno`` tells which one."""


class SerialError(Exception):
    """An error from a serial port operation.

    ``kind`` categorises the error, ``description`` is meant for end users and
    ``errno`` carries the operating-system error number of I/O errors, if any.
    """

    def __init__(self, kind: ErrorKind, description: str, errno: int | None = None) -> None:
        super().__init__(description)
        self.kind = kind
        self.description = description
        self.errno = errno

    def __str__(self) -> str:
        return self.description

    def __reduce__(self):
        return (type(self), (self.kind, self.description, self.errno))

    @classmethod
    def from_os_error(cls, error: OSError) -> SerialError:
        """Wrap an ``OSError`` as an I/O serial error."""
        return cls(ErrorKind.IO, str(error), error.errno)

    def to_os_error(self) -> OSError:
        """Return the equivalent ``OSError``.

        Python picks the matching subclass from the error number, so a missing
        device becomes ``FileNotFoundError`` and a timeout ``TimeoutError``.
        """
        if self.kind is ErrorKind.NO_DEVICE:
            code: int | None = _errno.ENOENT
        elif self.kind is ErrorKind.INVALID_INPUT:
            code = _errno.EINVAL
        elif self.kind is ErrorKind.IO:
            code = self.errno
        else:
            code = None
        if code is None:
            return OSError(self.description)
        return OSError(code, self.description)