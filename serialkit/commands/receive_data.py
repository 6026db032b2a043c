"""Read data from a serial port and echo it to standard output."""

from __future__ import annotations

import argparse
import errno
import itertools
import re
import sys
from typing import BinaryIO

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort

_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")
_BUFFER_SIZE = 1000
_READ_TIMEOUT = 0.01


def parse_baud(text: str) -> int:
    """Parse a baud rate, an unsigned 32-bit number."""
    if _UNSIGNED.fullmatch(text):
        value = int(text)
        if value <= _U32_MAX:
            return value
    raise argparse.ArgumentTypeError(f"Invalid baud rate '{text}' specified")


def receive(port: SerialPort, out: BinaryIO, iterations: int | None = None) -> int:
    """Copy what arrives on ``port`` to ``out`` and return the number of bytes copied.

    Reads ``iterations`` times, or until the stream ends when it is ``None``.
    Timeouts are ignored; other errors are reported on standard error.
    """
    received = 0
    attempts = itertools.count() if iterations is None else range(iterations)
    for _ in attempts:
        try:
            data = port.read(_BUFFER_SIZE)
        except SerialError as error:
            if error.errno != errno.ETIMEDOUT:
                print(repr(error), file=sys.stderr)
            continue
        if not data:
            break
        out.write(data)
        out.flush()
        received += len(data)
    return received


def main(argv: list[str] | None = None) -> int:
    """Echo the data received on a serial port."""
    parser = argparse.ArgumentParser(
        description="Reads data from a serial port and echoes it to stdout"
    )
    parser.add_argument("port", help="The device path to a serial port")
    parser.add_argument("baud", type=parse_baud, help="The baud rate to connect at")
    args = parser.parse_args(argv)

    try:
        port = new(args.port, args.baud).with_timeout(_READ_TIMEOUT).open()
    except SerialError as error:
        print(f'Failed to open "{args.port}". Error: {error}', file=sys.stderr)
        return 1

    with port:
        print(f"Receiving data on {args.port} at {args.baud} baud:", flush=True)
        receive(port, sys.stdout.buffer)
    return 0


if __name__ == "__main__":
    sys.exit(main())