"""Write a string to a serial port at a fixed rate."""

from __future__ import annotations

import argparse
import errno
import sys
import time
from typing import TextIO

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort
from ..settings import DataBits, StopBits
from .receive_data import parse_baud

_U32_MAX = 2**32 - 1


def _parse_rate(text: str) -> int:
    if text.isascii() and text.isdigit() and int(text) <= _U32_MAX:
        return int(text)
    raise argparse.ArgumentTypeError(f"Invalid rate '{text}' specified")


def transmit(port: SerialPort, text: str, rate: int, out: TextIO) -> None:
    """Write ``text`` to ``port`` ``rate`` times a second, echoing it to ``out``.

    A rate of 0 sends the text once and returns.
    """
    payload = text.encode()
    delay = int(1000 / rate) / 1000 if rate else 0.0
    while True:
        try:
            port.write(payload)
        except SerialError as error:
            if error.errno != errno.ETIMEDOUT:
                print(repr(error), file=sys.stderr)
        else:
            out.write(text)
            out.flush()
        if rate == 0:
            return
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    """Send a string repeatedly over a serial port."""
    parser = argparse.ArgumentParser(description="Write bytes to a serial port at 1Hz")
    parser.add_argument("port", help="The device path to a serial port")
    parser.add_argument("baud", type=parse_baud, help="The baud rate to connect at")
    parser.add_argument(
        "--stop-bits", choices=["1", "2"], default="1", help="Number of stop bits to use"
    )
    parser.add_argument(
        "--data-bits",
        choices=["5", "6", "7", "8"],
        default="8",
        help="Number of data bits to use",
    )
    parser.add_argument(
        "--rate",
        type=_parse_rate,
        default=1,
        help="Frequency (Hz) to repeat transmission of the pattern (0 indicates sending only once",
    )
    parser.add_argument("--string", default=".", help="String to transmit")
    args = parser.parse_args(argv)

    builder = (
        new(args.port, args.baud)
        .with_stop_bits(StopBits(int(args.stop_bits)))
        .with_data_bits(DataBits(int(args.data_bits)))
    )
    print(builder)
    try:
        port = builder.open()
    except SerialError as error:
        print(f'Failed to open "{args.port}". Error: {error}', file=sys.stderr)
        return 1

    with port:
        print(
            f"Writing '{args.string}' to {args.port} at {args.baud} baud at {args.rate}Hz"
        )
        transmit(port, args.string, args.rate, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())