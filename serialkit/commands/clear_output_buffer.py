"""Report the bytes waiting to be sent and clear the output buffer on request."""

from __future__ import annotations

import argparse
import errno
import queue
import sys
from typing import TextIO

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort
from ..settings import ClearBuffer
from .clear_input_buffer import input_service
from .receive_data import parse_baud

DEFAULT_BLOCK_SIZE = 128
_READ_TIMEOUT = 0.01


def _parse_block_size(text: str) -> int:
    if text.isascii() and text.isdigit():
        return int(text)
    raise argparse.ArgumentTypeError(f"invalid block size '{text}'")


def flood(port: SerialPort, block: bytes, events: queue.Queue[bool], out: TextIO) -> None:
    """Write ``block`` to ``port`` over and over to saturate its output buffer.

    Clears the output buffer for each ``True`` in ``events`` and stops at
    ``False``. After every round the number of queued bytes goes to ``out``.
    Write timeouts are ignored; other errors propagate.
    """
    while True:
        try:
            port.write(block)
        except SerialError as error:
            if error.errno != errno.ETIMEDOUT:
                raise

        try:
            request = events.get_nowait()
        except queue.Empty:
            pass
        else:
            if not request:
                print("Stopping.", file=out)
                return
            print(
                "------------------------- Discarding buffer ------------------------- ",
                file=out,
            )
            port.clear(ClearBuffer.OUTPUT)

        print(f"Bytes queued to send: {port.bytes_to_write()}", file=out)


def main(argv: list[str] | None = None) -> int:
    """Flood a port with data and clear its output buffer when Return is pressed."""
    parser = argparse.ArgumentParser(
        description=(
            "Reports how many bytes are waiting to be read and allows the user to "
            "clear the output buffer"
        )
    )
    parser.add_argument("port", help="The device path to a serial port")
    parser.add_argument("baud", help="The baud rate to connect at")
    parser.add_argument(
        "block_size",
        nargs="?",
        type=_parse_block_size,
        default=DEFAULT_BLOCK_SIZE,
        metavar="block-size",
        help=(
            "The size in bytes of the block of data to write to the port "
            f"(default: {DEFAULT_BLOCK_SIZE} bytes)"
        ),
    )
    args = parser.parse_args(argv)

    try:
        rate = parse_baud(args.baud)
    except argparse.ArgumentTypeError as error:
        print(f"Error: {error}")
        return 1
    try:
        port = new(args.port, rate).with_timeout(_READ_TIMEOUT).open()
    except SerialError as error:
        print(f"Error: Port '{args.port}' not available: {error}")
        return 1

    with port:
        print(f"Connected to {args.port} at {args.baud} baud")
        print("Ctrl+D (Unix) or Ctrl+Z (Win) to stop. Press Return to clear the buffer.")
        flood(port, bytes(args.block_size), input_service(sys.stdin.buffer), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())