"""Report the bytes waiting to be read and clear the input buffer on request."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
import time
from typing import BinaryIO, TextIO

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort
from ..settings import ClearBuffer
from .receive_data import parse_baud

_CHUNK = 32
_READ_TIMEOUT = 0.01
_POLL_INTERVAL = 0.1


def input_service(stream: BinaryIO) -> queue.Queue[bool]:
    """Watch ``stream`` from a background thread.

    The returned queue gets ``True`` for every chunk of input read and a final
    ``False`` once the stream ends.
    """
    events: queue.Queue[bool] = queue.Queue()
    read = getattr(stream, "read1", stream.read)

    def pump() -> None:
        try:
            while read(_CHUNK):
                events.put(True)
        finally:
            events.put(False)

    threading.Thread(target=pump, daemon=True).start()
    return events


def watch_input(
    port: SerialPort, events: queue.Queue[bool], out: TextIO, interval: float = _POLL_INTERVAL
) -> None:
    """Print how many bytes wait on ``port`` every ``interval`` seconds.

    Clears the input buffer for each ``True`` in ``events`` and stops at ``False``.
    """
    while True:
        print(f"Bytes available to read: {port.bytes_to_read()}", file=out)
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
            port.clear(ClearBuffer.INPUT)
        time.sleep(interval)


def main(argv: list[str] | None = None) -> int:
    """Watch a port's input buffer and clear it when Return is pressed."""
    parser = argparse.ArgumentParser(
        description=(
            "Reports how many bytes are waiting to be read and allows the user to "
            "clear the input buffer"
        )
    )
    parser.add_argument("port", help="The device path to a serial port")
    parser.add_argument("baud", help="The baud rate to connect at")
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
        watch_input(port, input_service(sys.stdin.buffer), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())