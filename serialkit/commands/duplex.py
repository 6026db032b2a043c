"""Read from a serial port while a clone of it writes from another thread."""

from __future__ import annotations

import argparse
import errno
import itertools
import sys
import threading
from typing import TextIO

from ..backend import available_ports
from ..builder import new
from ..errors import SerialError
from ..port import SerialPort

_PATTERN = bytes([5, 6, 7, 8])
_WRITE_PERIOD = 1.0


def _write_periodically(port: SerialPort, stop: threading.Event) -> None:
    with port:
        while not stop.is_set():
            port.write(_PATTERN)
            stop.wait(_WRITE_PERIOD)


def duplex(port: SerialPort, iterations: int | None = None, out: TextIO | None = None) -> int:
    """Read single bytes from ``port`` while a clone sends a pattern every second.

    Makes ``iterations`` read attempts, or reads forever when it is ``None``,
    printing each byte received to ``out``. Returns the number of bytes received.
    """
    out = sys.stdout if out is None else out
    clone = port.try_clone()
    stop = threading.Event()
    writer = threading.Thread(target=_write_periodically, args=(clone, stop), daemon=True)
    writer.start()

    received = 0
    attempts = itertools.count() if iterations is None else range(iterations)
    try:
        for _ in attempts:
            try:
                data = port.read(1)
            except SerialError as error:
                if error.errno != errno.ETIMEDOUT:
                    print(repr(error), file=sys.stderr)
                continue
            if len(data) == 1:
                print(f"Received: [{data[0]}]", file=out)
                received += 1
    finally:
        stop.set()
        writer.join()
    return received


def main(argv: list[str] | None = None) -> int:
    """Run the duplex check on the first serial port found."""
    parser = argparse.ArgumentParser(
        description="Read from the first serial port while a clone of it writes"
    )
    parser.parse_args(argv)

    try:
        ports = available_ports()
    except SerialError as error:
        print(f"No serial port: {error}", file=sys.stderr)
        return 1
    if not ports:
        print("No serial port", file=sys.stderr)
        return 1

    try:
        port = new(ports[0].port_name, 9600).open()
    except SerialError as error:
        print(f"Failed to open serial port: {error}", file=sys.stderr)
        return 1

    with port:
        try:
            duplex(port)
        except SerialError as error:
            print(f"Failed to clone: {error}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())