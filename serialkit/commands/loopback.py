"""Loopback test with simple timing statistics."""

from __future__ import annotations

import argparse
import math
import sys
import threading
import time
from dataclasses import dataclass, field

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort


@dataclass
class Stats:
    """Durations, in seconds, of repeated reads or writes of ``data``."""

    data: bytes
    iterations: int
    times: list[float] = field(default_factory=list)
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def start(self) -> None:
        """Start timing a transaction."""
        self._started = time.perf_counter()

    def stop(self) -> None:
        """Record the time since the last ``start``."""
        self.times.append(time.perf_counter() - self._started)

    def total(self) -> float:
        """Total time of all recorded transactions."""
        return sum(self.times, 0.0)

    def average(self) -> float:
        """Average time per transaction; NaN when nothing was recorded."""
        if not self.times:
            return math.nan
        return self.total() / len(self.times)

    def maximum(self) -> float:
        """Longest transaction time, or 0 when nothing was recorded."""
        return max(self.times, default=0.0)


def _verify(expected: bytes, received: bytes) -> None:
    for want, got in zip(expected, received):
        if want != got:
            raise ValueError(f"Expected byte '{want:02X}' but got '{got:02X}'")


def loopback_standard(port: SerialPort, read_stats: Stats, write_stats: Stats) -> None:
    """Write the data and read it back, alternately, on one handle.

    Raises ``ValueError`` when the data read back differs from what was sent.
    """
    for _ in range(read_stats.iterations):
        write_stats.start()
        port.write(write_stats.data)
        write_stats.stop()

        read_stats.start()
        received = port.read_exact(len(read_stats.data))
        read_stats.stop()

        _verify(read_stats.data, received)


def loopback_split(port: SerialPort, read_stats: Stats, write_stats: Stats) -> None:
    """Write on ``port`` while a clone of it reads the data back from another thread.

    The threads take turns: the reader waits for each write, the writer for
    each read. Raises ``ValueError`` when the data read back differs.
    """
    reader_port = port.try_clone()
    written = threading.Semaphore(0)
    read_done = threading.Semaphore(0)
    failures: list[BaseException] = []

    def reader() -> None:
        with reader_port:
            for _ in range(read_stats.iterations):
                written.acquire()
                try:
                    read_stats.start()
                    received = reader_port.read_exact(len(read_stats.data))
                    read_stats.stop()
                    _verify(read_stats.data, received)
                except BaseException as error:
                    failures.append(error)
                    return
                finally:
                    read_done.release()

    thread = threading.Thread(target=reader, daemon=True)
    thread.start()
    try:
        for _ in range(write_stats.iterations):
            write_stats.start()
            port.write(write_stats.data)
            write_stats.stop()

            written.release()
            read_done.acquire()
            if failures:
                break
    finally:
        # Let a reader still waiting for data finish its remaining rounds.
        for _ in range(read_stats.iterations):
            written.release()
        thread.join()
    if failures:
        raise failures[0]


def _parse_count(text: str) -> int:
    if text.isascii() and text.isdigit():
        return int(text)
    raise argparse.ArgumentTypeError(f"invalid count '{text}'")


def _parse_baud(text: str) -> int:
    if text.isascii() and text.isdigit() and int(text) <= 2**32 - 1:
        return int(text)
    raise argparse.ArgumentTypeError(f"invalid baud rate '{text}'")


def _parse_bytes(text: str) -> bytes:
    values = []
    for part in text.split(","):
        if not (part.isascii() and part.isdigit()) or int(part) > 0xFF:
            raise argparse.ArgumentTypeError(f"invalid byte '{part}'")
        values.append(int(part))
    return bytes(values)


def main(argv: list[str] | None = None) -> int:
    """Run a loopback test on a port whose RX and TX are connected."""
    parser = argparse.ArgumentParser(description="Serialport Example - Loopback")
    parser.add_argument("port", help="The device path to a serialport")
    parser.add_argument(
        "-i", "--iterations", type=_parse_count, default=100,
        help="The number of read/write iterations to perform",
    )
    parser.add_argument(
        "-l", "--length", type=_parse_count, default=8,
        help="The number of bytes written per transaction; ignored when --bytes is given",
    )
    parser.add_argument(
        "-b", "--baudrate", type=_parse_baud, default=115200,
        help="The baudrate to open the port with",
    )
    parser.add_argument(
        "--bytes", type=_parse_bytes, default=None,
        help="Comma separated bytes to write; by default the bytes count up",
    )
    parser.add_argument(
        "--split-port", action="store_true",
        help="Split the port to read/write from multiple threads",
    )
    args = parser.parse_args(argv)

    try:
        port = new(args.port, args.baudrate).with_timeout(math.inf).open()
    except SerialError as error:
        print(f'Failed to open "{args.port}". Error: {error}', file=sys.stderr)
        return 1

    data = args.bytes if args.bytes is not None else bytes(i % 256 for i in range(args.length))
    read_stats = Stats(data, args.iterations)
    write_stats = Stats(data, args.iterations)

    with port:
        try:
            if args.split_port:
                try:
                    loopback_split(port, read_stats, write_stats)
                except SerialError as error:
                    if read_stats.times or write_stats.times:
                        raise
                    print(f"Failed to clone port: {error}", file=sys.stderr)
                    return 3
            else:
                loopback_standard(port, read_stats, write_stats)
        except ValueError as error:
            print(error, file=sys.stderr)
            return 2

    denominator = read_stats.average() + write_stats.average()
    if denominator == 0:
        throughput = math.inf if data else math.nan
    else:
        throughput = len(data) / denominator

    print(f"Loopback {args.port}:")
    print(f"  data-length: {len(read_stats.data)} bytes")
    print(f"  iterations: {read_stats.iterations}")
    print("  read:")
    print(f"    total: {read_stats.total():.6f}s")
    print(f"    average: {read_stats.average():.6f}s")
    print(f"    max: {read_stats.maximum():.6f}s")
    print("  write:")
    print(f"    total: {write_stats.total():.6f}s")
    print(f"    average: {write_stats.average():.6f}s")
    print(f"    max: {write_stats.maximum():.6f}s")
    print(f"  total: {read_stats.total() + write_stats.total():.6f}s")
    print(f"  bytes/s: {throughput:.6f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())