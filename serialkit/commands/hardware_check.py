"""Exercise real serial ports through many configurations.

Run it on a single port with nothing attached, on a single port wired in
loopback (RX to TX) with ``--loopback``, or on two ports wired to each other
with ``--loopback-port``.
"""

from __future__ import annotations

import argparse
import contextlib
import sys
from typing import Any, TextIO

from ..builder import new
from ..errors import SerialError
from ..port import SerialPort
from ..settings import ClearBuffer, DataBits, FlowControl, Parity, StopBits

TEST_MESSAGE = b"Test Message"

_SINGLE_PORT_BAUD_RATES = (9600, 38_400, 115_200)
_NON_STANDARD_BAUD_RATES = (10_000, 600_000, 1_800_000)
_ARBITRARY_RATE_HINT = " (does this platform & port support arbitrary baud rates?)"
_DUAL_PORT_BAUD_RATES = (
    (2_000_000, _ARBITRARY_RATE_HINT),
    (115_200, ""),
    (57_600, ""),
    (10_000, _ARBITRARY_RATE_HINT),
    (9600, ""),
)


def _check_baud_rate(port: SerialPort, baud_rate: int, out: TextIO) -> None:
    try:
        port.baud_rate = baud_rate
    except SerialError as error:
        print(f"  {baud_rate}: FAILED ({error})", file=out)
    try:
        actual = port.baud_rate
    except SerialError:
        print(f"  {baud_rate}: FAILED (error retrieving baud rate)", file=out)
        return
    if actual != baud_rate:
        print(
            f"  {baud_rate}: FAILED (baud rate {actual} does not match set baud rate "
            f"{baud_rate})",
            file=out,
        )
    else:
        print(f"  {baud_rate}: success", file=out)


def _check_setting(port: SerialPort, attribute: str, value: Any, out: TextIO) -> None:
    label = attribute.replace("_", " ")
    try:
        setattr(port, attribute, value)
    except SerialError as error:
        print(f"  {value}: FAILED ({error})", file=out)
        return
    try:
        actual = getattr(port, attribute)
    except SerialError:
        print(f"FAILED to retrieve {label}", file=out)
        return
    if actual != value:
        if attribute == "stop_bits":
            print(f"FAILED, stop bits {actual} does not match set stop bits {value}", file=out)
        else:
            print(
                f"  {value}: FAILED ({label} {actual} does not match set {label} {value})",
                file=out,
            )
    else:
        print(f"  {value}: success", file=out)


def _check_clear(port: SerialPort, buffer: ClearBuffer, out: TextIO) -> None:
    label = buffer.name.capitalize()
    try:
        port.clear(buffer)
    except SerialError as error:
        print(f"  {label}: FAILED ({error})", file=out)
    else:
        print(f"  {label}: success", file=out)


def _check_query(port: SerialPort, method: str, out: TextIO) -> None:
    try:
        getattr(port, method)()
    except SerialError as error:
        print(f"  {method}: FAILED ({error})", file=out)
    else:
        print(f"  {method}: success", file=out)


def set_defaults(port: SerialPort) -> None:
    """Put ``port`` into 9600 baud, 8N1, software flow control, one second timeout."""
    port.baud_rate = 9600
    port.data_bits = DataBits.EIGHT
    port.flow_control = FlowControl.SOFTWARE
    port.parity = Parity.NONE
    port.stop_bits = StopBits.ONE
    port.timeout = 1.0


def check_single_port(port: SerialPort, loopback: bool, out: TextIO) -> None:
    """Run every setting through ``port`` and report each result to ``out``.

    With ``loopback`` the port must echo what it sends; the message read back
    is then checked too, and ``ValueError`` is raised if it differs.
    """
    print(f"Testing '{port.name}':", file=out)

    print("Testing baud rates...", file=out)
    for baud_rate in _SINGLE_PORT_BAUD_RATES:
        _check_baud_rate(port, baud_rate, out)

    print("Testing non-standard baud rates...", file=out)
    for baud_rate in _NON_STANDARD_BAUD_RATES:
        _check_baud_rate(port, baud_rate, out)

    print("Testing data bits...", file=out)
    for data_bits in (DataBits.FIVE, DataBits.SIX, DataBits.SEVEN, DataBits.EIGHT):
        _check_setting(port, "data_bits", data_bits, out)

    print("Testing flow control...", file=out)
    for flow_control in (FlowControl.SOFTWARE, FlowControl.HARDWARE, FlowControl.NONE):
        _check_setting(port, "flow_control", flow_control, out)

    print("Testing parity...", file=out)
    for parity in (Parity.ODD, Parity.EVEN, Parity.NONE):
        _check_setting(port, "parity", parity, out)

    print("Testing stop bits...", file=out)
    for stop_bits in (StopBits.TWO, StopBits.ONE):
        _check_setting(port, "stop_bits", stop_bits, out)

    print("Testing bytes to read and write...", file=out)
    _check_query(port, "bytes_to_write", out)
    _check_query(port, "bytes_to_read", out)

    print("Test clearing software buffers...", file=out)
    for buffer in (ClearBuffer.INPUT, ClearBuffer.OUTPUT, ClearBuffer.ALL):
        _check_clear(port, buffer, out)

    print("Testing data transmission...", end="", file=out)
    out.flush()
    set_defaults(port)
    port.write(TEST_MESSAGE)
    print("success", file=out)

    if loopback:
        print("Testing data reception...", end="", file=out)
        with contextlib.suppress(SerialError):
            port.timeout = 0.25
        try:
            received = port.read_exact(len(TEST_MESSAGE))
        except SerialError as error:
            print(f"FAILED ({error})", file=out)
        else:
            if received != TEST_MESSAGE:
                raise ValueError("Received message does not match sent")
            print("success", file=out)


def check_test_message(sender: SerialPort, receiver: SerialPort, out: TextIO) -> None:
    """Send the test message from ``sender`` and check that ``receiver`` gets it.

    A read error is reported to ``out``; a message that arrives altered raises
    ``ValueError``.
    """
    sender.clear(ClearBuffer.ALL)
    receiver.clear(ClearBuffer.ALL)

    sender.write(TEST_MESSAGE)
    sender.flush()

    try:
        received = receiver.read_exact(len(TEST_MESSAGE))
    except SerialError as error:
        print(f"FAILED: {error!r}", file=out)
        return
    if received != TEST_MESSAGE:
        raise ValueError(
            f"Received message does not match sent: {received.hex()} != {TEST_MESSAGE.hex()}"
        )
    print("        success", file=out)


def _set_both_baud_rates(port1: SerialPort, port2: SerialPort, baud_rate: int) -> bool:
    for port in (port1, port2):
        try:
            port.baud_rate = baud_rate
        except SerialError:
            return False
    return True


def check_dual_ports(port1: SerialPort, port2: SerialPort, out: TextIO) -> None:
    """Exchange the test message both ways between two connected ports."""
    print(f"Testing paired ports '{port1.name}' and '{port2.name}':", file=out)

    set_defaults(port1)
    set_defaults(port2)

    print(f"  Transmitting from {port1.name} to {port2.name}...", file=out)

    for baud_rate, hint in _DUAL_PORT_BAUD_RATES:
        print(f"     At {baud_rate},8,n,1,noflow...", file=out)
        out.flush()
        if _set_both_baud_rates(port1, port2, baud_rate):
            check_test_message(port1, port2, out)
            check_test_message(port2, port1, out)
        else:
            print(f"FAILED{hint}", file=out)

    for flow_control, label in ((FlowControl.SOFTWARE, "softflow"), (FlowControl.HARDWARE, "hardflow")):
        port1.flow_control = flow_control
        port2.flow_control = flow_control
        print(f"     At 9600,8,n,1,{label}...", file=out)
        out.flush()
        check_test_message(port1, port2, out)
        check_test_message(port2, port1, out)


def main(argv: list[str] | None = None) -> int:
    """Check the capabilities of one port, or of two ports wired together."""
    parser = argparse.ArgumentParser(description="Test hardware capabilities of serial ports")
    parser.add_argument("port", help="The device path to a serial port")
    parser.add_argument(
        "--loopback",
        action="store_true",
        help=(
            "Run extra tests if the port is configured for hardware loopback. "
            "Mutually exclusive with the --loopback-port option"
        ),
    )
    parser.add_argument(
        "--loopback-port",
        default="",
        help=(
            "The device path of a second serial port that is connected to the first "
            "serial port. Mutually exclusive with the --loopback option."
        ),
    )
    args = parser.parse_args(argv)

    if args.loopback and args.loopback_port:
        print(
            "ERROR: loopback mode can only be enabled when a single port is specified.",
            file=sys.stderr,
        )
        return 1

    with contextlib.ExitStack() as stack:
        try:
            port1 = stack.enter_context(new(args.port, 9600).open())
        except SerialError as error:
            print(f'Failed to open "{args.port}". Error: {error}', file=sys.stderr)
            return 1
        try:
            check_single_port(port1, args.loopback, sys.stdout)

            if args.loopback_port:
                try:
                    port2 = stack.enter_context(new(args.loopback_port, 9600).open())
                except SerialError as error:
                    print(
                        f'Failed to open "{args.loopback_port}". Error: {error}',
                        file=sys.stderr,
                    )
                    return 1
                check_single_port(port2, False, sys.stdout)
                check_dual_ports(port1, port2, sys.stdout)
        except (SerialError, ValueError) as error:
            print(f"Error: {error}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())