"""List the serial ports found on the system."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable

from ..backend import available_ports
from ..errors import SerialError
from ..port import PortType, SerialPortInfo

_TYPE_LABELS = {
    PortType.USB: "USB",
    PortType.BLUETOOTH: "Bluetooth",
    PortType.PCI: "PCI",
    PortType.UNKNOWN: "Unknown",
}


def format_ports(ports: Iterable[SerialPortInfo]) -> str:
    """Describe ``ports``, sorted by name so that runs are easy to compare."""
    ordered = sorted(ports, key=lambda info: info.port_name)
    if not ordered:
        header = "No ports found."
    elif len(ordered) == 1:
        header = "Found 1 port:"
    else:
        header = f"Found {len(ordered)} ports:"

    lines = [header]
    for info in ordered:
        lines.append(f"    {info.port_name}")
        lines.append(f"        Type: {_TYPE_LABELS[info.port_type]}")
        usb = info.usb
        if usb is not None:
            interface = "" if usb.interface is None else f"{usb.interface:02x}"
            lines += [
                f"        VID: {usb.vid:04x}",
                f"        PID: {usb.pid:04x}",
                f"        Interface: {interface}",
                f"        Serial Number: {usb.serial_number or ''}",
                f"        Manufacturer: {usb.manufacturer or ''}",
                f"        Product: {usb.product or ''}",
            ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """List the serial ports on the system."""
    parser = argparse.ArgumentParser(description="List the serial ports on the system")
    parser.parse_args(argv)
    try:
        ports = available_ports()
    except SerialError as error:
        print(repr(error), file=sys.stderr)
        print("Error listing serial ports", file=sys.stderr)
        return 0
    print(format_ports(ports))
    return 0


if __name__ == "__main__":
    sys.exit(main())