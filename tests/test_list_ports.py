from types import SimpleNamespace
from unittest import mock

import pytest

from serialkit.commands.list_ports import format_ports, main
from serialkit.port import PortType, SerialPortInfo, UsbPortInfo


def test_no_ports():
    assert format_ports([]) == "No ports found."


def test_single_unknown_port():
    text = format_ports([SerialPortInfo("/dev/ttyS0")])
    assert text == "Found 1 port:\n    /dev/ttyS0\n        Type: Unknown"


def test_ports_are_sorted_by_name():
    ports = [SerialPortInfo(name) for name in ("/dev/ttyS2", "/dev/ttyS0", "/dev/ttyS1")]
    lines = format_ports(ports).splitlines()
    assert lines[0] == "Found 3 ports:"
    names = [line.strip() for line in lines if line.startswith("    /dev")]
    assert names == sorted(p.port_name for p in ports)


@pytest.mark.parametrize(
    "port_type, label",
    [(PortType.BLUETOOTH, "Bluetooth"), (PortType.PCI, "PCI"), (PortType.UNKNOWN, "Unknown")],
)
def test_non_usb_labels(port_type, label):
    lines = format_ports([SerialPortInfo("COM3", port_type)]).splitlines()
    assert lines[-1] == f"        Type: {label}"


def test_usb_details():
    usb = UsbPortInfo(
        vid=0x2341, pid=0x43, manufacturer="Example Corp", product="Widget", interface=2
    )
    lines = format_ports([SerialPortInfo("/dev/ttyACM0", PortType.USB, usb)]).splitlines()
    assert "        Type: USB" in lines
    assert "        VID: 2341" in lines
    assert "        PID: 0043" in lines
    assert "        Interface: 02" in lines
    assert "        Serial Number: " in lines
    assert "        Manufacturer: Example Corp" in lines
    assert "        Product: Widget" in lines


def test_usb_without_interface_prints_empty_value():
    usb = UsbPortInfo(vid=1, pid=2)
    lines = format_ports([SerialPortInfo("/dev/ttyUSB0", PortType.USB, usb)]).splitlines()
    assert "        Interface: " in lines


def test_main_lists_found_ports(capsys):
    found = SimpleNamespace(
        device="/dev/ttyUSB0",
        vid=0x1234,
        pid=0x5678,
        serial_number="SN-EXAMPLE",
        manufacturer="Acme",
        product="Widget",
        location=None,
        hwid="",
        description="",
    )
    with mock.patch("serial.tools.list_ports.comports", return_value=[found]):
        assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Found 1 port:")
    assert "        Type: USB" in out
    assert "        Serial Number: SN-EXAMPLE" in out


def test_main_reports_listing_error(capsys):
    with mock.patch("serial.tools.list_ports.comports", side_effect=OSError("boom")):
        assert main([]) == 0
    err = capsys.readouterr().err
    assert "Error listing serial ports" in err
    assert "boom" in err