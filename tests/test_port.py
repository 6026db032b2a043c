import pytest

from serialkit.errors import ErrorKind, SerialError
from serialkit.port import PortType, SerialPort, SerialPortInfo, UsbPortInfo
from serialkit.settings import ClearBuffer, DataBits, FlowControl, Parity, StopBits


class MemoryPort(SerialPort):
    """An in-memory port that hands out at most ``chunk`` bytes per read."""

    def __init__(self, incoming=b"", name="/dev/fake0", chunk=1, broken_baud=False):
        self._incoming = bytearray(incoming)
        self.written = bytearray()
        self._name = name
        self._chunk = chunk
        self._broken_baud = broken_baud
        self._baud = 9600
        self._data_bits = DataBits.EIGHT
        self._flow = FlowControl.NONE
        self._parity = Parity.NONE
        self._stop = StopBits.ONE
        self._timeout = 0.0
        self.closed = False

    @property
    def name(self):
        return self._name

    @property
    def baud_rate(self):
        if self._broken_baud:
            raise SerialError(ErrorKind.UNKNOWN, "no baud rate")
        return self._baud

    @baud_rate.setter
    def baud_rate(self, value):
        self._baud = value

    @property
    def data_bits(self):
        return self._data_bits

    @data_bits.setter
    def data_bits(self, value):
        self._data_bits = value

    @property
    def flow_control(self):
        return self._flow

    @flow_control.setter
    def flow_control(self, value):
        self._flow = value

    @property
    def parity(self):
        return self._parity

    @parity.setter
    def parity(self, value):
        self._parity = value

    @property
    def stop_bits(self):
        return self._stop

    @stop_bits.setter
    def stop_bits(self, value):
        self._stop = value

    @property
    def timeout(self):
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        self._timeout = value

    def write_request_to_send(self, level):
        self.rts = level

    def write_data_terminal_ready(self, level):
        self.dtr = level

    def read_clear_to_send(self):
        return False

    def read_data_set_ready(self):
        return False

    def read_ring_indicator(self):
        return False

    def read_carrier_detect(self):
        return False

    def bytes_to_read(self):
        return len(self._incoming)

    def bytes_to_write(self):
        return 0

    def clear(self, buffer):
        if buffer in (ClearBuffer.INPUT, ClearBuffer.ALL):
            self._incoming.clear()

    def try_clone(self):
        return self

    def set_break(self):
        pass

    def clear_break(self):
        pass

    def read(self, size):
        taken = bytes(self._incoming[: min(size, self._chunk)])
        del self._incoming[: len(taken)]
        return taken

    def write(self, data):
        self.written += data
        return len(data)

    def flush(self):
        pass

    def close(self):
        self.closed = True


def test_serial_port_is_abstract():
    with pytest.raises(TypeError):
        SerialPort()


def test_read_exact_assembles_chunks():
    port = MemoryPort(b"abcdef", chunk=2)
    assert SerialPort.read_exact(port, 6) == b"abcdef"
    assert port.bytes_to_read() == 0


def test_read_exact_leaves_remaining_data():
    port = MemoryPort(b"abcdefghijkl", chunk=4)
    assert SerialPort.read_exact(port, 6) == b"abcdef"
    assert SerialPort.read_exact(port, 6) == b"ghijkl"


def test_read_exact_zero_reads_nothing():
    port = MemoryPort(b"abc")
    assert SerialPort.read_exact(port, 0) == b""
    assert port.bytes_to_read() == 3


def test_read_exact_raises_when_stream_ends():
    port = MemoryPort(b"ab")
    with pytest.raises(SerialError) as info:
        SerialPort.read_exact(port, 4)
    assert info.value.kind is ErrorKind.IO


def test_context_manager_closes():
    port = MemoryPort()
    entered = SerialPort.__enter__(port)
    assert entered is port
    assert not port.closed
    SerialPort.__exit__(port, None, None, None)
    assert port.closed


def test_context_manager_closes_on_error():
    port = MemoryPort()
    error = RuntimeError("boom")
    suppressed = SerialPort.__exit__(port, RuntimeError, error, None)
    assert not suppressed
    assert port.closed


def test_repr_lists_settings():
    port = MemoryPort(name=None)
    port.baud_rate = 115200
    port.stop_bits = StopBits.TWO
    text = SerialPort.__repr__(port)
    assert text.startswith("SerialPort ( ")
    assert text.endswith(")")
    assert "baud_rate: 115200 " in text
    assert "stop_bits: Two " in text
    assert "name:" not in text


def test_repr_skips_failing_settings():
    port = MemoryPort(broken_baud=True)
    assert SerialPort.__repr__(port) == (
        "SerialPort ( name: /dev/fake0 data_bits: Eight flow_control: None "
        "parity: None stop_bits: One )"
    )


def test_usb_port_info_defaults():
    info = UsbPortInfo(vid=0x1234, pid=0xABCD)
    assert info.serial_number is None
    assert info.manufacturer is None
    assert info.product is None
    assert info.interface is None


@pytest.mark.parametrize("vid, pid", [(-1, 0), (0x10000, 0), (0, 0x10000)])
def test_usb_port_info_rejects_out_of_range_ids(vid, pid):
    with pytest.raises(ValueError):
        UsbPortInfo(vid=vid, pid=pid)


def test_usb_port_info_rejects_large_interface():
    with pytest.raises(ValueError):
        UsbPortInfo(vid=1, pid=2, interface=256)


def test_serial_port_info_usb_requires_details():
    with pytest.raises(ValueError):
        SerialPortInfo("/dev/ttyUSB0", PortType.USB)


def test_serial_port_info_non_usb_rejects_details():
    with pytest.raises(ValueError):
        SerialPortInfo("/dev/ttyS0", PortType.PCI, UsbPortInfo(vid=1, pid=2))


def test_serial_port_info_equality():
    usb = UsbPortInfo(vid=1, pid=2, product="placeholder")
    first = SerialPortInfo("/dev/ttyUSB0", PortType.USB, usb)
    second = SerialPortInfo("/dev/ttyUSB0", PortType.USB, UsbPortInfo(vid=1, pid=2, product="placeholder"))
    assert first == second
    assert SerialPortInfo("/dev/ttyS0").port_type is PortType.UNKNOWN