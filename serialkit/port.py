"""The serial port interface and port descriptions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .errors import ErrorKind, SerialError
from .settings import ClearBuffer, DataBits, FlowControl, Parity, StopBits


class PortType(Enum):
    """How a serial port is attached to the system."""

    USB = "usb"
    PCI = "pci"
    BLUETOOTH = "bluetooth"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UsbPortInfo:
    """USB details of a serial port."""

    vid: int
    pid: int
    serial_number: str | None = None
    manufacturer: str | None = None
    product: str | None = None
    interface: int | None = None

    def __post_init__(self) -> None:
        for field_name in ("vid", "pid"):
            value = getattr(self, field_name)
            if not 0 <= value <= 0xFFFF:
                raise ValueError(f"{field_name} {value} does not fit in 16 bits")
        if self.interface is not None and not 0 <= self.interface <= 0xFF:
            raise ValueError(f"interface {self.interface} does not fit in 8 bits")


@dataclass(frozen=True)
class SerialPortInfo:
    """A serial port found on the system.

    ``usb`` is present exactly when ``port_type`` is ``PortType.USB``.
    """

    port_name: str
    port_type: PortType = PortType.UNKNOWN
    usb: UsbPortInfo | None = None

    def __post_init__(self) -> None:
        if (self.port_type is PortType.USB) != (self.usb is not None):
            raise ValueError("USB details must be given for USB ports and only for them")


class SerialPort(ABC):
    """A serial port device.

    Settings are properties; subclasses provide both getter and setter for
    each, and setters raise ``SerialError`` when the device refuses a value.
    ``timeout`` is in seconds. ``read`` returns at least one byte, raises a
    ``SerialError`` whose ``errno`` is ``ETIMEDOUT`` when no data arrives in
    time, and returns ``b""`` only at the end of the stream.
    """

    @property
    @abstractmethod
    def name(self) -> str | None:
        """The port's name, if it has one."""

    @property
    @abstractmethod
    def baud_rate(self) -> int:
        """The current baud rate."""

    @baud_rate.setter
    @abstractmethod
    def baud_rate(self, value: int) -> None: ...

    @property
    @abstractmethod
    def data_bits(self) -> DataBits:
        """The character size."""

    @data_bits.setter
    @abstractmethod
    def data_bits(self, value: DataBits) -> None: ...

    @property
    @abstractmethod
    def flow_control(self) -> FlowControl:
        """The flow control mode."""

    @flow_control.setter
    @abstractmethod
    def flow_control(self, value: FlowControl) -> None: ...

    @property
    @abstractmethod
    def parity(self) -> Parity:
        """The parity checking mode."""

    @parity.setter
    @abstractmethod
    def parity(self, value: Parity) -> None: ...

    @property
    @abstractmethod
    def stop_bits(self) -> StopBits:
        """The number of stop bits."""

    @stop_bits.setter
    @abstractmethod
    def stop_bits(self, value: StopBits) -> None: ...

    @property
    @abstractmethod
    def timeout(self) -> float:
        """The read timeout in seconds."""

    @timeout.setter
    @abstractmethod
    def timeout(self, value: float) -> None: ...

    @abstractmethod
    def write_request_to_send(self, level: bool) -> None:
        """Assert (``True``) or clear (``False``) the RTS signal."""

    @abstractmethod
    def write_data_terminal_ready(self, level: bool) -> None:
        """Assert (``True``) or clear (``False``) the DTR signal."""

    @abstractmethod
    def read_clear_to_send(self) -> bool:
        """Whether CTS is asserted."""

    @abstractmethod
    def read_data_set_ready(self) -> bool:
        """Whether DSR is asserted."""

    @abstractmethod
    def read_ring_indicator(self) -> bool:
        """Whether RI is asserted."""

    @abstractmethod
    def read_carrier_detect(self) -> bool:
        """Whether CD is asserted."""

    @abstractmethod
    def bytes_to_read(self) -> int:
        """Number of bytes waiting in the input buffer."""

    @abstractmethod
    def bytes_to_write(self) -> int:
        """Number of bytes in the output buffer awaiting transmission."""

    @abstractmethod
    def clear(self, buffer: ClearBuffer) -> None:
        """Discard the contents of the given buffer or buffers."""

    @abstractmethod
    def try_clone(self) -> SerialPort:
        """Return another handle on the same connection."""

    @abstractmethod
    def set_break(self) -> None:
        """Start transmitting a break."""

    @abstractmethod
    def clear_break(self) -> None:
        """Stop transmitting a break."""

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write all of ``data`` and return the number of bytes written."""

    @abstractmethod
    def flush(self) -> None:
        """Wait until all written data has been transmitted."""

    @abstractmethod
    def close(self) -> None:
        """Close this handle."""

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes, raising ``SerialError`` if the stream ends first."""
        chunks = bytearray()
        while len(chunks) < size:
            chunk = self.read(size - len(chunks))
            if not chunk:
                raise SerialError(ErrorKind.IO, "failed to fill whole buffer")
            chunks += chunk
        return bytes(chunks)

    def __enter__(self) -> SerialPort:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        parts = ["SerialPort ( "]
        name = self.name
        if name is not None:
            parts.append(f"name: {name} ")
        for label in ("baud_rate", "data_bits", "flow_control", "parity", "stop_bits"):
            try:
                value = getattr(self, label)
            except SerialError:
                continue
            parts.append(f"{label}: {value} ")
        parts.append(")")
        return "".join(parts)