"""Serial ports backed by pyserial."""

from __future__ import annotations

import contextlib
import copy
import errno
import math
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import serial
from serial.tools import list_ports

from .errors import ErrorKind, SerialError
from .port import PortType, SerialPort, SerialPortInfo, UsbPortInfo
from .settings import ClearBuffer, DataBits, FlowControl, Parity, StopBits

if TYPE_CHECKING:
    from .builder import SerialPortBuilder

# Longer timeouts are clamped to what a millisecond poll can express.
_MAX_TIMEOUT = (2**31 - 1) / 1000
_MAX_BAUD_RATE = 2**32 - 1
_NO_DEVICE_ERRNOS = frozenset({errno.ENOENT, errno.ENODEV, errno.ENXIO})

_PARITY_TO_PYSERIAL = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.ODD: serial.PARITY_ODD,
    Parity.EVEN: serial.PARITY_EVEN,
}
_PARITY_FROM_PYSERIAL = {code: parity for parity, code in _PARITY_TO_PYSERIAL.items()}


def _translate(error: BaseException) -> SerialError:
    """Turn an exception raised by pyserial into a ``SerialError``."""
    if isinstance(error, SerialError):
        return error
    if isinstance(error, serial.SerialTimeoutException):
        return SerialError(ErrorKind.IO, str(error) or "Operation timed out", errno.ETIMEDOUT)
    if isinstance(error, ValueError):
        return SerialError(ErrorKind.INVALID_INPUT, str(error))
    if isinstance(error, OSError):
        if error.errno in _NO_DEVICE_ERRNOS:
            return SerialError(ErrorKind.NO_DEVICE, str(error), error.errno)
        return SerialError.from_os_error(error)
    return SerialError(ErrorKind.UNKNOWN, str(error))


@contextlib.contextmanager
def _translated() -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError) as error:
        raise _translate(error) from error


def _pyserial_timeout(seconds: float) -> float:
    return min(seconds, _MAX_TIMEOUT)


def _timed_out() -> SerialError:
    return SerialError(ErrorKind.IO, "Operation timed out", errno.ETIMEDOUT)


class _SharedHandle:
    """A pyserial handle shared by a port and its clones, closed by the last one."""

    def __init__(self, handle: Any) -> None:
        self.handle = handle
        self._users = 1
        self._lock = threading.Lock()

    def acquire(self) -> None:
        with self._lock:
            if self._users == 0:
                raise SerialError(ErrorKind.IO, "port is closed", errno.EBADF)
            self._users += 1

    def release(self) -> None:
        with self._lock:
            self._users -= 1
            last = self._users == 0
        if last:
            self.handle.close()


class PySerialPort(SerialPort):
    """A serial port driven through a pyserial handle.

    Clones share the underlying device; the device is closed when the last
    handle on it is closed. The read timeout is kept per handle.
    """

    def __init__(self, handle: Any, name: str | None = None) -> None:
        self._shared = _SharedHandle(handle)
        self._name = name
        self._timeout = math.inf if handle.timeout is None else float(handle.timeout)
        self._closed = False

    @property
    def _handle(self) -> Any:
        if self._closed:
            raise SerialError(ErrorKind.IO, "port is closed", errno.EBADF)
        return self._shared.handle

    def _configure(self, attribute: str, value: Any) -> None:
        """Set a handle attribute, restoring the old value if the device refuses."""
        handle = self._handle
        previous = getattr(handle, attribute)
        try:
            setattr(handle, attribute, value)
        except (OSError, ValueError) as error:
            with contextlib.suppress(OSError, ValueError):
                setattr(handle, attribute, previous)
            raise _translate(error) from error

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def baud_rate(self) -> int:
        return int(self._handle.baudrate)

    @baud_rate.setter
    def baud_rate(self, value: int) -> None:
        if not 0 <= value <= _MAX_BAUD_RATE:
            raise SerialError(ErrorKind.INVALID_INPUT, f"invalid baud rate {value}")
        self._configure("baudrate", value)

    @property
    def data_bits(self) -> DataBits:
        size = self._handle.bytesize
        try:
            return DataBits(size)
        except ValueError:
            raise SerialError(ErrorKind.UNKNOWN, f"unsupported data bits {size!r}") from None

    @data_bits.setter
    def data_bits(self, value: DataBits) -> None:
        self._configure("bytesize", DataBits(value).value)

    @property
    def flow_control(self) -> FlowControl:
        handle = self._handle
        if handle.xonxoff:
            return FlowControl.SOFTWARE
        if handle.rtscts:
            return FlowControl.HARDWARE
        return FlowControl.NONE

    @flow_control.setter
    def flow_control(self, value: FlowControl) -> None:
        value = FlowControl(value)
        self._configure("xonxoff", value is FlowControl.SOFTWARE)
        self._configure("rtscts", value is FlowControl.HARDWARE)

    @property
    def parity(self) -> Parity:
        code = self._handle.parity
        try:
            return _PARITY_FROM_PYSERIAL[code]
        except KeyError:
            raise SerialError(ErrorKind.UNKNOWN, f"unsupported parity {code!r}") from None

    @parity.setter
    def parity(self, value: Parity) -> None:
        self._configure("parity", _PARITY_TO_PYSERIAL[Parity(value)])

    @property
    def stop_bits(self) -> StopBits:
        bits = self._handle.stopbits
        try:
            return StopBits(bits)
        except ValueError:
            raise SerialError(ErrorKind.UNKNOWN, f"unsupported stop bits {bits!r}") from None

    @stop_bits.setter
    def stop_bits(self, value: StopBits) -> None:
        self._configure("stopbits", StopBits(value).value)

    @property
    def timeout(self) -> float:
        return self._timeout

    @timeout.setter
    def timeout(self, value: float) -> None:
        seconds = float(value)
        if math.isnan(seconds) or seconds < 0:
            raise SerialError(ErrorKind.INVALID_INPUT, f"invalid timeout {value!r}")
        self._configure("timeout", _pyserial_timeout(seconds))
        self._timeout = seconds

    def write_request_to_send(self, level: bool) -> None:
        self._configure("rts", bool(level))

    def write_data_terminal_ready(self, level: bool) -> None:
        self._configure("dtr", bool(level))

    def read_clear_to_send(self) -> bool:
        with _translated():
            return bool(self._handle.cts)

    def read_data_set_ready(self) -> bool:
        with _translated():
            return bool(self._handle.dsr)

    def read_ring_indicator(self) -> bool:
        with _translated():
            return bool(self._handle.ri)

    def read_carrier_detect(self) -> bool:
        with _translated():
            return bool(self._handle.cd)

    def bytes_to_read(self) -> int:
        with _translated():
            return int(self._handle.in_waiting)

    def bytes_to_write(self) -> int:
        handle = self._handle
        if not hasattr(type(handle), "out_waiting") and not hasattr(handle, "out_waiting"):
            raise SerialError(ErrorKind.UNKNOWN, "output queue size is not available")
        with _translated():
            return int(handle.out_waiting)

    def clear(self, buffer: ClearBuffer) -> None:
        buffer = ClearBuffer(buffer)
        handle = self._handle
        with _translated():
            if buffer in (ClearBuffer.INPUT, ClearBuffer.ALL):
                handle.reset_input_buffer()
            if buffer in (ClearBuffer.OUTPUT, ClearBuffer.ALL):
                handle.reset_output_buffer()

    def try_clone(self) -> PySerialPort:
        self._handle
        self._shared.acquire()
        return copy.copy(self)

    def set_break(self) -> None:
        self._configure("break_condition", True)

    def clear_break(self) -> None:
        self._configure("break_condition", False)

    def read(self, size: int) -> bytes:
        if size <= 0:
            return b""
        handle = self._handle
        wanted = _pyserial_timeout(self._timeout)
        with _translated():
            if handle.timeout != wanted:
                handle.timeout = wanted
            first = handle.read(1)
            if not first:
                raise _timed_out()
            extra = min(size - 1, int(handle.in_waiting))
            rest = handle.read(extra) if extra > 0 else b""
        return bytes(first) + bytes(rest)

    def write(self, data: bytes) -> int:
        payload = bytes(data)
        handle = self._handle
        with _translated():
            handle.write(payload)
        return len(payload)

    def flush(self) -> None:
        handle = self._handle
        with _translated():
            handle.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        with _translated():
            self._shared.release()


def open_port(builder: SerialPortBuilder) -> PySerialPort:
    """Open the device described by ``builder``.

    The path may be a device path or any URL pyserial understands, such as
    ``loop://``.
    """
    try:
        handle = serial.serial_for_url(builder.path, do_not_open=True)
        handle.baudrate = builder.baud_rate
        handle.bytesize = builder.data_bits.value
        handle.parity = _PARITY_TO_PYSERIAL[builder.parity]
        handle.stopbits = builder.stop_bits.value
        handle.xonxoff = builder.flow_control is FlowControl.SOFTWARE
        handle.rtscts = builder.flow_control is FlowControl.HARDWARE
        handle.timeout = _pyserial_timeout(builder.timeout)
        if builder.dtr_on_open is not None:
            handle.dtr = builder.dtr_on_open
        handle.open()
    except (OSError, ValueError) as error:
        raise _translate(error) from error
    port = PySerialPort(handle, builder.path)
    port._timeout = builder.timeout
    return port


def _usb_interface(location: str | None) -> int | None:
    if not location or ":" not in location:
        return None
    tail = location.rsplit(":", 1)[1]
    try:
        number = int(tail.rsplit(".", 1)[-1])
    except ValueError:
        return None
    return number if 0 <= number <= 0xFF else None


def _describe(info: Any) -> SerialPortInfo:
    vid = getattr(info, "vid", None)
    pid = getattr(info, "pid", None)
    if vid is not None and pid is not None:
        usb = UsbPortInfo(
            vid=vid,
            pid=pid,
            serial_number=getattr(info, "serial_number", None),
            manufacturer=getattr(info, "manufacturer", None),
            product=getattr(info, "product", None),
            interface=_usb_interface(getattr(info, "location", None)),
        )
        return SerialPortInfo(info.device, PortType.USB, usb)
    hwid = (getattr(info, "hwid", None) or "").upper()
    description = (getattr(info, "description", None) or "").upper()
    if "BTHENUM" in hwid or "BLUETOOTH" in description:
        return SerialPortInfo(info.device, PortType.BLUETOOTH)
    if getattr(info, "subsystem", None) == "pci" or hwid.startswith("PCI"):
        return SerialPortInfo(info.device, PortType.PCI)
    return SerialPortInfo(info.device, PortType.UNKNOWN)


def available_ports() -> list[SerialPortInfo]:
    """List the serial ports on the system.

    A listed port is not guaranteed to exist or to be available.
    """
    with _translated():
        found = list_ports.comports()
    return [_describe(info) for info in found]