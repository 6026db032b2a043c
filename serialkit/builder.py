"""Builder for opening serial ports."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace

from .backend import open_port
from .port import SerialPort
from .settings import DataBits, FlowControl, Parity, StopBits

_MAX_BAUD_RATE = 2**32 - 1


@dataclass(frozen=True)
class SerialPortBuilder:
    """All the settings needed to open a serial port.

    Builders are immutable; each ``with_*`` method returns a changed copy, so
    one configuration can serve as the template for several ports.
    ``timeout`` is in seconds. ``dtr_on_open`` of ``None`` leaves DTR as the
    platform sets it.
    """

    path: str
    baud_rate: int
    data_bits: DataBits = DataBits.EIGHT
    flow_control: FlowControl = FlowControl.NONE
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    timeout: float = 0.0
    dtr_on_open: bool | None = True

    def __post_init__(self) -> None:
        if not isinstance(self.baud_rate, int) or not 0 <= self.baud_rate <= _MAX_BAUD_RATE:
            raise ValueError(f"invalid baud rate {self.baud_rate!r}")
        if math.isnan(self.timeout) or self.timeout < 0:
            raise ValueError(f"invalid timeout {self.timeout!r}")
        for name, kind in (
            ("data_bits", DataBits),
            ("flow_control", FlowControl),
            ("parity", Parity),
            ("stop_bits", StopBits),
        ):
            if not isinstance(getattr(self, name), kind):
                raise TypeError(f"{name} must be a {kind.__name__}")

    def with_path(self, path: str | os.PathLike[str]) -> SerialPortBuilder:
        """Return a copy using another device path."""
        return replace(self, path=os.fspath(path))

    def with_baud_rate(self, baud_rate: int) -> SerialPortBuilder:
        """Return a copy with another baud rate."""
        return replace(self, baud_rate=baud_rate)

    def with_data_bits(self, data_bits: DataBits) -> SerialPortBuilder:
        """Return a copy with another character size."""
        return replace(self, data_bits=data_bits)

    def with_flow_control(self, flow_control: FlowControl) -> SerialPortBuilder:
        """Return a copy with another flow control mode."""
        return replace(self, flow_control=flow_control)

    def with_parity(self, parity: Parity) -> SerialPortBuilder:
        """Return a copy with another parity mode."""
        return replace(self, parity=parity)

    def with_stop_bits(self, stop_bits: StopBits) -> SerialPortBuilder:
        """Return a copy with another number of stop bits."""
        return replace(self, stop_bits=stop_bits)

    def with_timeout(self, timeout: float) -> SerialPortBuilder:
        """Return a copy with another read timeout in seconds.

        Very long timeouts are clamped by the device to a few weeks.
        """
        return replace(self, timeout=float(timeout))

    def with_dtr_on_open(self, state: bool) -> SerialPortBuilder:
        """Return a copy that sets DTR to ``state`` when opening."""
        return replace(self, dtr_on_open=bool(state))

    def preserve_dtr_on_open(self) -> SerialPortBuilder:
        """Return a copy that leaves DTR as the platform sets it on open."""
        return replace(self, dtr_on_open=None)

    def open(self) -> SerialPort:
        """Open the port with these settings."""
        return open_port(self)


def new(path: str | os.PathLike[str], baud_rate: int) -> SerialPortBuilder:
    """Start configuring a port: 8 data bits, no parity, one stop bit, no flow control.

    DTR is asserted on open by default, since some USB devices wait for it
    before sending anything.
    """
    return SerialPortBuilder(os.fspath(path), baud_rate)