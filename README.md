# serialkit

Blocking I/O on serial ports through pyserial, with an immutable builder for
port settings, a listing of the ports on the system, and a set of command-line
tools for probing and exercising ports.

## Installation

```
pip install serialkit
```

## Opening a port

```python
from serialkit.builder import new
from serialkit.backend import available_ports

for info in available_ports():
    print(info.port_name, info.port_type)

with new("/dev/ttyUSB0", 9600).with_timeout(1.0).open() as port:
    port.write(b"hello")
    port.flush()
    print(port.read(5))
```

`new(path, baud_rate)` returns a `SerialPortBuilder` set to 8 data bits, no
parity, one stop bit, no flow control, a zero timeout, and DTR asserted on
open. Builders are frozen dataclasses: each of `with_path`, `with_baud_rate`,
`with_data_bits`, `with_flow_control`, `with_parity`, `with_stop_bits`,
`with_timeout` and `with_dtr_on_open` returns a changed copy, so one
configuration can serve as a template for several ports.
`preserve_dtr_on_open()` leaves DTR as the platform sets it. Invalid settings
(a baud rate outside 0..2**32-1, a negative or NaN timeout, a setting of the
wrong enum type) raise `ValueError` or `TypeError` when the builder is made.

The path may be a device path or any URL pyserial accepts, such as `loop://`,
which is handy for trying things out without hardware.

## Working with an open port

`open()` returns a `SerialPort` (from `serialkit.port`). Its settings are
properties that can be read and assigned: `baud_rate`, `data_bits`,
`flow_control`, `parity`, `stop_bits` and `timeout` (in seconds; `math.inf`
waits forever). `name` is read-only. The enums `DataBits`, `Parity`,
`StopBits`, `FlowControl` and `ClearBuffer` live in `serialkit.settings`;
`FlowControl.parse("sw")` accepts the usual short and long spellings.

- `read(size)` returns between one and `size` bytes; when nothing arrives
  within the timeout it raises `SerialError` whose `errno` is `ETIMEDOUT`.
  `read_exact(size)` keeps reading until it has exactly `size` bytes.
- `write(data)` writes all the data; `flush()` waits until it is sent.
- `write_request_to_send`, `write_data_terminal_ready` drive RTS and DTR;
  `read_clear_to_send`, `read_data_set_ready`, `read_ring_indicator` and
  `read_carrier_detect` read the modem lines.
- `bytes_to_read()`, `bytes_to_write()` report queued bytes;
  `clear(ClearBuffer.INPUT | OUTPUT | ALL)` discards them.
- `set_break()` and `clear_break()` control a break condition.
- `try_clone()` returns another handle on the same device, e.g. for reading
  and writing from separate threads. Each handle keeps its own timeout; the
  device is closed when the last handle is closed.

Failures of the device raise `SerialError` (from `serialkit.errors`), whose
`kind` is an `ErrorKind` (`NO_DEVICE`, `INVALID_INPUT`, `UNKNOWN`, `IO`) and
whose `errno` carries the operating-system error number where there is one.
`to_os_error()` turns it into the matching `OSError`.

`available_ports()` returns `SerialPortInfo` records with a `PortType` (USB,
PCI, Bluetooth or unknown) and, for USB ports, a `UsbPortInfo` with vendor and
product ids, serial number, manufacturer, product and interface number.

## Command-line tools

```
serialkit-list-ports
serialkit-receive-data /dev/ttyUSB0 9600
serialkit-transmit /dev/ttyUSB0 9600 --string . --rate 1 --data-bits 8 --stop-bits 1
serialkit-duplex
serialkit-clear-input-buffer /dev/ttyUSB0 9600
serialkit-clear-output-buffer /dev/ttyUSB0 9600 128
serialkit-loopback /dev/ttyUSB0 --iterations 100 --length 8 --baudrate 115200
serialkit-loopback /dev/ttyUSB0 --bytes 222,173,190,239 --split-port
serialkit-hardware-check /dev/ttyUSB0 --loopback
serialkit-hardware-check /dev/ttyUSB0 --loopback-port /dev/ttyUSB1
```

- `serialkit-list-ports` prints every port found, sorted by name, with USB
  details where known.
- `serialkit-receive-data` echoes everything received to standard output.
- `serialkit-transmit` writes a string repeatedly at the given frequency in
  Hz; a rate of 0 sends it once.
- `serialkit-duplex` opens the first port found at 9600 baud, writes
  `05 06 07 08` from a cloned handle once a second and prints each byte that
  comes back; use it with a loopback device.
- `serialkit-clear-input-buffer` prints the number of bytes waiting to be
  read; `serialkit-clear-output-buffer` floods the port with blocks of zero
  bytes (default 128) and prints the number queued to send. Both clear their
  buffer each time Return is pressed and stop at end of input (Ctrl+D or
  Ctrl+Z).
- `serialkit-loopback` times write/read round trips on a port wired RX to TX
  and reports totals, averages, maxima and throughput; `--split-port` reads
  from a cloned handle in a second thread. It exits with status 2 if the data
  read back differs.
- `serialkit-hardware-check` runs a port through baud rates, data bits, flow
  control, parity, stop bits, queue queries and buffer clearing; with
  `--loopback` it also checks that the port reads back what it sent, and with
  `--loopback-port` it exchanges a test message both ways between two ports
  at several baud rates and flow control modes.

Run any tool with `--help` for its options.

## What it does not do

Everything goes through pyserial: there are no platform-specific port classes,
no way to create pseudo-terminal pairs, and no asynchronous I/O.

## Tests

```
pip install serialkit[test]
pytest
```