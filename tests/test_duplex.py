import io
from unittest import mock

import pytest

from serialkit.builder import new
from serialkit.commands.duplex import duplex, main
from serialkit.errors import SerialError
from serialkit.settings import ClearBuffer


@pytest.fixture
def loop_port():
    port = new("loop://", 9600).with_timeout(2).open()
    yield port
    port.close()


def test_duplex_receives_pattern_from_clone(loop_port):
    out = io.StringIO()
    assert duplex(loop_port, 4, out) == 4
    assert out.getvalue().splitlines() == [
        "Received: [5]",
        "Received: [6]",
        "Received: [7]",
        "Received: [8]",
    ]


def test_original_port_stays_open_after_duplex(loop_port):
    duplex(loop_port, 1, io.StringIO())
    loop_port.clear(ClearBuffer.ALL)
    loop_port.write(b"z")
    assert loop_port.read(1) == b"z"


def test_duplex_on_closed_port_fails(loop_port):
    loop_port.close()
    with pytest.raises(SerialError):
        duplex(loop_port, 1, io.StringIO())


def test_main_without_ports(capsys):
    with mock.patch("serial.tools.list_ports.comports", return_value=[]):
        assert main([]) == 1
    assert "No serial port" in capsys.readouterr().err