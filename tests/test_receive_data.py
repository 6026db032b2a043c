import argparse
import io

import pytest

from serialkit.builder import new
from serialkit.commands.receive_data import main, parse_baud, receive


@pytest.fixture
def loop_port():
    port = new("loop://", 9600).open()
    yield port
    port.close()


@pytest.mark.parametrize("text, expected", [("9600", 9600), ("+115200", 115200)])
def test_parse_baud_accepts_numbers(text, expected):
    assert parse_baud(text) == expected


def test_parse_baud_accepts_largest_u32():
    assert parse_baud(str(2**32 - 1)) == 2**32 - 1


@pytest.mark.parametrize("text", ["abc", "-1", "", "96 00", str(2**32)])
def test_parse_baud_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError) as info:
        parse_baud(text)
    assert str(info.value) == f"Invalid baud rate '{text}' specified"


def test_receive_copies_data(loop_port):
    loop_port.write(b"hello")
    out = io.BytesIO()
    assert receive(loop_port, out, 3) == 5
    assert out.getvalue() == b"hello"


def test_receive_ignores_timeouts(loop_port, capsys):
    out = io.BytesIO()
    assert receive(loop_port, out, 2) == 0
    assert out.getvalue() == b""
    assert capsys.readouterr().err == ""


def test_receive_reports_other_errors(loop_port, capsys):
    loop_port.close()
    out = io.BytesIO()
    assert receive(loop_port, out, 2) == 0
    assert capsys.readouterr().err.count("port is closed") == 2


def test_main_rejects_bad_baud():
    with pytest.raises(SystemExit) as info:
        main(["loop://", "fast"])
    assert info.value.code == 2


def test_main_reports_open_failure(capsys):
    assert main(["/nonexistent/serialkit-test-port", "9600"]) == 1
    assert 'Failed to open "/nonexistent/serialkit-test-port"' in capsys.readouterr().err