import io
import queue

import pytest

from serialkit.builder import new
from serialkit.commands.clear_input_buffer import input_service, main, watch_input

DISCARD = "------------------------- Discarding buffer ------------------------- "


@pytest.fixture
def loop_port():
    port = new("loop://", 9600).open()
    yield port
    port.close()


def test_input_service_signals_input_then_end():
    events = input_service(io.BytesIO(b"x\n"))
    assert events.get(timeout=2) is True
    assert events.get(timeout=2) is False


def test_input_service_signals_end_on_empty_stream():
    events = input_service(io.BytesIO(b""))
    assert events.get(timeout=2) is False


def test_watch_input_clears_and_stops(loop_port):
    loop_port.write(b"abc")
    events = queue.Queue()
    events.put(True)
    events.put(False)
    out = io.StringIO()
    watch_input(loop_port, events, out, 0)
    assert out.getvalue().splitlines() == [
        "Bytes available to read: 3",
        DISCARD,
        "Bytes available to read: 0",
        "Stopping.",
    ]
    assert loop_port.bytes_to_read() == 0


def test_watch_input_keeps_data_without_request(loop_port):
    loop_port.write(b"ab")
    events = queue.Queue()
    events.put(False)
    out = io.StringIO()
    watch_input(loop_port, events, out, 0)
    assert loop_port.bytes_to_read() == 2
    assert out.getvalue().splitlines()[-1] == "Stopping."


def test_main_rejects_bad_baud(capsys):
    assert main(["loop://", "abc"]) == 1
    assert capsys.readouterr().out.strip() == "Error: Invalid baud rate 'abc' specified"


def test_main_reports_missing_port(capsys):
    assert main(["/nonexistent/serialkit-test-port", "9600"]) == 1
    out = capsys.readouterr().out
    assert out.startswith("Error: Port '/nonexistent/serialkit-test-port' not available:")


def test_main_stops_at_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"")))
    assert main(["loop://", "9600"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Connected to loop:// at 9600 baud"
    assert lines[-1] == "Stopping."