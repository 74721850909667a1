"""CDP websocket transport."""

import json
from unittest.mock import Mock, patch

import pytest
import websocket

from autopage.cdp import CDP
from autopage.errors import CDPError, CDPInterrupted


TARGET = {"id": "A", "type": "page", "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/A"}


def connected(messages):
    ws = Mock()
    ws.recv.side_effect = [json.dumps(m) for m in messages]
    with patch("autopage.cdp.websocket.create_connection", return_value=ws) as create:
        cdp = CDP(timeout=5).connect(TARGET)
    create.assert_called_once_with(TARGET["webSocketDebuggerUrl"], timeout=5)
    return cdp, ws


def test_send_returns_result_and_dispatches_events():
    cdp, ws = connected([
        {"method": "Page.loadEventFired", "params": {"timestamp": 1}},
        {"id": 1, "result": {"frameId": "F"}},
    ])
    seen = []
    cdp.on("Page.loadEventFired", seen.append)

    assert cdp.send("Page.navigate", {"url": "https://example.com"}) == {"frameId": "F"}
    assert seen == [{"timestamp": 1}]
    assert json.loads(ws.send.call_args[0][0]) == {
        "id": 1, "method": "Page.navigate", "params": {"url": "https://example.com"}
    }
    assert cdp.target_id == "A"


def test_error_reply():
    cdp, _ = connected([{"id": 1, "error": {"code": -32000, "message": "No dialog is showing"}}])

    with pytest.raises(CDPError) as exc:
        cdp.send("Page.handleJavaScriptDialog", {"accept": False})
    assert exc.value.code == -32000
    assert str(exc.value) == "CDP: No dialog is showing"


def test_send_without_connection():
    with pytest.raises(ConnectionError):
        CDP().send("Page.enable")


def test_connect_requires_debugger_url():
    with pytest.raises(ConnectionError):
        CDP().connect({"id": "A", "type": "page"})


def test_poll_drains_until_timeout():
    ws = Mock()
    ws.recv.side_effect = [
        json.dumps({"method": "Page.javascriptDialogOpening", "params": {"message": "hi"}}),
        websocket.WebSocketTimeoutException(),
    ]
    with patch("autopage.cdp.websocket.create_connection", return_value=ws):
        cdp = CDP(timeout=5).connect(TARGET)
    seen = []
    cdp.on("Page.javascriptDialogOpening", seen.append)

    events = cdp.poll(0.01)

    assert events == [{"event": "Page.javascriptDialogOpening", "params": {"message": "hi"}}]
    assert seen == [{"message": "hi"}]
    assert ws.settimeout.call_args_list[-1][0] == (5,)


def test_close():
    cdp, ws = connected([])
    cdp.close()
    ws.close.assert_called_once_with()
    assert not cdp.connected
    assert cdp.poll() == []


def test_send_interrupted_by_event():
    cdp, _ = connected([
        {"method": "Page.javascriptDialogOpening", "params": {"message": "Welcome!"}},
        {"id": 1, "result": {"result": {"value": 1}}},
    ])
    seen = []
    cdp.on("Page.javascriptDialogOpening", seen.append)

    with pytest.raises(CDPInterrupted) as exc:
        cdp.send("Runtime.evaluate", {"expression": "1"}, interrupt_on={"Page.javascriptDialogOpening"})

    assert exc.value.event == "Page.javascriptDialogOpening"
    assert exc.value.params == {"message": "Welcome!"}
    assert seen == [{"message": "Welcome!"}]


def test_other_events_do_not_interrupt():
    cdp, _ = connected([
        {"method": "Page.loadEventFired", "params": {}},
        {"id": 1, "result": {"result": {"value": 1}}},
    ])
    result = cdp.send("Runtime.evaluate", {"expression": "1"}, interrupt_on={"Page.javascriptDialogOpening"})
    assert result == {"result": {"value": 1}}
