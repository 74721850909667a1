"""
Shared fakes: an in-memory browser (CDP HTTP endpoints + per-target CDP
connections), a scripted websocket for the real CDP class, and a
lightweight engine double for page tests.
"""

import json
from typing import Dict, List, Optional
from unittest.mock import Mock, patch

import pytest
import websocket

from autopage.driver import Driver
from autopage.engine import Engine
from autopage.errors import UnhandledAlertError


TOOLBAR_HEIGHT = 85


# ─── Fake browser over CDP ──────────────────────────────────────────

class FakeCDP:
    """Stands in for autopage.cdp.CDP; answers from FakeBrowser state."""

    def __init__(self, browser: "FakeBrowser", timeout: float = 60):
        self.browser = browser
        self.timeout = timeout
        self.target_id: Optional[str] = None
        self.connected = False
        self.sent: List[tuple] = []
        self.callbacks: Dict[str, list] = {}
        self.pending: List[tuple] = []

    def connect(self, target: Dict) -> "FakeCDP":
        self.target_id = target["id"]
        self.connected = True
        return self

    def on(self, event, callback):
        self.callbacks.setdefault(event, []).append(callback)

    def emit(self, event, params):
        for cb in self.callbacks.get(event, []):
            cb(params)

    def poll(self, timeout=0.1):
        events, self.pending = self.pending, []
        for event, params in events:
            self.emit(event, params)
        return [{"event": e, "params": p} for e, p in events]

    def send(self, method, params=None, interrupt_on=()):
        self.sent.append((method, params))
        target = self.browser.find(self.target_id)
        if method == "Runtime.evaluate":
            return {"result": {"value": self.browser.evaluate(target, params["expression"])}}
        if method == "Page.navigate":
            target["url"] = params["url"]
            return {"frameId": "F1"}
        if method == "Page.handleJavaScriptDialog":
            self.browser.dialog_responses.append(params)
            return {}
        return self.browser.responses.get(method, {})

    def close(self):
        self.connected = False


class FakeBrowser:
    """In-memory Chrome: /json/* endpoints and page targets."""

    def __init__(self, pages: List[Dict]):
        self.targets = []
        for p in pages:
            target = {"type": "page", "url": "about:blank", "title": "", **p}
            target.setdefault("webSocketDebuggerUrl", f"ws://localhost:9222/devtools/page/{target['id']}")
            self.targets.append(target)
        self.activated: List[str] = []
        self.closed: List[str] = []
        self.connections: List[FakeCDP] = []
        self.dialog_responses: List[Dict] = []
        self.responses: Dict[str, Dict] = {}

    def find(self, target_id):
        for t in self.targets:
            if t["id"] == target_id:
                return t
        raise AssertionError(f"target {target_id} is gone")

    def evaluate(self, target, expression):
        if expression == "document.title":
            return target["title"]
        if expression == "location.href":
            return target["url"]
        if expression == "document.readyState":
            return "complete"
        if expression == Engine.TOOLBAR_SCRIPT:
            return TOOLBAR_HEIGHT
        if expression.startswith("document.documentElement"):
            return target.get("source", "<html></html>")
        return None

    def cdp_factory(self, timeout=60):
        cdp = FakeCDP(self, timeout)
        self.connections.append(cdp)
        return cdp

    def get(self, url, timeout=None):
        path = url.split("/", 3)[3]
        resp = Mock()
        resp.status_code = 200
        if path == "json/list":
            resp.json.return_value = [dict(t) for t in self.targets]
        elif path.startswith("json/close/"):
            target_id = path.rsplit("/", 1)[1]
            self.targets = [t for t in self.targets if t["id"] != target_id]
            self.closed.append(target_id)
            resp.text = "Target is closing"
        elif path.startswith("json/activate/"):
            self.activated.append(path.rsplit("/", 1)[1])
            resp.text = "Target activated"
        else:
            raise AssertionError(f"unexpected request {url}")
        return resp


@pytest.fixture
def browser(monkeypatch):
    fake = FakeBrowser([
        {"id": "A", "title": "Home", "url": "https://example.com/"},
        {"id": "B", "title": "Ads", "url": "https://ads.example.com/"},
        {"id": "C", "title": "Home", "url": "https://example.com/copy"},
    ])
    monkeypatch.setattr("autopage.driver.requests.get", fake.get)
    return fake


@pytest.fixture
def driver(browser):
    return Driver("localhost:9222", cdp_factory=browser.cdp_factory).attach()


# ─── Real CDP over a scripted websocket ─────────────────────────────

def frame_reply(id, result=None):
    return json.dumps({"id": id, "result": result or {}})


def frame_value(id, value):
    return frame_reply(id, {"result": {"value": value}})


def frame_event(method, params=None):
    return json.dumps({"method": method, "params": params or {}})


def frame_timeout():
    return websocket.WebSocketTimeoutException()


@pytest.fixture
def wired_driver(browser):
    """Driver on the real CDP class; websocket frames are scripted per test."""
    ws = Mock()

    def attach(*frames):
        ws.recv.side_effect = [frame_reply(1), frame_reply(2), *frames]
        with patch("autopage.cdp.websocket.create_connection", return_value=ws):
            driver = Driver("localhost:9222", timeout=5).attach()
        return driver, ws

    return attach


def sent_messages(ws):
    return [json.loads(c[0][0]) for c in ws.send.call_args_list]


# ─── Engine double for page tests ───────────────────────────────────

class FakeAlert:
    def __init__(self):
        self.dismissed = 0

    def dismiss(self):
        self.dismissed += 1


class FakeEngine:
    """Records page → engine calls; toolbar measurement can be made to fail."""

    def __init__(self, alert_failures: int = 0):
        self.alert_failures = alert_failures
        self.opened: List[str] = []
        self.toolbar_calls = 0
        self.closed = 0
        self.toolbar_height = 0
        self.alert = FakeAlert()
        self.driver = Mock()
        self.driver.switch_to.alert.return_value = self.alert

    def open_url(self, url):
        self.opened.append(url)
        return self

    def compute_toolbar_height(self):
        self.toolbar_calls += 1
        if self.alert_failures > 0:
            self.alert_failures -= 1
            raise UnhandledAlertError("Are you sure?")
        self.toolbar_height = TOOLBAR_HEIGHT
        return self.toolbar_height

    def get_driver(self):
        return self.driver

    def close(self):
        self.closed += 1


@pytest.fixture
def fake_engine():
    return FakeEngine()
