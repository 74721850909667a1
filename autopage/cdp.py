"""
Chrome DevTools Protocol transport.

One websocket connection per target (browser tab/window).

Usage:
    cdp = CDP().connect(target)      # target: entry from /json/list
    cdp.send("Page.navigate", {"url": "https://example.com"})
"""

import json
from typing import Callable, Collection, Dict, List, Optional

import websocket

from .errors import CDPError, CDPInterrupted


class CDP:
    """Chrome DevTools Protocol connection."""

    MAX_MESSAGES = 200

    def __init__(self, timeout: float = 60):
        self.timeout = timeout
        self.target_id: Optional[str] = None
        self._ws: Optional[websocket.WebSocket] = None
        self._id = 0
        self._callbacks: Dict[str, List[Callable]] = {}

    @property
    def connected(self) -> bool:
        return self._ws is not None

    def connect(self, target: Dict) -> "CDP":
        """Connect to a target descriptor."""
        ws_url = target.get("webSocketDebuggerUrl")
        if not ws_url:
            raise ConnectionError(f"Target {target.get('id')} has no debugger URL")
        self._ws = websocket.create_connection(ws_url, timeout=self.timeout)
        self.target_id = target.get("id")
        return self

    def send(self, method: str, params: Optional[Dict] = None,
             interrupt_on: Collection[str] = ()) -> Dict:
        """
        Send CDP command and return result.

        Events named in interrupt_on end the wait early with CDPInterrupted,
        after their callbacks ran. A reply arriving later for the abandoned
        command is skipped by subsequent sends and polls.
        """
        if not self._ws:
            raise ConnectionError("CDP not connected")

        self._id += 1
        msg = {"id": self._id, "method": method}
        if params:
            msg["params"] = params
        self._ws.send(json.dumps(msg))

        # Wait for response, dispatch events
        for _ in range(self.MAX_MESSAGES):
            result = json.loads(self._ws.recv())

            if "method" in result:
                event, event_params = result["method"], result.get("params", {})
                self._dispatch(event, event_params)
                if event in interrupt_on:
                    raise CDPInterrupted(method, event, event_params)
                continue

            if result.get("id") == self._id:
                if "error" in result:
                    error = result["error"]
                    raise CDPError(error.get("message", str(error)), error.get("code"))
                return result.get("result", {})
        raise CDPError(f"no reply to {method}")

    def on(self, event: str, callback: Callable[[Dict], None]):
        """Subscribe to CDP event."""
        self._callbacks.setdefault(event, []).append(callback)

    def _dispatch(self, event: str, params: Dict):
        for cb in self._callbacks.get(event, []):
            cb(params)

    def poll(self, timeout: float = 0.1) -> List[Dict]:
        """Drain pending events without blocking longer than timeout."""
        if not self._ws:
            return []

        events = []
        self._ws.settimeout(timeout)
        try:
            while True:
                result = json.loads(self._ws.recv())
                if "method" in result:
                    params = result.get("params", {})
                    events.append({"event": result["method"], "params": params})
                    self._dispatch(result["method"], params)
        except websocket.WebSocketTimeoutException:
            pass
        finally:
            self._ws.settimeout(self.timeout)
        return events

    def close(self):
        """Close connection."""
        if self._ws:
            try:
                self._ws.close()
            except (OSError, websocket.WebSocketException):
                pass
            self._ws = None
            self.target_id = None
