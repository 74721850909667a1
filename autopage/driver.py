"""
WebDriver-style view over CDP targets.

Window handles are CDP target ids of type "page". The driver holds one
CDP connection, to the current window. JavaScript dialogs are tracked from
Page.javascriptDialogOpening/Closed events; scripts evaluated while a dialog
is open raise UnhandledAlertError instead of blocking.

Usage:
    driver = Driver("localhost:9222").attach()
    driver.navigate("https://example.com")
    print(driver.title, driver.window_handles)
    driver.switch_to.window(handle).close()
"""

import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .cdp import CDP
from .errors import (
    CDPInterrupted,
    DriverError,
    NoAlertPresentError,
    NoSuchWindowError,
    UnhandledAlertError,
)


DIALOG_OPENING = "Page.javascriptDialogOpening"


class Alert:
    """An open JavaScript dialog (alert, confirm, prompt, beforeunload)."""

    def __init__(self, driver: "Driver", dialog: Dict):
        self._driver = driver
        self._dialog = dialog
        self._prompt_text: Optional[str] = None

    @property
    def text(self) -> str:
        return self._dialog.get("message", "")

    @property
    def type(self) -> str:
        return self._dialog.get("type", "alert")

    def send_keys(self, text: str):
        """Text submitted with accept() for prompt dialogs."""
        self._prompt_text = text

    def accept(self):
        self._driver._handle_dialog(True, self._prompt_text)

    def dismiss(self):
        self._driver._handle_dialog(False)


class SwitchTo:
    """Window and alert switching."""

    def __init__(self, driver: "Driver"):
        self._driver = driver

    def window(self, handle: str) -> "Driver":
        """Make handle the current window and return the driver."""
        driver = self._driver
        if driver.cdp is None or driver.cdp.target_id != handle:
            driver.attach(handle)
        driver._activate(handle)
        return driver

    def alert(self) -> Alert:
        """Get the open dialog of the current window."""
        driver = self._driver
        driver._current().poll(driver.POLL_INTERVAL)
        if driver._dialog is None:
            raise NoAlertPresentError("No alert open")
        return Alert(driver, dict(driver._dialog))


class Driver:
    """Browser driver over the Chrome DevTools Protocol."""

    POLL_INTERVAL = 0.02
    HTTP_TIMEOUT = 10

    def __init__(self, address: str = "localhost:9222", timeout: float = 60,
                 cdp_factory: Callable[[float], CDP] = CDP):
        self.address = address
        self.timeout = timeout
        self.cdp: Optional[CDP] = None
        self.switch_to = SwitchTo(self)
        self._cdp_factory = cdp_factory
        self._dialog: Optional[Dict] = None

    # ─── Targets ────────────────────────────────────────────────────

    def targets(self) -> List[Dict]:
        """All targets reported by the browser."""
        return requests.get(f"http://{self.address}/json/list", timeout=self.HTTP_TIMEOUT).json()

    def _pages(self) -> List[Dict]:
        pages = []
        for t in self.targets():
            url = t.get("url", "")
            if t.get("type") != "page":
                continue
            if url.startswith("chrome-extension://") or url.startswith("devtools://"):
                continue
            pages.append(t)
        return pages

    @property
    def window_handles(self) -> List[str]:
        return [p["id"] for p in self._pages()]

    @property
    def window_handle(self) -> str:
        return self._current().target_id

    def attach(self, handle: Optional[str] = None) -> "Driver":
        """Connect to a window (first page when handle is None)."""
        pages = self._pages()
        if handle is None:
            if not pages:
                raise ConnectionError("No browser page found")
            target = pages[0]
        else:
            target = next((p for p in pages if p.get("id") == handle), None)
            if target is None:
                raise NoSuchWindowError(f"No window with handle {handle}")

        self._detach()
        cdp = self._cdp_factory(self.timeout)
        cdp.on(DIALOG_OPENING, self._on_dialog_opening)
        cdp.on("Page.javascriptDialogClosed", self._on_dialog_closed)
        cdp.connect(target)
        self.cdp = cdp
        cdp.send("Page.enable")
        cdp.send("Runtime.enable")
        return self

    def _activate(self, handle: str):
        requests.get(f"http://{self.address}/json/activate/{handle}", timeout=self.HTTP_TIMEOUT)

    def _current(self) -> CDP:
        if self.cdp is None or not self.cdp.connected:
            raise NoSuchWindowError("No current window")
        return self.cdp

    def _detach(self):
        if self.cdp is not None:
            self.cdp.close()
            self.cdp = None
        self._dialog = None

    # ─── Dialogs ────────────────────────────────────────────────────

    def _on_dialog_opening(self, params: Dict):
        self._dialog = params

    def _on_dialog_closed(self, params: Dict):
        self._dialog = None

    def _handle_dialog(self, accept: bool, prompt_text: Optional[str] = None):
        params = {"accept": accept}
        if prompt_text is not None:
            params["promptText"] = prompt_text
        self._current().send("Page.handleJavaScriptDialog", params)
        self._dialog = None

    @property
    def dialog_open(self) -> bool:
        return self._dialog is not None

    # ─── JavaScript ─────────────────────────────────────────────────

    def send(self, method: str, params: Optional[Dict] = None) -> Dict:
        """Send a raw CDP command to the current window."""
        return self._current().send(method, params)

    def execute(self, script: str, timeout: float = 30) -> Any:
        """
        Evaluate JavaScript in the current window and return its value.

        Raises:
            UnhandledAlertError: a dialog was open, or opened before the reply
        """
        cdp = self._current()
        cdp.poll(self.POLL_INTERVAL)
        if self._dialog is not None:
            raise UnhandledAlertError(self._dialog.get("message", ""))

        # Chrome holds the reply while a dialog is open
        try:
            result = cdp.send("Runtime.evaluate", {
                "expression": script,
                "awaitPromise": True,
                "timeout": int(timeout * 1000),
                "returnByValue": True
            }, interrupt_on={DIALOG_OPENING})
        except CDPInterrupted as e:
            raise UnhandledAlertError(e.params.get("message", "")) from e
        if "exceptionDetails" in result:
            details = result["exceptionDetails"]
            text = details.get("exception", {}).get("description") or details.get("text", "")
            raise DriverError(f"JavaScript error: {text}")
        return result.get("result", {}).get("value")

    # ─── Navigation ─────────────────────────────────────────────────

    def navigate(self, url: str) -> "Driver":
        result = self._current().send("Page.navigate", {"url": url})
        if result.get("errorText"):
            raise DriverError(f"Navigation to {url} failed: {result['errorText']}")
        return self

    def wait_load(self, timeout: float = 30) -> bool:
        """Wait for document.readyState == complete. Stops early on a dialog."""
        end = time.time() + timeout
        while time.time() < end:
            self._current().poll(self.POLL_INTERVAL)
            if self._dialog is not None:
                return False
            if self.execute("document.readyState") == "complete":
                return True
            time.sleep(0.2)
        return False

    @property
    def current_url(self) -> str:
        return self.execute("location.href") or ""

    @property
    def title(self) -> str:
        return self.execute("document.title") or ""

    @property
    def page_source(self) -> str:
        return self.execute("document.documentElement ? document.documentElement.outerHTML : ''") or ""

    # ─── Lifecycle ──────────────────────────────────────────────────

    def close(self):
        """Close the current window. The driver has no current window afterwards."""
        handle = self.window_handle
        self._detach()
        requests.get(f"http://{self.address}/json/close/{handle}", timeout=self.HTTP_TIMEOUT)

    def quit(self):
        """Drop the connection. Windows stay open."""
        self._detach()
