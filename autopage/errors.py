"""
Driver errors.

Raised by the CDP transport, driver and engine. Connection failures use the
builtin ConnectionError, launch timeouts use TimeoutError.
"""

from typing import Optional


class DriverError(RuntimeError):
    """Base class for browser driver failures."""


class CDPError(DriverError):
    """CDP replied with an error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(f"CDP: {message}")
        self.code = code
        self.message = message


class CDPInterrupted(CDPError):
    """An event ended the wait for a command's reply."""

    def __init__(self, method: str, event: str, params: Optional[dict] = None):
        super().__init__(f"{method} interrupted by {event}")
        self.method = method
        self.event = event
        self.params = params or {}


class UnhandledAlertError(DriverError):
    """A JavaScript dialog is blocking the page."""

    def __init__(self, alert_text: str = ""):
        super().__init__(f"Unexpected alert open: {alert_text!r}")
        self.alert_text = alert_text


class NoAlertPresentError(DriverError):
    """No JavaScript dialog is open."""


class NoSuchWindowError(DriverError):
    """Unknown window handle, or no current window."""


class NoSuchElementError(DriverError):
    """Selector matched no element."""


class EngineNotStartedError(DriverError):
    """Engine.start() has not been called."""
