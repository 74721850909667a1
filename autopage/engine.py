"""
Browser engine.

Owns the Chrome process (when launching one) and the Driver. Pages delegate
navigation, window closing and toolbar measurement here.

Usage:
    with Engine(EngineConfig(headless=True)) as engine:
        engine.open_url("https://example.com")
        print(engine.driver.title)
"""

import sys
from typing import Optional

from .chrome import Chrome
from .config import EngineConfig
from .driver import Driver
from .errors import EngineNotStartedError


class Engine:
    """Browser engine backed by Chrome over CDP."""

    TOOLBAR_SCRIPT = "window.outerHeight - window.innerHeight"

    def __init__(self, config: Optional[EngineConfig] = None,
                 chrome: Optional[Chrome] = None, driver: Optional[Driver] = None):
        self.config = config or EngineConfig()
        self.chrome = chrome
        self._driver = driver
        self.toolbar_height = 0

    def start(self) -> "Engine":
        """Launch Chrome if configured, then attach the driver."""
        if self._driver is not None:
            return self

        launched = False
        if self.config.launch:
            if self.chrome is None:
                self.chrome = Chrome(self.config)
            if not self.chrome.running:
                self.chrome.start()
                launched = True
                print(f"[*] Chrome started on port {self.config.port}", file=sys.stderr)

        try:
            self._driver = Driver(self.config.address, timeout=self.config.ws_timeout).attach()
        except BaseException:
            if launched:
                self.chrome.stop()
                print("[*] Chrome stopped", file=sys.stderr)
            raise
        print(f"[*] Browser connected at {self.config.address}", file=sys.stderr)
        return self

    def detach(self):
        """Drop the driver; Chrome keeps running."""
        if self._driver is not None:
            self._driver.quit()
            self._driver = None

    def quit(self):
        """Drop the driver and stop the Chrome process, if any."""
        self.detach()
        if self.chrome is not None and self.chrome.running:
            self.chrome.stop()
            print("[*] Chrome stopped", file=sys.stderr)

    @property
    def driver(self) -> Driver:
        if self._driver is None:
            raise EngineNotStartedError("Engine not started")
        return self._driver

    def get_driver(self) -> Driver:
        return self.driver

    def open_url(self, url: str) -> "Engine":
        """Navigate the current window and wait for the load."""
        self.driver.navigate(url)
        self.driver.wait_load(self.config.load_timeout)
        return self

    def close(self):
        """Close the current window."""
        self.driver.close()

    def compute_toolbar_height(self) -> int:
        """
        Measure browser chrome above the viewport.

        Raises:
            UnhandledAlertError: a dialog is blocking the page
        """
        self.toolbar_height = int(self.driver.execute(self.TOOLBAR_SCRIPT) or 0)
        return self.toolbar_height

    def __enter__(self):
        return self.start()

    def __exit__(self, *_):
        self.quit()
