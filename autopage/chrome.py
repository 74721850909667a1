"""
Chrome process management.

Usage:
    with Chrome(EngineConfig(headless=True)) as chrome:
        ...  # DevTools endpoint is up at chrome.config.address
"""

import os
import shutil
import platform
import subprocess
import time
from typing import List, Optional

import requests

from .config import EngineConfig
from .errors import DriverError


# Looked up on PATH first, on every platform
CHROME_NAMES = ["google-chrome", "google-chrome-stable", "chromium", "chromium-browser", "chrome"]

# Install locations not usually on PATH
CHROME_INSTALLS = {
    "Darwin": [
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
    ],
    "Windows": [
        r"%ProgramFiles%\Google\Chrome\Application\chrome.exe",
        r"%LocalAppData%\Google\Chrome\Application\chrome.exe",
    ],
}


def find_chrome() -> str:
    """Chrome executable: PATH first, then the platform's install locations."""
    for name in CHROME_NAMES:
        if path := shutil.which(name):
            return path

    for path in CHROME_INSTALLS.get(platform.system(), []):
        path = os.path.expandvars(path)
        if os.path.exists(path):
            return path

    raise FileNotFoundError("Chrome not found (set AUTOPAGE_CHROME)")


class Chrome:
    """Chrome process with the DevTools endpoint enabled."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.chrome_path = self.config.chrome_path or find_chrome()
        self.process: Optional[subprocess.Popen] = None

    def args(self, url: Optional[str] = None) -> List[str]:
        """Command line for the Chrome process."""
        args = [
            self.chrome_path,
            f"--remote-debugging-port={self.config.port}",
            "--remote-allow-origins=*",
            f"--user-data-dir={self.config.user_data_dir}",
            "--no-first-run",
            "--no-default-browser-check",
        ]
        if self.config.headless:
            args.append("--headless=new")
        if url:
            args.append(url)
        return args

    @property
    def version_url(self) -> str:
        return f"http://127.0.0.1:{self.config.port}/json/version"

    def start(self, url: Optional[str] = None) -> "Chrome":
        """Start Chrome and wait until /json/version answers."""
        self.config.user_data_dir.mkdir(parents=True, exist_ok=True)
        # Own session, so Ctrl-C in a test run does not reach the browser
        self.process = subprocess.Popen(
            self.args(url),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        try:
            self.wait_ready(self.config.startup_timeout)
        except BaseException:
            self.stop()
            raise
        return self

    def wait_ready(self, timeout: float):
        """
        Poll the DevTools endpoint until it answers.

        Raises:
            DriverError: Chrome exited before it was ready
            TimeoutError: no answer within timeout
        """
        end = time.time() + timeout
        while time.time() < end:
            if self.process is not None and self.process.poll() is not None:
                raise DriverError(f"Chrome exited with code {self.process.returncode}")
            try:
                requests.get(self.version_url, timeout=1).raise_for_status()
                return
            except requests.RequestException:
                time.sleep(0.2)
        raise TimeoutError(f"Chrome did not start within {timeout}s")

    def stop(self):
        """Terminate Chrome; kill it if it does not exit within 5s."""
        if self.process is None:
            return
        try:
            self.process.terminate()
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        finally:
            self.process = None

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def __enter__(self):
        return self.start()

    def __exit__(self, *_):
        self.stop()
