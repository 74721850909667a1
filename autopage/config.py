"""
Engine configuration.

Usage:
    config = EngineConfig(headless=True)
    config = EngineConfig.from_env()        # AUTOPAGE_* overrides
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional


_TRUE = {"1", "true", "yes", "on"}


def _flag(value: str) -> bool:
    return value.strip().lower() in _TRUE


@dataclass
class EngineConfig:
    """Engine settings."""
    host: str = "localhost"
    port: int = 9222
    launch: bool = True                  # Start Chrome, or attach to a running one
    headless: bool = False
    user_data_dir: Path = field(default_factory=lambda: Path.home() / ".autopage" / "profile")
    chrome_path: Optional[str] = None    # None = auto-detect
    load_timeout: float = 30.0           # Max wait for document.readyState == complete
    startup_timeout: float = 30.0        # Max wait for the debugging port
    ws_timeout: float = 60.0             # CDP websocket timeout

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "EngineConfig":
        """Build config from AUTOPAGE_* environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        if "AUTOPAGE_HOST" in env:
            config.host = env["AUTOPAGE_HOST"]
        if "AUTOPAGE_PORT" in env:
            config.port = int(env["AUTOPAGE_PORT"])
        if "AUTOPAGE_LAUNCH" in env:
            config.launch = _flag(env["AUTOPAGE_LAUNCH"])
        if "AUTOPAGE_HEADLESS" in env:
            config.headless = _flag(env["AUTOPAGE_HEADLESS"])
        if "AUTOPAGE_CHROME" in env:
            config.chrome_path = env["AUTOPAGE_CHROME"]
        if "AUTOPAGE_PROFILE" in env:
            config.user_data_dir = Path(env["AUTOPAGE_PROFILE"]).expanduser()
        if "AUTOPAGE_LOAD_TIMEOUT" in env:
            config.load_timeout = float(env["AUTOPAGE_LOAD_TIMEOUT"])

        return replace(config, **overrides) if overrides else config
