"""
Dynamic Data Providers

Pluggable value resolution applied to page URLs and other templates before
use. Each provider carries a type tag; a page applies the first provider
tagged "system" (see find_first).

Design: Strategy pattern, looked up by type tag over an ordered sequence.
"""

import getpass
import os
import platform
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional


SYSTEM = "system"


class DynamicData(ABC):
    """Value resolution strategy tagged by type."""

    type: str = ""

    @abstractmethod
    def value(self, orig: str) -> str:
        """Return orig with this provider's placeholders resolved."""
        pass


class SystemDynamicData(DynamicData):
    """
    Resolves ${name} tokens from system properties.

    Properties: os.name, os.arch, user.name, user.home, user.dir,
    python.version, plus every environment variable. Unknown names are kept.
    """

    type = SYSTEM

    _TOKEN = re.compile(r"\$\{([^}]+)\}")

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def properties(self) -> Dict[str, str]:
        props = dict(os.environ if self._environ is None else self._environ)
        props.update({
            "os.name": platform.system(),
            "os.arch": platform.machine(),
            "user.name": _user_name(),
            "user.home": str(Path.home()),
            "user.dir": os.getcwd(),
            "python.version": platform.python_version(),
        })
        return props

    def value(self, orig: str) -> str:
        if not orig:
            return orig
        props = self.properties()
        return self._TOKEN.sub(lambda m: props.get(m.group(1), m.group(0)), orig)


class FunctionDynamicData(DynamicData):
    """Wraps a plain callable as a provider."""

    def __init__(self, type: str, func: Callable[[str], str]):
        self.type = type
        self._func = func

    def value(self, orig: str) -> str:
        return self._func(orig)

    def __repr__(self):
        return f"FunctionDynamicData(type={self.type!r})"


def find_first(providers: Iterable[DynamicData], type: str) -> Optional[DynamicData]:
    """First provider in iteration order whose type equals type, else None."""
    for provider in providers:
        if provider.type == type:
            return provider
    return None


def _user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.getenv("USER") or os.getenv("USERNAME") or ""
