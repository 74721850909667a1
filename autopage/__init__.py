"""
autopage - Page Objects for Browser Test Automation

Page objects over Chrome DevTools Protocol: open a page from a url template,
manage its windows, keep page-scoped test data, and drive mouse/keyboard.

Quick Start:
    # Open a page from the command line
    autopage 'https://example.com/u/${param.user}' --param user=alice

    # As Python library
    from autopage import Engine, EngineConfig, Page, SystemDynamicData

    with Engine(EngineConfig(headless=True)) as engine:
        page = Page(engine, id="profile",
                    url="https://example.com/u/${param.user}",
                    dynamic_data=[SystemDynamicData()])
        page.put_data("user", "alice")
        page.open()
        print(page.title)
        page.close_others()
"""

from .config import EngineConfig
from .chrome import Chrome, find_chrome
from .cdp import CDP
from .driver import Alert, Driver
from .engine import Engine
from .input import Keyboard, Mouse
from .ui import Button
from .dynamic_data import DynamicData, FunctionDynamicData, SystemDynamicData, find_first
from .page import Page
from .utils import DEFAULT_PARAM_PREFIX, param_translate
from .errors import (
    CDPError,
    DriverError,
    EngineNotStartedError,
    NoAlertPresentError,
    NoSuchElementError,
    NoSuchWindowError,
    UnhandledAlertError,
)

__version__ = "1.0.0"
__all__ = [
    # Core
    "Page",
    "Engine",
    "EngineConfig",
    # Driver
    "Chrome",
    "find_chrome",
    "CDP",
    "Driver",
    "Alert",
    # Input & UI
    "Mouse",
    "Keyboard",
    "Button",
    # Dynamic data
    "DynamicData",
    "SystemDynamicData",
    "FunctionDynamicData",
    "find_first",
    "param_translate",
    "DEFAULT_PARAM_PREFIX",
    # Errors
    "DriverError",
    "CDPError",
    "UnhandledAlertError",
    "NoAlertPresentError",
    "NoSuchWindowError",
    "NoSuchElementError",
    "EngineNotStartedError",
]
