"""
Page object.

A logical web page for test code: where it lives (url), how to open and
close it, and page-scoped data used to fill URL templates. Browser control
is delegated to the injected engine.

Usage:
    from autopage import Engine, Page, SystemDynamicData

    with Engine() as engine:
        page = Page(engine, url="https://example.com/u/${param.user}",
                    dynamic_data=[SystemDynamicData()])
        page.put_data("user", "alice")
        page.open()
        print(page.title, page.current_url)
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from .dynamic_data import SYSTEM, DynamicData, find_first
from .errors import UnhandledAlertError
from .input import Keyboard, Mouse
from .ui import Button
from .utils import param_translate


class Page:
    """
    Logical page facade over a browser engine.

    Not a one-to-one mapping of HTML documents: one page object may cover
    several documents, or a part of one.

    The data store is owned by the instance and is not synchronized; share
    a page across threads only with external locking.
    """

    def __init__(
        self,
        engine: Any,
        *,
        id: Optional[str] = None,
        url: Optional[str] = None,
        data_source: Optional[str] = None,
        param_prefix: Optional[str] = None,
        mouse: Optional[Mouse] = None,
        keyboard: Optional[Keyboard] = None,
        common_button: Optional[Button] = None,
        dynamic_data: Sequence[DynamicData] = (),
    ):
        self._engine = engine
        self._id = id
        self._url = url
        self._data_source = data_source
        self._param_prefix = param_prefix
        self._mouse = mouse or Mouse(engine)
        self._keyboard = keyboard or Keyboard(engine)
        self._common_button = common_button
        self._dynamic_data = tuple(dynamic_data)
        self._data: Dict[str, Any] = {}

    # ─── Lifecycle ──────────────────────────────────────────────────

    def open(self):
        """
        Open (enter) this page.

        Navigates to the translated url, then measures the toolbar height.
        If a dialog blocks the measurement, the dialog is dismissed and the
        measurement retried once; a second failure propagates.
        """
        self._engine.open_url(self.param_translate(self._url))

        try:
            self._engine.compute_toolbar_height()
        except UnhandledAlertError:
            self._engine.get_driver().switch_to.alert().dismiss()
            self._engine.compute_toolbar_height()

    def close(self):
        """Close the current window."""
        self._engine.close()

    def close_others(self):
        """
        Close every window whose title differs from the current one, then
        switch back to the current window.

        Matching is by title, so other windows sharing the title stay open.
        """
        current_title = self.title
        driver = self._engine.get_driver()
        current_handle = driver.window_handle

        for handle in driver.window_handles:
            item = driver.switch_to.window(handle)
            if item.title != current_title:
                item.close()

        driver.switch_to.window(current_handle)

    # ─── Configuration ──────────────────────────────────────────────

    @property
    def id(self) -> Optional[str]:
        return self._id

    @id.setter
    def id(self, value: Optional[str]):
        self._id = value

    @property
    def url(self) -> Optional[str]:
        """Configured url template (not the browser's current url)."""
        return self._url

    @url.setter
    def url(self, value: Optional[str]):
        self._url = value

    @property
    def data_source(self) -> Optional[str]:
        return self._data_source

    @data_source.setter
    def data_source(self, value: Optional[str]):
        self._data_source = value

    @property
    def param_prefix(self) -> Optional[str]:
        return self._param_prefix

    @param_prefix.setter
    def param_prefix(self, value: Optional[str]):
        self._param_prefix = value

    @property
    def common_button(self) -> Optional[Button]:
        return self._common_button

    @common_button.setter
    def common_button(self, value: Optional[Button]):
        self._common_button = value

    @property
    def engine(self) -> Any:
        return self._engine

    @property
    def mouse(self) -> Mouse:
        return self._mouse

    @property
    def keyboard(self) -> Keyboard:
        return self._keyboard

    @property
    def dynamic_data(self) -> Sequence[DynamicData]:
        return self._dynamic_data

    # ─── Browser state ──────────────────────────────────────────────

    @property
    def current_url(self) -> str:
        return self._engine.get_driver().current_url

    @property
    def page_source(self) -> str:
        return self._engine.get_driver().page_source

    @property
    def title(self) -> str:
        return self._engine.get_driver().title

    # ─── Data ───────────────────────────────────────────────────────

    @property
    def data(self) -> Dict[str, Any]:
        """Copy of the page data."""
        return dict(self._data)

    def put_data(self, key: str, value: Any):
        self._data[key] = value

    def put_all_data(self, all_data: Mapping[str, Any]):
        self._data.update(all_data)

    def get_data(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def remove_data(self, key: str):
        self._data.pop(key, None)

    def contains_key(self, key: str) -> bool:
        return key in self._data

    def clear_data(self):
        self._data.clear()

    # ─── Parameters ─────────────────────────────────────────────────

    def param_translate(self, value: Optional[str]) -> Optional[str]:
        """
        Resolve placeholders in value.

        The first "system" provider (in registration order) runs on the
        whole string; page data substitution then runs on its output.
        """
        result = value
        system = find_first(self._dynamic_data, SYSTEM)
        if system is not None:
            result = system.value(result)

        return param_translate(self._data, self._param_prefix, result)

    def __repr__(self):
        return f"Page(id={self._id!r}, url={self._url!r})"
