"""
UI elements located by CSS selector.
"""

from typing import Any, Optional, Tuple

from .errors import NoSuchElementError
from .input import Mouse
from .utils import box_center


class Button:
    """Clickable element. Clicks land on the center of its content box."""

    def __init__(self, engine: Any, selector: Optional[str] = None, mouse: Optional[Mouse] = None):
        self.engine = engine
        self.selector = selector
        self.mouse = mouse or Mouse(engine)

    def center(self) -> Tuple[int, int]:
        """Viewport center of the element."""
        if not self.selector:
            raise NoSuchElementError("Button has no selector")

        driver = self.engine.driver
        root = driver.send("DOM.getDocument")["root"]["nodeId"]
        node_id = driver.send("DOM.querySelector", {"nodeId": root, "selector": self.selector}).get("nodeId")
        if not node_id:
            raise NoSuchElementError(f"No element matches {self.selector!r}")

        driver.send("DOM.scrollIntoViewIfNeeded", {"nodeId": node_id})
        model = driver.send("DOM.getBoxModel", {"nodeId": node_id}).get("model", {})
        point = box_center(model.get("content"))
        if point is None:
            raise NoSuchElementError(f"Element {self.selector!r} has no layout box")
        return point

    def click(self) -> "Button":
        x, y = self.center()
        self.mouse.click(x, y)
        return self

    def __repr__(self):
        return f"Button({self.selector!r})"
