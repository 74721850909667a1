"""
Input device helpers.

Dispatch native mouse and keyboard events through Input.dispatch*Event on
the engine's current window. Coordinates are viewport coordinates unless
converted with Mouse.to_viewport().
"""

from typing import Any, Tuple


class Mouse:
    """Pointer events."""

    def __init__(self, engine: Any):
        self.engine = engine

    def _send(self, params: dict):
        self.engine.driver.send("Input.dispatchMouseEvent", params)

    def to_viewport(self, x: int, y: int) -> Tuple[int, int]:
        """Convert screen-relative window coordinates to viewport coordinates."""
        return x, y - self.engine.toolbar_height

    def move(self, x: int, y: int) -> "Mouse":
        self._send({"type": "mouseMoved", "x": x, "y": y})
        return self

    def click(self, x: int, y: int, button: str = "left", clicks: int = 1) -> "Mouse":
        """Click at coordinates. clicks > 1 sends increasing clickCount."""
        self.move(x, y)
        for n in range(1, clicks + 1):
            self._send({
                "type": "mousePressed", "x": x, "y": y, "button": button, "clickCount": n
            })
            self._send({
                "type": "mouseReleased", "x": x, "y": y, "button": button, "clickCount": n
            })
        return self

    def double_click(self, x: int, y: int) -> "Mouse":
        return self.click(x, y, clicks=2)

    def right_click(self, x: int, y: int) -> "Mouse":
        return self.click(x, y, button="right")

    def wheel(self, x: int, y: int, delta_x: int = 0, delta_y: int = 0) -> "Mouse":
        self._send({
            "type": "mouseWheel", "x": x, "y": y, "deltaX": delta_x, "deltaY": delta_y
        })
        return self


class Keyboard:
    """Key events."""

    # Windows virtual key codes for keys without text
    KEY_CODES = {
        "Enter": 13,
        "Tab": 9,
        "Escape": 27,
        "Backspace": 8,
        "Delete": 46,
        "ArrowLeft": 37,
        "ArrowUp": 38,
        "ArrowRight": 39,
        "ArrowDown": 40,
    }

    def __init__(self, engine: Any):
        self.engine = engine

    def _send(self, params: dict):
        self.engine.driver.send("Input.dispatchKeyEvent", params)

    def press(self, key: str, modifiers: int = 0) -> "Keyboard":
        """Press and release a named key (e.g. "Enter", "a")."""
        params = {"key": key, "modifiers": modifiers}
        if key in self.KEY_CODES:
            params["windowsVirtualKeyCode"] = self.KEY_CODES[key]
        self._send({"type": "keyDown", **params})
        self._send({"type": "keyUp", **params})
        return self

    def type_text(self, text: str) -> "Keyboard":
        """Type text via char events."""
        for char in text:
            self._send({"type": "char", "text": char})
        return self

    def enter(self) -> "Keyboard":
        return self.press("Enter")

    def escape(self) -> "Keyboard":
        return self.press("Escape")
