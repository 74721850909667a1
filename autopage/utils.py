"""
Shared Utilities

Common utility functions used across modules.
"""

import re
from typing import Any, Mapping, Optional, Tuple


DEFAULT_PARAM_PREFIX = "param"


def box_center(content: list) -> Optional[Tuple[int, int]]:
    """
    Get center point from CDP box model content array.

    CDP DOM.getBoxModel returns content as [x1,y1, x2,y1, x2,y2, x1,y2]
    (clockwise from top-left).

    Args:
        content: Box model content array (8 elements)

    Returns:
        (x, y) center point, or None if invalid
    """
    if not content or len(content) < 8:
        return None
    x = int((content[0] + content[4]) / 2)  # (x1 + x2) / 2
    y = int((content[1] + content[5]) / 2)  # (y1 + y2) / 2
    return x, y


def param_translate(data: Mapping[str, Any], prefix: Optional[str], value: Optional[str]) -> Optional[str]:
    """
    Replace ${<prefix>.<key>} tokens with values from data.

    Substitution is a single pass: replaced values are not scanned again.
    Tokens whose key is missing from data are left untouched.

    Args:
        data: Parameter values (converted with str())
        prefix: Token prefix, DEFAULT_PARAM_PREFIX when blank
        value: Template string

    Returns:
        Translated string, or None if value is None

    Example:
        >>> param_translate({"user": "alice"}, "param", "/u/${param.user}")
        '/u/alice'
    """
    if value is None:
        return None
    if not prefix or not prefix.strip():
        prefix = DEFAULT_PARAM_PREFIX

    pattern = re.compile(r"\$\{" + re.escape(prefix) + r"\.([^}]+)\}")

    def replace(match):
        key = match.group(1)
        return str(data[key]) if key in data else match.group(0)

    return pattern.sub(replace, value)
