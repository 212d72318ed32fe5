"""
Synthetic input: mouse, keyboard and scrolling.
"""
from __future__ import annotations

from .keyboard import key_combination, press_key, type_text
from .mouse import click_at
from .scroll import scroll_page, scroll_to_element, smooth_scroll

__all__ = [
    "click_at",
    "type_text",
    "press_key",
    "key_combination",
    "scroll_page",
    "smooth_scroll",
    "scroll_to_element",
]
