"""
Browser automation operations organized by domain.

Every operation takes the live ``CdpSession`` and returns a plain dict:
``{"success": True, ...}`` or ``{"success": False, "error": <reason>, ...}``.

- base: Result shapes, failure reasons, command/evaluate helpers
- js_helpers: Parameterized page-side script templates
- navigation: Page navigation, history, page info/content
- dom: Screenshots, evaluation, element lookup and click
- input: Mouse, keyboard, scroll operations
- forms: Focus, clear, fill, select, checkbox
- window: Window bounds and state
- scripts: Script injection
- console: Console capture controls
"""

from .base import SmartToolError, fail, is_ok, ok
from .console import disable_console_logging, enable_console_logging, get_console_logs
from .dom import click_element, evaluate_script, find_element, get_interactive_elements, screenshot
from .forms import check_checkbox, clear_input, fill_form_field, focus_element, select_option
from .input import click_at, key_combination, press_key, scroll_page, scroll_to_element, smooth_scroll, type_text
from .navigation import get_page_content, get_page_info, go_back, go_forward, navigate, reload_page
from .scripts import inject_script, remove_injected_script
from .window import (
    WindowBounds,
    get_window_bounds,
    maximize_window,
    minimize_window,
    move_window,
    resize_window,
    restore_window,
)

__all__ = [
    # base
    "SmartToolError",
    "ok",
    "fail",
    "is_ok",
    # navigation
    "navigate",
    "go_back",
    "go_forward",
    "reload_page",
    "get_page_info",
    "get_page_content",
    # dom
    "screenshot",
    "evaluate_script",
    "find_element",
    "click_element",
    "get_interactive_elements",
    # input
    "click_at",
    "type_text",
    "press_key",
    "key_combination",
    "scroll_page",
    "smooth_scroll",
    "scroll_to_element",
    # forms
    "focus_element",
    "clear_input",
    "fill_form_field",
    "select_option",
    "check_checkbox",
    # window
    "WindowBounds",
    "get_window_bounds",
    "resize_window",
    "move_window",
    "maximize_window",
    "minimize_window",
    "restore_window",
    # scripts
    "inject_script",
    "remove_injected_script",
    # console
    "enable_console_logging",
    "disable_console_logging",
    "get_console_logs",
]
