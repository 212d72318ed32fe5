"""
Tool definitions.

Each tool definition contains:
- name: Tool identifier
- description: What the tool does and what it returns
- inputSchema: JSON Schema for tool arguments
"""

from __future__ import annotations

from typing import Any

SELECTOR = {
    "type": "string",
    "description": "CSS selector; may end in :contains(text), e.g. \"button:contains('Save')\"",
}


def _tool(
    name: str,
    description: str,
    properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    return {"name": name, "description": description, "inputSchema": schema}


# ═══════════════════════════════════════════════════════════════════════════════
# NAVIGATION
# ═══════════════════════════════════════════════════════════════════════════════

NAVIGATION_TOOLS: list[dict[str, Any]] = [
    _tool(
        "navigate",
        "Navigate the current tab to a URL and wait for the page-load event. "
        "Fails with navigation_failed or load_timeout.",
        {"url": {"type": "string", "description": "Absolute URL to open"}},
        ["url"],
    ),
    _tool("go_back", "Go one entry back in the tab's history (no_history at the start)."),
    _tool("go_forward", "Go one entry forward in the tab's history (no_history at the end)."),
    _tool(
        "reload",
        "Reload the current page and wait for it to load.",
        {"ignore_cache": {"type": "boolean", "description": "Bypass the cache", "default": False}},
    ),
    _tool("get_page_info", "Title, URL and readyState of the current page, plus the tab id."),
    _tool("get_page_content", "Full HTML of the current page (document.documentElement.outerHTML)."),
]

# ═══════════════════════════════════════════════════════════════════════════════
# DOM
# ═══════════════════════════════════════════════════════════════════════════════

DOM_TOOLS: list[dict[str, Any]] = [
    _tool(
        "screenshot",
        "Capture the visible viewport as an image.",
        {
            "format": {"type": "string", "enum": ["png", "jpeg", "webp"], "default": "png"},
            "quality": {
                "type": "integer",
                "minimum": 0,
                "maximum": 100,
                "default": 80,
                "description": "Compression quality for jpeg/webp",
            },
        },
    ),
    _tool(
        "evaluate_js",
        "Evaluate a JavaScript expression in the page. A thrown exception is reported "
        "in the result's exception field (message, line, column).",
        {
            "expression": {"type": "string", "description": "JavaScript expression"},
            "return_by_value": {"type": "boolean", "default": True},
            "await_promise": {"type": "boolean", "default": False},
        },
        ["expression"],
    ),
    _tool(
        "find_element",
        "Locate an element and return its centre point, tag and text. "
        "Fails with element_not_found or element_not_visible.",
        {"selector": SELECTOR},
        ["selector"],
    ),
    _tool("click_element", "Click the centre of the element matching a selector.", {"selector": SELECTOR}, ["selector"]),
    _tool(
        "get_interactive_elements",
        "List visible links, buttons, inputs and other interactive elements in the viewport "
        "with a derived selector and centre point for each.",
    ),
]

# ═══════════════════════════════════════════════════════════════════════════════
# INPUT
# ═══════════════════════════════════════════════════════════════════════════════

INPUT_TOOLS: list[dict[str, Any]] = [
    _tool(
        "click_at",
        "Click at viewport coordinates.",
        {
            "x": {"type": "number"},
            "y": {"type": "number"},
            "button": {"type": "string", "enum": ["left", "right", "middle"], "default": "left"},
            "click_count": {"type": "integer", "minimum": 1, "default": 1},
        },
        ["x", "y"],
    ),
    _tool(
        "type_text",
        "Type text into the focused element, one character at a time.",
        {"text": {"type": "string"}},
        ["text"],
    ),
    _tool(
        "press_key",
        "Press and release one key: Enter, Tab, Escape, Backspace, Delete, Space, "
        "ArrowUp/Down/Left/Right, Home, End, PageUp, PageDown, F1-F12 or a single character.",
        {"key": {"type": "string"}},
        ["key"],
    ),
    _tool(
        "key_combination",
        "Press a key combination such as 'Ctrl+Shift+T' or 'Meta+A'. Modifiers are held "
        "in the listed order and released in reverse.",
        {"keys": {"type": "string", "description": "Keys joined with '+'"}},
        ["keys"],
    ),
    _tool(
        "scroll_page",
        "Scroll instantly by a pixel offset using a mouse-wheel event.",
        {
            "delta_x": {"type": "number", "default": 0},
            "delta_y": {"type": "number", "default": 0},
        },
    ),
    _tool(
        "smooth_scroll",
        "Animate a scroll by a pixel offset over a duration and wait for it to finish.",
        {
            "delta_x": {"type": "number", "default": 0},
            "delta_y": {"type": "number", "default": 0},
            "duration_ms": {"type": "integer", "minimum": 0, "default": 400},
        },
    ),
    _tool(
        "scroll_to_element",
        "Smooth-scroll an element to the viewport centre; reports inViewport after it settles.",
        {"selector": SELECTOR},
        ["selector"],
    ),
]

# ═══════════════════════════════════════════════════════════════════════════════
# FORMS
# ═══════════════════════════════════════════════════════════════════════════════

FORM_TOOLS: list[dict[str, Any]] = [
    _tool(
        "fill_form_field",
        "Focus a field, clear it, then type the value. Stops at the first failing step.",
        {"selector": SELECTOR, "value": {"type": "string"}},
        ["selector", "value"],
    ),
    _tool("focus_element", "Focus an element.", {"selector": SELECTOR}, ["selector"]),
    _tool(
        "clear_input",
        "Clear an input, textarea or contentEditable element (not_text_input otherwise).",
        {"selector": SELECTOR},
        ["selector"],
    ),
    _tool(
        "select_option",
        "Select an option of a <select> by value or visible text. "
        "Fails with wrong_element_type or option_not_found.",
        {"selector": SELECTOR, "value": {"type": "string"}},
        ["selector", "value"],
    ),
    _tool(
        "check_checkbox",
        "Set a checkbox or radio button to the given state and fire a change event.",
        {"selector": SELECTOR, "checked": {"type": "boolean", "default": True}},
        ["selector"],
    ),
]

# ═══════════════════════════════════════════════════════════════════════════════
# WINDOW
# ═══════════════════════════════════════════════════════════════════════════════

WINDOW_TOOLS: list[dict[str, Any]] = [
    _tool("get_window_bounds", "Window position (left, top), size (width, height) and state."),
    _tool(
        "resize_window",
        "Resize the browser window; an omitted dimension keeps its current value.",
        {"width": {"type": "integer", "minimum": 1}, "height": {"type": "integer", "minimum": 1}},
    ),
    _tool(
        "move_window",
        "Move the browser window; an omitted coordinate keeps its current value.",
        {"left": {"type": "integer"}, "top": {"type": "integer"}},
    ),
    _tool("maximize_window", "Maximize the browser window."),
    _tool("minimize_window", "Minimize the browser window."),
    _tool("restore_window", "Restore the browser window to its normal state."),
]

# ═══════════════════════════════════════════════════════════════════════════════
# SCRIPTS & CONSOLE
# ═══════════════════════════════════════════════════════════════════════════════

SCRIPT_TOOLS: list[dict[str, Any]] = [
    _tool(
        "inject_script",
        "Run a script on every future page load of this tab and once on the current page. "
        "Returns the identifier needed by remove_injected_script.",
        {"script": {"type": "string", "description": "JavaScript source"}},
        ["script"],
    ),
    _tool(
        "remove_injected_script",
        "Stop running a previously injected script on new page loads.",
        {"identifier": {"type": "string"}},
        ["identifier"],
    ),
    _tool("enable_console_logging", "Start capturing console messages and uncaught exceptions (clears the buffer)."),
    _tool("disable_console_logging", "Stop capturing and discard the buffer."),
    _tool(
        "get_console_logs",
        "Return captured console entries (level, text, timestamp, source).",
        {"clear": {"type": "boolean", "default": False, "description": "Empty the buffer after reading"}},
    ),
]

# ═══════════════════════════════════════════════════════════════════════════════
# TABS
# ═══════════════════════════════════════════════════════════════════════════════

TAB_TOOLS: list[dict[str, Any]] = [
    _tool("list_tabs", "List open page tabs; the tab this server is attached to has current=true."),
    _tool(
        "new_tab",
        "Open a new tab and attach to it.",
        {"url": {"type": "string", "default": "about:blank"}},
    ),
    _tool(
        "close_tab",
        "Close a tab (default: the attached one, which detaches the session).",
        {"tab_id": {"type": "string"}},
    ),
    _tool("switch_tab", "Bring a tab to front and attach to it.", {"tab_id": {"type": "string"}}, ["tab_id"]),
]

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    *NAVIGATION_TOOLS,
    *DOM_TOOLS,
    *INPUT_TOOLS,
    *FORM_TOOLS,
    *WINDOW_TOOLS,
    *SCRIPT_TOOLS,
    *TAB_TOOLS,
]

STREAMING_TOOL_DEFINITION: dict[str, Any] = _tool(
    "streaming_http_request",
    "Make an HTTP request through the configured streaming endpoint. Returns status, headers and body.",
    {
        "url": {"type": "string", "description": "The URL to request"},
        "method": {
            "type": "string",
            "enum": ["GET", "POST", "PUT", "DELETE", "PATCH"],
            "description": "HTTP method",
            "default": "GET",
        },
        "headers": {"type": "object", "description": "HTTP headers as key-value pairs"},
        "body": {"type": "string", "description": "Request body for POST/PUT/PATCH requests"},
    },
    ["url"],
)
