"""
Keyboard input operations.

Provides text typing, single key presses and modifier combinations
such as ``Ctrl+Shift+T``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..base import INVALID_ARGUMENT, fail, ok, send_input

if TYPE_CHECKING:
    from ...session_cdp import CdpSession

KEY_EVENT = "Input.dispatchKeyEvent"

# CDP modifier bitmask: 1=Alt, 2=Ctrl, 4=Meta, 8=Shift
MODIFIER_KEYS: dict[str, tuple[str, str, int, int]] = {
    "ctrl": ("Control", "ControlLeft", 17, 2),
    "control": ("Control", "ControlLeft", 17, 2),
    "shift": ("Shift", "ShiftLeft", 16, 8),
    "alt": ("Alt", "AltLeft", 18, 1),
    "option": ("Alt", "AltLeft", 18, 1),
    "meta": ("Meta", "MetaLeft", 91, 4),
    "cmd": ("Meta", "MetaLeft", 91, 4),
    "command": ("Meta", "MetaLeft", 91, 4),
}

NAMED_KEYS: dict[str, tuple[str, str, int]] = {
    "enter": ("Enter", "Enter", 13),
    "return": ("Enter", "Enter", 13),
    "tab": ("Tab", "Tab", 9),
    "escape": ("Escape", "Escape", 27),
    "esc": ("Escape", "Escape", 27),
    "backspace": ("Backspace", "Backspace", 8),
    "delete": ("Delete", "Delete", 46),
    "insert": ("Insert", "Insert", 45),
    "space": (" ", "Space", 32),
    "arrowup": ("ArrowUp", "ArrowUp", 38),
    "arrowdown": ("ArrowDown", "ArrowDown", 40),
    "arrowleft": ("ArrowLeft", "ArrowLeft", 37),
    "arrowright": ("ArrowRight", "ArrowRight", 39),
    "home": ("Home", "Home", 36),
    "end": ("End", "End", 35),
    "pageup": ("PageUp", "PageUp", 33),
    "pagedown": ("PageDown", "PageDown", 34),
    **{f"f{n}": (f"F{n}", f"F{n}", 111 + n) for n in range(1, 13)},
}

# Text inserted by the key itself when pressed without Ctrl/Alt/Meta.
KEY_TEXT = {"Enter": "\r", " ": " "}


@dataclass(frozen=True, slots=True)
class KeySpec:
    key: str
    code: str
    key_code: int
    modifier_bit: int = 0

    def event(self, event_type: str, modifiers: int, with_text: bool = False) -> dict[str, Any]:
        params: dict[str, Any] = {
            "type": event_type,
            "key": self.key,
            "code": self.code,
            "windowsVirtualKeyCode": self.key_code,
            "nativeVirtualKeyCode": self.key_code,
            "modifiers": modifiers,
        }
        if with_text:
            text = KEY_TEXT.get(self.key, self.key if len(self.key) == 1 else "")
            if text:
                params["text"] = text
        return params


def resolve_key(name: str) -> KeySpec:
    """Map a key name to its KeySpec; unknown names fall back to the code of their first character."""
    lowered = name.lower()
    if lowered in MODIFIER_KEYS:
        key, code, key_code, bit = MODIFIER_KEYS[lowered]
        return KeySpec(key, code, key_code, bit)
    if lowered in NAMED_KEYS:
        key, code, key_code = NAMED_KEYS[lowered]
        return KeySpec(key, code, key_code)
    char = name[0]
    if char.isalpha():
        code = f"Key{char.upper()}"
    elif char.isdigit():
        code = f"Digit{char}"
    else:
        code = ""
    key = name if len(name) == 1 else char
    return KeySpec(key, code, ord(char.upper()))


def parse_combination(keys: str) -> tuple[list[str], str]:
    """Split ``"Ctrl+Shift+T"`` into (["Ctrl", "Shift"], "T"); a literal ``+`` key is allowed last."""
    text = (keys or "").strip()
    if not text:
        raise ValueError("empty key combination")
    if text == "+":
        return [], "+"
    if text.endswith("++"):
        head, final = text[:-2], "+"
    else:
        head, _, final = text.rpartition("+")
    final = final.strip()
    if not final:
        raise ValueError(f"invalid key combination: {keys!r}")
    held = [part.strip() for part in head.split("+") if part.strip()] if head else []
    return held, final


def combination_events(keys: str) -> list[dict[str, Any]]:
    held_names, final_name = parse_combination(keys)
    held = [resolve_key(name) for name in held_names]
    final = resolve_key(final_name)

    events: list[dict[str, Any]] = []
    mask = 0
    for spec in held:
        mask |= spec.modifier_bit
        events.append(spec.event("keyDown", mask))

    typing = not (mask & (1 | 2 | 4))
    events.append(final.event("keyDown", mask, with_text=typing))
    events.append(final.event("keyUp", mask))

    for spec in reversed(held):
        mask &= ~spec.modifier_bit
        events.append(spec.event("keyUp", mask))
    return events


def key_combination(session: CdpSession, keys: str) -> dict[str, Any]:
    """Press modifiers in order, tap the last key, release modifiers in reverse."""
    try:
        events = combination_events(keys)
    except ValueError as e:
        return fail(INVALID_ARGUMENT, message=str(e))
    failure = send_input(session, KEY_EVENT, events)
    if failure is not None:
        return failure
    return ok(keys=keys, events=len(events))


def press_key(session: CdpSession, key: str) -> dict[str, Any]:
    """Press and release a single key (``Enter``, ``Tab``, ``a``...)."""
    if not key:
        return fail(INVALID_ARGUMENT, message="key is required")
    spec = resolve_key(key)
    failure = send_input(session, KEY_EVENT, [spec.event("keyDown", 0, with_text=True), spec.event("keyUp", 0)])
    if failure is not None:
        return failure
    return ok(key=spec.key, keyCode=spec.key_code)


def type_text(session: CdpSession, text: str) -> dict[str, Any]:
    """Type ``text`` into the focused element, one ``char`` event per character."""
    failure = send_input(session, KEY_EVENT, [{"type": "char", "text": ch} for ch in text])
    if failure is not None:
        return failure
    return ok(text=text, length=len(text))
