"""
Tool handlers grouped by domain.

Each module exports ``<DOMAIN>_HANDLERS``: tool name -> (handler, requires_session).
"""

from __future__ import annotations

from .dom import DOM_HANDLERS
from .forms import FORM_HANDLERS
from .input import INPUT_HANDLERS
from .navigation import NAVIGATION_HANDLERS
from .network import NETWORK_HANDLERS
from .scripts import SCRIPT_HANDLERS
from .tabs import TAB_HANDLERS
from .window import WINDOW_HANDLERS

ALL_HANDLERS: dict[str, tuple] = {
    **NAVIGATION_HANDLERS,
    **DOM_HANDLERS,
    **INPUT_HANDLERS,
    **FORM_HANDLERS,
    **WINDOW_HANDLERS,
    **SCRIPT_HANDLERS,
    **TAB_HANDLERS,
    **NETWORK_HANDLERS,
}

__all__ = ["ALL_HANDLERS"]
