"""
Page-side script templates.

Templates use ``@name`` placeholders; ``render_script`` substitutes each with
the JSON encoding of the Python value, so selectors and values are always
embedded as properly escaped JS literals, never spliced in raw.

Element scripts share one resolver, ``__cdpFind``, which accepts any CSS
selector plus a trailing ``:contains(text)`` pseudo-class (e.g.
``button:contains('Save')``) that matches the innermost element whose text
includes ``text``.

Scripts report through ``{ok: bool, reason?: string, ...}`` objects.
"""

from __future__ import annotations

import json
from string import Template
from typing import Any


class ScriptTemplate(Template):
    delimiter = "@"


def js_literal(value: Any) -> str:
    return json.dumps(value)


def render_script(template: str, **params: Any) -> str:
    return ScriptTemplate(template).substitute({name: js_literal(value) for name, value in params.items()})


FIND_ELEMENT_JS = r"""
    function __cdpFind(selector) {
        const m = /^(.*?):contains\((["']?)(.*?)\2\)\s*$/.exec(selector);
        if (!m) return document.querySelector(selector);
        const base = m[1].trim() || '*';
        const needle = m[3];
        const matches = Array.from(document.querySelectorAll(base))
            .filter((el) => (el.textContent || '').includes(needle));
        const innermost = matches.filter((el) => !matches.some((other) => other !== el && el.contains(other)));
        return innermost[0] || matches[0] || null;
    }
"""

RESOLVE_ELEMENT_JS = r"""
    let el;
    try {
        el = __cdpFind(@selector);
    } catch (e) {
        return {ok: false, reason: 'invalid_selector', message: String((e && e.message) || e)};
    }
    if (!el) return {ok: false, reason: 'element_not_found'};
"""


def element_script(body: str) -> str:
    """Wrap ``body`` so it runs with ``el`` bound to the resolved element."""
    return "(() => {" + FIND_ELEMENT_JS + RESOLVE_ELEMENT_JS + body + "})()"


ELEMENT_CENTER_JS = element_script(
    r"""
    const rect = el.getBoundingClientRect();
    if (rect.width === 0 || rect.height === 0) return {ok: false, reason: 'element_not_visible'};
    return {
        ok: true,
        x: Math.round(rect.left + rect.width / 2),
        y: Math.round(rect.top + rect.height / 2),
        tagName: el.tagName.toLowerCase(),
        text: String(el.textContent || el.value || '').trim().substring(0, 50),
    };
"""
)

FOCUS_ELEMENT_JS = element_script(
    r"""
    el.focus();
    return {ok: true, focused: document.activeElement === el};
"""
)

CLEAR_ELEMENT_JS = element_script(
    r"""
    const tag = el.tagName.toLowerCase();
    if (tag === 'input' || tag === 'textarea') {
        // Native setter keeps framework-controlled inputs in sync.
        const proto = Object.getPrototypeOf(el);
        const desc = proto ? Object.getOwnPropertyDescriptor(proto, 'value') : null;
        if (desc && typeof desc.set === 'function') desc.set.call(el, '');
        else el.value = '';
        el.dispatchEvent(new Event('input', {bubbles: true}));
        return {ok: true};
    }
    if (el.isContentEditable) {
        el.textContent = '';
        el.dispatchEvent(new Event('input', {bubbles: true}));
        return {ok: true};
    }
    return {ok: false, reason: 'not_text_input', tagName: tag};
"""
)

SELECT_OPTION_JS = element_script(
    r"""
    if (el.tagName.toLowerCase() !== 'select') {
        return {ok: false, reason: 'wrong_element_type', tagName: el.tagName.toLowerCase()};
    }
    const wanted = String(@value);
    const options = Array.from(el.options);
    const option = options.find((o) => o.value === wanted)
        || options.find((o) => (o.textContent || '').trim() === wanted);
    if (!option) return {ok: false, reason: 'option_not_found'};
    el.selectedIndex = option.index;
    el.dispatchEvent(new Event('input', {bubbles: true}));
    el.dispatchEvent(new Event('change', {bubbles: true}));
    return {ok: true, selectedValue: el.value, selectedText: (option.textContent || '').trim()};
"""
)

CHECK_CHECKBOX_JS = element_script(
    r"""
    const inputType = el.type ? String(el.type).toLowerCase() : '';
    if (inputType !== 'checkbox' && inputType !== 'radio') {
        return {ok: false, reason: 'wrong_element_type', tagName: el.tagName.toLowerCase()};
    }
    const shouldBeChecked = @checked;
    const changed = el.checked !== shouldBeChecked;
    if (changed) {
        el.checked = shouldBeChecked;
        el.dispatchEvent(new Event('change', {bubbles: true}));
    }
    return {ok: true, checked: el.checked, type: inputType, changed: changed};
"""
)

SCROLL_INTO_VIEW_JS = element_script(
    r"""
    el.scrollIntoView({behavior: 'smooth', block: 'center', inline: 'nearest'});
    return {ok: true};
"""
)

MEASURE_ELEMENT_JS = element_script(
    r"""
    const rect = el.getBoundingClientRect();
    const vw = window.innerWidth || document.documentElement.clientWidth;
    const vh = window.innerHeight || document.documentElement.clientHeight;
    return {
        ok: true,
        rect: {top: rect.top, left: rect.left, width: rect.width, height: rect.height},
        inViewport: rect.top >= 0 && rect.left >= 0 && rect.bottom <= vh && rect.right <= vw,
    };
"""
)

SMOOTH_SCROLL_JS = r"""
new Promise((resolve) => {
    const dx = Number(@dx) || 0;
    const dy = Number(@dy) || 0;
    const duration = Math.max(0, Number(@duration) || 0);
    const startX = window.scrollX;
    const startY = window.scrollY;
    const t0 = performance.now();
    const ease = (t) => (t < 0.5 ? 2 * t * t : -1 + (4 - 2 * t) * t);
    // setTimeout rather than requestAnimationFrame: rAF stalls in background tabs.
    const step = () => {
        const p = duration === 0 ? 1 : Math.min(1, (performance.now() - t0) / duration);
        window.scrollTo(startX + dx * ease(p), startY + dy * ease(p));
        if (p < 1) setTimeout(step, 16);
        else resolve({ok: true, scrollX: window.scrollX, scrollY: window.scrollY});
    };
    step();
})
"""

PAGE_INFO_JS = "({title: document.title, url: window.location.href, readyState: document.readyState})"

PAGE_CONTENT_JS = "document.documentElement.outerHTML"

INTERACTIVE_ELEMENTS_JS = r"""
(() => {
    const selectors = [
        'a[href]', 'button', 'input', 'select', 'textarea',
        '[onclick]', '[role="button"]', '[role="link"]',
        '[tabindex]', 'details', 'summary'
    ];
    const seen = new Set();
    const out = [];
    const vw = window.innerWidth;
    const vh = window.innerHeight;
    for (const selector of selectors) {
        for (const el of document.querySelectorAll(selector)) {
            if (seen.has(el)) continue;
            seen.add(el);
            const rect = el.getBoundingClientRect();
            const style = window.getComputedStyle(el);
            if (rect.width <= 0 || rect.height <= 0) continue;
            if (style.visibility === 'hidden' || style.display === 'none') continue;
            if (rect.top >= vh || rect.bottom <= 0 || rect.left >= vw || rect.right <= 0) continue;
            const tag = el.tagName.toLowerCase();
            const cls = typeof el.className === 'string' ? el.className.trim() : '';
            let derived = tag;
            if (el.id) derived = '#' + el.id;
            else if (cls) derived = tag + '.' + cls.split(/\s+/).join('.');
            out.push({
                tagName: tag,
                selector: derived,
                text: String(el.textContent || el.value || el.placeholder || '').trim().substring(0, 100),
                type: el.type || '',
                href: el.href || '',
                x: Math.round(rect.left + rect.width / 2),
                y: Math.round(rect.top + rect.height / 2),
                width: Math.round(rect.width),
                height: Math.round(rect.height),
            });
        }
    }
    return out;
})()
"""
