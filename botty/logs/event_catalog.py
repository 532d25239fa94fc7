"""Human readable text for logged events.

Templates live in ``event_templates.json`` next to this module, grouped as
``{domain: {action: template}}``. A template is a ``str.format`` pattern
filled from the event's keyword fields.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(raw: Any) -> dict[tuple[str, str], str]:
    if not isinstance(raw, dict):
        raise ValueError("top level must be an object of domains")
    flat: dict[tuple[str, str], str] = {}
    for domain, actions in raw.items():
        if not isinstance(actions, dict):
            continue
        flat.update(
            ((domain.lower(), action.lower()), text)
            for action, text in actions.items()
            if isinstance(text, str)
        )
    return flat


def _read_catalog() -> dict[tuple[str, str], str]:
    source = resources.files(__package__).joinpath("event_templates.json")
    try:
        return _flatten(json.loads(source.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Event templates unreadable: {e}"[:200]}


def reload_event_templates() -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = _read_catalog()


def render_event(domain: str, action: str, fields: dict[str, object]) -> str | None:
    """Fill the template for ``(domain, action)``.

    Returns ``None`` for unknown events. A template whose fields were not all
    supplied is returned unfilled.
    """
    template = EVENT_TEMPLATES.get((domain, action))
    if template is None:
        return None
    try:
        return template.format(**fields)
    except (KeyError, IndexError, ValueError):
        return template


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates", "render_event"]
