"""
Escape user-supplied text before it is stored or displayed
"""
import html
from typing import Any, Optional


def sanitize_html(text: Optional[str]) -> Optional[str]:
    """Escape & < > " ' so stored text renders as text, never markup"""
    if text is None:
        return None
    return html.escape(text, quote=True)


def sanitize_payload(value: Any) -> Any:
    """
    Recursively escape every string inside a JSON-like structure.

    Dict keys are left alone; they come from the schema, not the user.
    """
    if isinstance(value, str):
        return sanitize_html(value)
    if isinstance(value, dict):
        return {key: sanitize_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_payload(item) for item in value]
    return value
