"""Canonical forms for identifiers and free text.

Identifiers are only ever trimmed: characters that validation rejects are
never silently removed, so two inputs map to the same key only when they
differ by surrounding whitespace.
"""
from typing import Any

# Control characters below 0x20 that are allowed to survive: tab, newline, carriage return
ALLOWED_CONTROL_CHARS = frozenset({9, 10, 13})


def is_disallowed_control_char(ch: str) -> bool:
    code = ord(ch)
    return code < 32 and code not in ALLOWED_CONTROL_CHARS


def normalize_identifier(raw: Any) -> Any:
    """Trim leading/trailing whitespace; non-strings pass through unchanged."""
    if not isinstance(raw, str):
        return raw
    return raw.strip()


def normalize_text(value: Any) -> Any:
    """Trim and drop control characters from free text (titles, names).

    Not for identifiers.
    """
    if not isinstance(value, str):
        return value
    return "".join(ch for ch in value.strip() if not is_disallowed_control_char(ch))
