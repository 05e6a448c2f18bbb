"""
Input validators — framework-agnostic, pure functions.

Only length is enforced for passwords server-side; composition rules
(upper/lower/digit/symbol) live in the web client.
"""

from __future__ import annotations

from typing import List, Tuple

import validators as _validators

NOTE_TITLE_MAX_LENGTH = 500
DISPLAY_NAME_MIN_LENGTH = 2


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address."""
    return bool(email) and _validators.email(email) is True


def validate_password(password: str, min_length: int = 8) -> Tuple[bool, List[str]]:
    """
    Validate a password against the server-side policy.

    Returns:
        Tuple[bool, List[str]]: (is_valid, missing_requirements)
    """
    if not password:
        return False, ["Password is required"]

    missing = []
    if len(password) < min_length:
        missing.append(f"At least {min_length} characters")

    return len(missing) == 0, missing


def validate_display_name(name: str) -> bool:
    """Return True if the trimmed *name* has at least two characters."""
    return len((name or "").strip()) >= DISPLAY_NAME_MIN_LENGTH


def validate_note_title(title: str) -> bool:
    """Return True if *title* fits the notes.title column."""
    return len(title) <= NOTE_TITLE_MAX_LENGTH
