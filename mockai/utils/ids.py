"""Identifier generation for mock API objects (``chatcmpl-…``, ``file-…``)."""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits


def generate_id(prefix: str, length: int = 24, *, separator: str = "-") -> str:
    """Return ``prefix`` followed by a random alphanumeric suffix."""

    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}{separator}{suffix}" if prefix else suffix
