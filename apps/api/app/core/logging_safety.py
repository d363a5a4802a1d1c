"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def mask_secret_hint(hint: str | None, *, prefix: str) -> str:
    """Render a stored key hint as a preview that never reveals the secret."""
    tail = (hint or "").strip()
    if not tail:
        return f"{prefix}…"
    return f"{prefix}…{tail}"
