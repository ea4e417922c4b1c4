"""Slug and text normalisation shared by all handlers."""

import re
import unicodedata
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[a-zA-Z0-9#]+;")


def sanitize_text(value: Any) -> str:
    """Strip markup and collapse whitespace to single spaces."""
    if value is None:
        return ""
    text = _TAG_RE.sub("", str(value))
    return " ".join(text.split())


def slugify(value: Any) -> str:
    """Lowercase, ASCII, dash-separated form of *value* (empty if nothing survives)."""
    text = _ENTITY_RE.sub("", _TAG_RE.sub("", str(value or "")))
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = re.sub(r"[^a-z0-9\s_-]", "", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


def clean_url(value: Any) -> str:
    """Keep only URLs with a safe scheme or site-relative paths."""
    url = str(value or "").strip()
    if not url:
        return ""
    if url.startswith(("/", "#", "?")):
        return url
    scheme = url.split(":", 1)[0].lower() if ":" in url else ""
    if scheme in ("http", "https", "mailto", "tel"):
        return url
    if not scheme:
        return "http://" + url
    return ""
