"""Collapse non-breaking spaces, zero-width characters, and whitespace runs."""

import re

# Zero-width space, non-joiner, joiner, and the byte-order mark
ZERO_WIDTH_RE = re.compile("[\u200b-\u200d\ufeff]")

WHITESPACE_RUN_RE = re.compile(r"\s+")


def strip_invisible(text: str | None) -> str:
    """Replace NBSP with a space and drop zero-width characters, keeping line structure."""
    return ZERO_WIDTH_RE.sub("", (text or "").replace("\u00a0", " "))


def normalize_text(text: str | None) -> str:
    """Return *text* on a single line with every whitespace run collapsed to one space."""
    return WHITESPACE_RUN_RE.sub(" ", strip_invisible(text)).strip()
