"""Compiled regex patterns and tag sets for pasted-table handling.

Used by builder.py (TSV/CSV/HTML grids), classifiers.py (data vs. layout
table heuristics), and sanitize.py (structure-preserving sanitization).
"""

import re

# ─── Line Splitting ───────────────────────────────────────────────────────────

# Spreadsheet clipboards use CRLF on Windows
LINE_BREAK_RE = re.compile(r"\r?\n")


# ─── Layout-Table Red Flags ───────────────────────────────────────────────────

# Attributes that, when explicitly zero, mark a table used for visual layout
LAYOUT_ZERO_ATTRS = ("border", "cellpadding", "cellspacing")

# "0", "0px", " 0 "
ZERO_VALUE_RE = re.compile(r"^\s*0+(px)?\s*$", re.IGNORECASE)


# ─── Sanitization Whitelists ──────────────────────────────────────────────────

# Table structure tags kept by sanitize_structured
STRUCTURE_TAGS = frozenset({"table", "thead", "tbody", "tfoot", "tr", "th", "td"})

# Inline tags kept inside cells
INLINE_TAGS = frozenset({"b", "strong", "i", "em", "br", "span"})

ALLOWED_TAGS = STRUCTURE_TAGS | INLINE_TAGS

# Attributes kept (on cells only)
SPAN_ATTRS = ("colspan", "rowspan")

# Elements whose content is never text (dropped outright, not unwrapped)
DROPPED_TAGS = ("script", "style", "head", "meta", "link", "title")

# Embedded content that makes a cell non-empty even without text
MEDIA_TAGS = frozenset({"img", "svg", "video", "audio"})

# Wrappers that carry no content of their own when their text is blank
TRIVIAL_WRAPPER_TAGS = frozenset({"span", "strong", "b", "em", "i", "p", "div", "o:p", "font"})
