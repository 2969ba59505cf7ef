"""Compiled regex patterns for pasted-prose cleaning.

Used by pdf_text.py (artificial line-break removal) and lists.py
(bullet / numbered list recognition).
"""

import re

# ─── Sentence Patterns ────────────────────────────────────────────────────────

# Terminal punctuation that closes a sentence
SENTENCE_END_RE = re.compile(r"[.!?]$")

# One or more blank lines between paragraphs
BLANK_LINE_RE = re.compile(r"\n[ \t]*\n\s*")

# Paragraph likely starts here (Latin capitals plus the Nordic ones)
CAPITAL_START_RE = re.compile(r"^[A-ZÆØÅ]")


# ─── Structured-Content Detectors ─────────────────────────────────────────────

# Source code: a line starting with a keyword, brace, or comment opener
CODE_LINE_RE = re.compile(r"^\s*(function|class|def|import|#include|\{|\}|//|/\*)", re.MULTILINE)

# Any markup tag
MARKUP_TAG_RE = re.compile(r"<[^>]+>")


# ─── List Markers ─────────────────────────────────────────────────────────────

# Bullet characters recognised as list markers
BULLET_CHARS = "•\\-*"

# "• item", "- item", "* item"
BULLET_ITEM_RE = re.compile(rf"^([{BULLET_CHARS}])\s+(.+)")

# "1. item"
NUMBERED_ITEM_RE = re.compile(r"^(\d+)\.\s+(.+)")

# A raw line that looks like the start of a list item (PDF paragraph grouping)
LIST_LINE_START_RE = re.compile(rf"^\d+\.?\s|^[{BULLET_CHARS}]\s")

# Bullet at the start of any line / sandwiched between spaces / numbered marker
BULLET_LINE_RE = re.compile(rf"^\s*[{BULLET_CHARS}]\s+", re.MULTILINE)
INLINE_BULLET_RE = re.compile(rf"\s+[{BULLET_CHARS}]\s+")
NUMBERED_LINE_RE = re.compile(r"^\s*\d+\.\s+", re.MULTILINE)

# Mid-line "<bullet><space>" that the PDF cleaner folded into a paragraph
INLINE_BULLET_SPLIT_RE = re.compile(rf"(\S)[ \t]+([{BULLET_CHARS}])[ \t]+")


# ─── Paragraph Starters ───────────────────────────────────────────────────────

# Norwegian connectives that open a new paragraph after the last list item
PARAGRAPH_STARTERS = (
    "Dersom",
    "Det",
    "Dette",
    "Disse",
    "Følgende",
    "For",
    "Ved",
    "Alle",
    "Ingen",
    "Hvis",
    "Når",
    "En",
    "Et",
)

_STARTER_ALTERNATION = "|".join(PARAGRAPH_STARTERS)

# "• last item text. Dersom ..." -> item part, trailing paragraph part
TRAILING_PARAGRAPH_RE = re.compile(rf"^([{BULLET_CHARS}]\s.+?[.!?])\s+((?:{_STARTER_ALTERNATION})\b.*)$")
