"""Recognise bullet and numbered lists in pasted prose.

Turns text (usually the output of pdf_text.clean_pdf_text) into an ordered
sequence of TextBlocks: paragraphs, bullet lists, and ordered lists.  Multi-line
items are joined, and bullets that the PDF cleaner folded into one line are
split back out first.
"""

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from smart_paste.cleaning.patterns import (
    BLANK_LINE_RE,
    BULLET_ITEM_RE,
    BULLET_LINE_RE,
    INLINE_BULLET_RE,
    INLINE_BULLET_SPLIT_RE,
    NUMBERED_ITEM_RE,
    NUMBERED_LINE_RE,
    TRAILING_PARAGRAPH_RE,
)

logger = logging.getLogger(__name__)


# ─── Text Blocks ──────────────────────────────────────────────────────────────


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    content: str


class BulletList(BaseModel):
    kind: Literal["bullet_list"] = "bullet_list"
    items: list[str]


class OrderedList(BaseModel):
    kind: Literal["ordered_list"] = "ordered_list"
    items: list[str]
    start: int = 1


TextBlock = Annotated[Paragraph | BulletList | OrderedList, Field(discriminator="kind")]


class ListMarker(BaseModel):
    """A list marker found at the start of a line."""

    kind: Literal["bullet", "ordered"]
    marker: str
    content: str
    indent: int


# ─── Detection ────────────────────────────────────────────────────────────────


def detect_list_marker(line: str) -> ListMarker | None:
    """Return the bullet / numbered marker that starts *line*, or None."""
    trimmed = line.lstrip()
    indent = len(line) - len(trimmed)

    bullet = BULLET_ITEM_RE.match(trimmed)
    if bullet:
        return ListMarker(kind="bullet", marker=bullet.group(1), content=bullet.group(2).strip(), indent=indent)

    numbered = NUMBERED_ITEM_RE.match(trimmed)
    if numbered:
        return ListMarker(kind="ordered", marker=numbered.group(1), content=numbered.group(2).strip(), indent=indent)
    return None


def has_list_patterns(text: str) -> bool:
    """Quick check for any bullet or numbered list markup in *text*."""
    if not text:
        return False
    # Bullet at a line start, or mid-line after the PDF cleaner merged lines
    if BULLET_LINE_RE.search(text) or INLINE_BULLET_RE.search(text):
        return True
    return bool(NUMBERED_LINE_RE.search(text))


def split_inline_bullets(text: str) -> str:
    """Put every mid-line bullet back on its own line, and split off a trailing paragraph.

    "krom til • Utvendig kledning • Rør" becomes three lines.  On a bullet line,
    "• last item. Dersom det er behov ..." becomes the item, a blank line, and
    a new paragraph starting with the connective.
    """
    split = INLINE_BULLET_SPLIT_RE.sub(r"\1\n\2 ", text)

    lines: list[str] = []
    for line in split.split("\n"):
        match = TRAILING_PARAGRAPH_RE.match(line.strip())
        if match:
            lines.extend([match.group(1), "", match.group(2)])
        else:
            lines.append(line)
    return "\n".join(lines)


# ─── Block Construction ───────────────────────────────────────────────────────


class _BlockScanner:
    """Line-scan state machine: none -> paragraph | bullet_list | ordered_list."""

    def __init__(self):
        self.blocks: list[Paragraph | BulletList | OrderedList] = []
        self.state: Literal["none", "paragraph", "bullet_list", "ordered_list"] = "none"
        self.paragraph_lines: list[str] = []
        self.items: list[str] = []
        self.start = 1
        self.pending_item: str | None = None

    def finish_item(self) -> None:
        if self.pending_item is not None:
            self.items.append(self.pending_item.strip())
            self.pending_item = None

    def finish_block(self) -> None:
        self.finish_item()
        if self.state == "paragraph":
            content = "\n".join(self.paragraph_lines)
            if content.strip():
                self.blocks.append(Paragraph(content=content))
        elif self.state == "bullet_list" and self.items:
            self.blocks.append(BulletList(items=self.items))
        elif self.state == "ordered_list" and self.items:
            self.blocks.append(OrderedList(items=self.items, start=self.start))
        self.state = "none"
        self.paragraph_lines = []
        self.items = []

    def feed(self, line: str) -> None:
        # Blank line closes whatever is open
        if not line.strip():
            self.finish_block()
            return

        marker = detect_list_marker(line)
        if marker:
            list_state = "bullet_list" if marker.kind == "bullet" else "ordered_list"
            if self.state not in ("none", list_state):
                self.finish_block()
            self.finish_item()
            if self.state == "none":
                self.state = list_state
                self.start = int(marker.marker) if marker.kind == "ordered" else 1
            self.pending_item = marker.content
            return

        # Continuation of a multi-line list item
        if self.state in ("bullet_list", "ordered_list"):
            self.pending_item = (self.pending_item or "") + " " + line.strip()
            return

        if self.state != "paragraph":
            self.finish_block()
            self.state = "paragraph"
        self.paragraph_lines.append(line)


def convert_to_list_structure(text: str) -> list[Paragraph | BulletList | OrderedList]:
    """Parse *text* into paragraph and list blocks, in document order."""
    if not text or not text.strip():
        return []

    scanner = _BlockScanner()
    for line in split_inline_bullets(text).split("\n"):
        scanner.feed(line)
    scanner.finish_block()

    logger.debug("List recognition produced %d blocks", len(scanner.blocks))
    return scanner.blocks


def split_paragraphs(text: str) -> list[Paragraph]:
    """Split list-free text into paragraphs on blank lines."""
    return [Paragraph(content=chunk.strip()) for chunk in BLANK_LINE_RE.split(text or "") if chunk.strip()]
