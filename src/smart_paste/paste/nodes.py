"""Build editor document nodes and hand them to the host document.

Nodes use the ProseMirror / TipTap JSON shape (``type``, ``attrs``,
``content``, ``text``, ``marks``) so the host can feed them straight into
its schema.  The host decides whether the nodes fit at the cursor;
insertion is all-or-nothing.
"""

import logging
from typing import Any, Protocol

from bs4 import BeautifulSoup, NavigableString, Tag
from pydantic import BaseModel, Field

from smart_paste.cleaning.lists import BulletList, OrderedList, Paragraph, TextBlock
from smart_paste.paste.storage import StoredImage
from smart_paste.tables.schema import StructuredCell, StructuredTable, TableGrid

logger = logging.getLogger(__name__)

# Inline tag -> mark type for sanitized table cells
INLINE_MARKS = {"b": "bold", "strong": "bold", "i": "italic", "em": "italic"}


class DocNode(BaseModel):
    """One document node in ProseMirror JSON form."""

    type: str
    attrs: dict[str, Any] = Field(default_factory=dict)
    content: list["DocNode"] = Field(default_factory=list)
    text: str | None = None
    marks: list[dict[str, Any]] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Return the node as a plain dict, omitting empty fields."""
        return self.model_dump(exclude_defaults=True)


class DocumentHost(Protocol):
    """The host editor's document, as seen by the paste pipeline."""

    def can_insert(self, nodes: list[DocNode]) -> bool:
        """Return True if *nodes* may legally replace the current selection."""

    def replace_selection(self, nodes: list[DocNode]) -> None:
        """Replace the current selection with *nodes* in one transaction."""


# ─── Text ─────────────────────────────────────────────────────────────────────


def text_node(text: str, marks: tuple[str, ...] = ()) -> DocNode:
    return DocNode(type="text", text=text, marks=[{"type": mark} for mark in marks])


def hard_break() -> DocNode:
    return DocNode(type="hardBreak")


def paragraph_node(content: str) -> DocNode:
    """A paragraph whose internal newlines become hardBreak nodes between text segments."""
    children: list[DocNode] = []
    for i, segment in enumerate(content.split("\n")):
        if i > 0:
            children.append(hard_break())
        if segment:
            children.append(text_node(segment))
    return DocNode(type="paragraph", content=children)


def _inline_nodes(element: Tag, marks: tuple[str, ...] = ()) -> list[DocNode]:
    """Convert whitelisted inline HTML into text nodes with bold / italic marks."""
    nodes: list[DocNode] = []
    for child in element.children:
        if isinstance(child, NavigableString):
            if str(child):
                nodes.append(text_node(str(child), marks))
        elif isinstance(child, Tag):
            if child.name == "br":
                nodes.append(hard_break())
                continue
            mark = INLINE_MARKS.get(child.name)
            child_marks = marks + (mark,) if mark and mark not in marks else marks
            nodes.extend(_inline_nodes(child, child_marks))
    return nodes


# ─── Tables ───────────────────────────────────────────────────────────────────


def grid_to_nodes(grid: TableGrid) -> list[DocNode]:
    """One table node with a row node per grid row and a cell node per column."""
    rows = [
        DocNode(type="tableRow", content=[DocNode(type="tableCell", content=[paragraph_node(cell)]) for cell in row])
        for row in grid.rows
    ]
    return [DocNode(type="table", content=rows)]


def _structured_cell_node(cell: StructuredCell) -> DocNode:
    soup = BeautifulSoup(cell.html, "html.parser")
    paragraph = DocNode(type="paragraph", content=_inline_nodes(soup))
    return DocNode(
        type="tableHeader" if cell.header else "tableCell",
        attrs={"colspan": cell.colspan, "rowspan": cell.rowspan},
        content=[paragraph],
    )


def structured_table_to_nodes(table: StructuredTable) -> list[DocNode]:
    """Table nodes for a sanitized table, keeping spans, header cells, and inline marks."""
    rows = [DocNode(type="tableRow", content=[_structured_cell_node(cell) for cell in row]) for row in table.rows]
    return [DocNode(type="table", content=rows)]


# ─── Text Blocks ──────────────────────────────────────────────────────────────


def _list_node(node_type: str, items: list[str], attrs: dict[str, Any] | None = None) -> DocNode:
    entries = [DocNode(type="listItem", content=[paragraph_node(item)]) for item in items]
    return DocNode(type=node_type, attrs=attrs or {}, content=entries)


def block_to_node(block: TextBlock) -> DocNode:
    """Convert one TextBlock into a paragraph or list node."""
    match block:
        case Paragraph(content=content):
            return paragraph_node(content)
        case BulletList(items=items):
            return _list_node("bulletList", items)
        case OrderedList(items=items, start=start):
            return _list_node("orderedList", items, {"start": start} if start != 1 else None)
    raise TypeError(f"Unknown text block {block!r}")


def blocks_to_nodes(blocks: list[TextBlock]) -> list[DocNode]:
    return [block_to_node(block) for block in blocks]


# ─── Images ───────────────────────────────────────────────────────────────────


def image_node(stored: StoredImage) -> DocNode:
    return DocNode(type="image", attrs={"src": stored.url, "alt": stored.file_name, "data-temp-id": stored.id})


# ─── Insertion ────────────────────────────────────────────────────────────────


def insert_nodes(host: DocumentHost, nodes: list[DocNode]) -> bool:
    """Replace the host selection with *nodes*; insert nothing and return False if they do not fit."""
    if not nodes or not host.can_insert(nodes):
        logger.info("Host cannot accept %s here; paste abandoned", ", ".join(node.type for node in nodes) or "nothing")
        return False
    host.replace_selection(nodes)
    return True