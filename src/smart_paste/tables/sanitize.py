"""Structure-preserving sanitization of pasted HTML tables.

Unlike builder.from_html, which keeps only cell text, sanitize_structured
keeps colspan/rowspan and a small inline-tag whitelist (bold, italic, line
break, span).  Any other element is unwrapped so its text survives; every
other attribute is stripped; rows whose cells are all empty are removed.

The source table is first frozen into immutable HtmlNode trees; emptiness
checks and rendering are pure functions over those trees.
"""

import logging
from html import escape

from bs4 import Tag
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction
from pydantic import ValidationError

from smart_paste.cleaning.normalize import WHITESPACE_RUN_RE, normalize_text, strip_invisible
from smart_paste.tables.classifiers import first_table, row_cells, table_rows
from smart_paste.tables.patterns import (
    DROPPED_TAGS,
    INLINE_TAGS,
    MEDIA_TAGS,
    SPAN_ATTRS,
    TRIVIAL_WRAPPER_TAGS,
)
from smart_paste.tables.schema import HtmlNode, StructuredCell, StructuredTable

logger = logging.getLogger(__name__)

# Markup that never contributes text (comments, conditional comments, doctypes)
_NON_TEXT_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


# ─── Freezing ─────────────────────────────────────────────────────────────────


def freeze(element: Tag | NavigableString) -> HtmlNode:
    """Convert a BeautifulSoup element into an immutable HtmlNode tree.

    Comments and DROPPED_TAGS subtrees (script, style, ...) are left out.
    """
    if isinstance(element, NavigableString):
        return HtmlNode(text=str(element))

    children = tuple(
        freeze(child)
        for child in element.children
        if (isinstance(child, Tag) and child.name.lower() not in DROPPED_TAGS)
        or (isinstance(child, NavigableString) and not isinstance(child, _NON_TEXT_STRINGS))
    )
    attrs = tuple(
        (name.lower(), " ".join(value) if isinstance(value, list) else str(value)) for name, value in element.attrs.items()
    )
    return HtmlNode(tag=element.name.lower(), attrs=attrs, children=children)


# ─── Emptiness Predicate ──────────────────────────────────────────────────────


def text_content(node: HtmlNode) -> str:
    """Concatenated text of *node* and its descendants (DOM textContent)."""
    if node.tag is None:
        return node.text
    return "".join(text_content(child) for child in node.children)


def contains_media(node: HtmlNode) -> bool:
    """Return True if *node* embeds an image / svg / video / audio or a link with an href."""
    if node.tag in MEDIA_TAGS:
        return True
    if node.tag == "a" and node.attr("href"):
        return True
    return any(contains_media(child) for child in node.children)


def strip_trivial(node: HtmlNode) -> tuple[HtmlNode, ...]:
    """Return *node* without line breaks, with text-less inline wrappers unwrapped."""
    if node.tag is None:
        return (node,)
    if node.tag == "br":
        return ()
    stripped = tuple(kept for child in node.children for kept in strip_trivial(child))
    if node.tag in TRIVIAL_WRAPPER_TAGS and not normalize_text(text_content(node)):
        return stripped
    return (node.model_copy(update={"children": stripped}),)


def is_cell_empty(cell: HtmlNode) -> bool:
    """Return True if *cell* has no media or links and no visible text once trivia is stripped."""
    if contains_media(cell):
        return False
    remaining = tuple(kept for child in cell.children for kept in strip_trivial(child))
    return not normalize_text("".join(text_content(node) for node in remaining))


# ─── Rendering ────────────────────────────────────────────────────────────────


def render_inline(node: HtmlNode) -> str:
    """Render *node* keeping only whitelisted inline tags, unwrapping the rest."""
    if node.tag is None:
        return escape(WHITESPACE_RUN_RE.sub(" ", strip_invisible(node.text)), quote=False)
    if node.tag in DROPPED_TAGS:
        return ""
    if node.tag == "br":
        return "<br>"

    inner = "".join(render_inline(child) for child in node.children)
    if node.tag in INLINE_TAGS:
        # Attributes are stripped from every kept inline tag
        return f"<{node.tag}>{inner}</{node.tag}>"
    return inner


def _span(cell: HtmlNode, name: str) -> int:
    """Parse a colspan / rowspan attribute, defaulting to 1."""
    raw = cell.attr(name)
    try:
        value = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    return max(value, 1)


def sanitize_cell(cell: HtmlNode) -> StructuredCell:
    """Build a StructuredCell from a frozen <td>/<th>, keeping only span attributes."""
    spans = {name: _span(cell, name) for name in SPAN_ATTRS}
    html = "".join(render_inline(child) for child in cell.children).strip()
    return StructuredCell(html=html, header=cell.tag == "th", **spans)


def sanitize_structured(html: str) -> StructuredTable | None:
    """Sanitize the first <table> in *html*; None if nothing remains or it is too large."""
    table = first_table(html)
    if table is None:
        return None

    rows: list[list[StructuredCell]] = []
    dropped = 0
    for tr in table_rows(table):
        cells = [freeze(cell) for cell in row_cells(tr)]
        if all(is_cell_empty(cell) for cell in cells):
            dropped += 1
            continue
        rows.append([sanitize_cell(cell) for cell in cells])

    if dropped:
        logger.debug("Dropped %d empty rows from pasted table", dropped)
    if not rows:
        return None

    try:
        return StructuredTable(rows=rows)
    except ValidationError as exc:
        logger.warning("Rejecting pasted table: %s", exc.errors()[0]["msg"])
        return None
