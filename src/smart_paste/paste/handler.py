"""Paste orchestration: classify, transform, build nodes, insert.

handle_paste walks the payload's candidate categories in decision order
(see classify.py).  Each category has exactly one handler; a handler either
produces a PasteResult or declines (returns None), in which case the next
candidate is tried.  A result with ``handled=False`` tells the host to run
its own default paste.

Only the image path awaits anything (the image store).  Nothing raises out
of handle_paste: unexpected errors are logged and the paste is declined.
"""

import logging
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, Field

from smart_paste.cleaning.lists import Paragraph, convert_to_list_structure, has_list_patterns, split_paragraphs
from smart_paste.cleaning.pdf_text import clean_pdf_text
from smart_paste.config import MAX_TABLE_CELLS, PasteSettings, load_settings
from smart_paste.paste.classify import candidates
from smart_paste.paste.nodes import (
    DocNode,
    DocumentHost,
    blocks_to_nodes,
    grid_to_nodes,
    image_node,
    insert_nodes,
    structured_table_to_nodes,
)
from smart_paste.paste.payload import (
    ClipboardItem,
    ClipboardPayload,
    ContentCategory,
    EmptyContent,
    HtmlTableContent,
    ImageContent,
    ProseTextContent,
    TabularTextContent,
)
from smart_paste.paste.storage import ImageStore, StorageLimitExceeded
from smart_paste.tables.builder import from_delimited, from_html
from smart_paste.tables.sanitize import sanitize_structured

logger = logging.getLogger(__name__)

Severity = Literal["info", "success", "warning", "error"]
Notifier = Callable[[str, Severity], None]

CANNOT_INSERT_MESSAGE = "Cannot insert this content here. Place the cursor in a text area and try again."


class PasteResult(BaseModel):
    """Outcome of one paste event."""

    handled: bool  # False: host should run its default paste
    inserted: bool = False
    category: str = "empty"
    nodes: list[DocNode] = Field(default_factory=list)


class SmartPasteHandler:
    """Runs the paste pipeline against one editor's document, notifier, and image store.

    Holds only its collaborators; nothing is carried from one paste to the next.
    """

    def __init__(self, host: DocumentHost, notify: Notifier, storage: ImageStore, settings: PasteSettings | None = None):
        self.host = host
        self.notify = notify
        self.storage = storage
        self.settings = settings or load_settings()

    async def handle(self, payload: ClipboardPayload, preserve_formatting: bool = False) -> PasteResult:
        """Handle one paste.  *preserve_formatting* applies to this paste only."""
        if self.settings.basic_mode:
            return PasteResult(handled=False)

        try:
            for category in candidates(payload):
                result = await self._dispatch(category, preserve_formatting)
                if result is not None:
                    return result
                logger.info("%s handler declined; trying next candidate", category.kind)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Paste pipeline failed; falling back to default paste")
            self.notify("Could not process the pasted content.", "error")
        return PasteResult(handled=False)

    async def _dispatch(self, category: ContentCategory, preserve_formatting: bool) -> PasteResult | None:
        match category:
            case ImageContent(item=item):
                return await self._paste_image(item)
            case TabularTextContent(text=text, delimiter=delimiter):
                return self._paste_tabular_text(text, delimiter)
            case HtmlTableContent(html=html):
                return self._paste_html_table(html, preserve_formatting)
            case ProseTextContent(text=text):
                return self._paste_prose(text, preserve_formatting)
            case EmptyContent():
                return PasteResult(handled=False)
        raise TypeError(f"Unhandled content category {category!r}")

    # ─── Insertion ───────────────────────────────────────────────────────────

    def _insert(self, category: str, nodes: list[DocNode], success_message: str) -> PasteResult:
        """Insert *nodes* all-or-nothing and notify either way."""
        if not insert_nodes(self.host, nodes):
            self.notify(CANNOT_INSERT_MESSAGE, "error")
            return PasteResult(handled=True, inserted=False, category=category)
        self.notify(success_message, "success")
        return PasteResult(handled=True, inserted=True, category=category, nodes=nodes)

    # ─── Handlers ────────────────────────────────────────────────────────────

    async def _paste_image(self, item: ClipboardItem) -> PasteResult | None:
        if not item.blob:
            return None

        # Check the cursor can hold an image before storing anything
        if not self.host.can_insert([DocNode(type="image", attrs={"src": ""})]):
            self.notify(CANNOT_INSERT_MESSAGE, "error")
            return PasteResult(handled=True, inserted=False, category="image")

        self.notify("Saving image locally...", "info")
        try:
            stored = await self.storage.store(item.blob, item.file_name, item.mime_type or "image/png")
        except StorageLimitExceeded:
            self.notify("Image storage is full. Upload existing images first.", "error")
            return PasteResult(handled=True, inserted=False, category="image")
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Failed to store pasted image")
            self.notify(f"Could not save image locally: {exc}", "error")
            return PasteResult(handled=True, inserted=False, category="image")

        return self._insert("image", [image_node(stored)], "Image pasted. It will be uploaded when you save.")

    def _paste_tabular_text(self, text: str, delimiter: str) -> PasteResult | None:
        grid = from_delimited(text, delimiter)
        if grid is None:
            self.notify(f"Pasted data is too large for a table (max {MAX_TABLE_CELLS} cells).", "warning")
            return None
        source = "spreadsheet" if delimiter == "\t" else "CSV"
        logger.info("Pasting %s data as %dx%d table", source, len(grid.rows), grid.n_cols)
        return self._insert("tabular_text", grid_to_nodes(grid), f"Table pasted from {source} text.")

    def _paste_html_table(self, html: str, preserve_formatting: bool) -> PasteResult | None:
        if preserve_formatting:
            table = sanitize_structured(html)
            nodes = structured_table_to_nodes(table) if table is not None else None
        else:
            grid = from_html(html)
            nodes = grid_to_nodes(grid) if grid is not None else None

        if nodes is None:
            self.notify("Could not rebuild the pasted table; pasting as text.", "warning")
            return None
        return self._insert("html_table", nodes, "Table pasted.")

    def _paste_prose(self, text: str, preserve_formatting: bool) -> PasteResult | None:
        # Keep the source formatting: let the host paste it untouched
        if preserve_formatting:
            return PasteResult(handled=False, category="prose_text")

        cleaned = clean_pdf_text(text, force=self.settings.force_pdf_clean)
        was_cleaned = cleaned != text

        blocks = convert_to_list_structure(cleaned) if has_list_patterns(cleaned) else split_paragraphs(cleaned)
        has_lists = any(not isinstance(block, Paragraph) for block in blocks)

        # Nothing to improve on: ordinary text goes through the host's own paste
        if not (was_cleaned or has_lists) or not blocks:
            return PasteResult(handled=False, category="prose_text")

        if was_cleaned and has_lists:
            message = "PDF text cleaned and lists recognized."
        elif has_lists:
            message = "Lists recognized."
        else:
            message = "PDF text cleaned and formatted."
        logger.info("Pasting prose as %d blocks (cleaned=%s, lists=%s)", len(blocks), was_cleaned, has_lists)
        return self._insert("prose_text", blocks_to_nodes(blocks), message)


async def handle_paste(
    payload: ClipboardPayload,
    host: DocumentHost,
    notify: Notifier,
    storage: ImageStore,
    *,
    preserve_formatting: bool = False,
    settings: PasteSettings | None = None,
) -> PasteResult:
    """Run the paste pipeline once; see SmartPasteHandler.handle."""
    handler = SmartPasteHandler(host, notify, storage, settings)
    return await handler.handle(payload, preserve_formatting=preserve_formatting)
