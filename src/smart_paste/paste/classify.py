"""Classify a clipboard payload into exactly one ContentCategory.

Decision order, first match wins:
  1. Image        -- an image item and no text / HTML alongside it
  2. TabularText  -- plain text forming a consistent TSV / CSV grid
  3. HtmlTable    -- HTML whose first <table> is a definite data table
  4. ProseText    -- any other non-blank plain text
  5. Empty        -- nothing usable; the host pastes as usual
"""

import logging
from collections.abc import Iterator

from smart_paste.paste.payload import (
    ClipboardPayload,
    ContentCategory,
    EmptyContent,
    HtmlTableContent,
    ImageContent,
    ProseTextContent,
    TabularTextContent,
)
from smart_paste.tables.classifiers import detect_delimiter, is_definite_data_table

logger = logging.getLogger(__name__)


def candidates(payload: ClipboardPayload) -> Iterator[ContentCategory]:
    """Yield every category *payload* qualifies for, in decision order, ending with Empty.

    The paste handler walks this sequence so a stage that declines (e.g. a grid
    over the cell limit) falls through to the next candidate.
    """
    has_text = bool(payload.plain_text.strip())
    has_html = bool(payload.html.strip())

    image = payload.image_item()
    if image is not None and not has_text and not has_html:
        yield ImageContent(item=image)

    delimiter = detect_delimiter(payload.plain_text)
    if delimiter is not None:
        yield TabularTextContent(text=payload.plain_text, delimiter=delimiter)

    if has_html and is_definite_data_table(payload.html):
        yield HtmlTableContent(html=payload.html)

    if has_text:
        yield ProseTextContent(text=payload.plain_text)

    yield EmptyContent()


def classify(payload: ClipboardPayload) -> ContentCategory:
    """Return the single ContentCategory for *payload*."""
    category = next(candidates(payload))
    logger.debug("Classified paste as %s", category.kind)
    return category
