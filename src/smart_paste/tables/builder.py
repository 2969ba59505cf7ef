"""Build rectangular TableGrids from pasted spreadsheet text or HTML.

Every builder normalizes cell text, pads short rows with "" up to the widest
row, and returns None instead of a grid when nothing usable remains or the
grid would exceed MAX_TABLE_CELLS.
"""

import csv
import logging

from smart_paste.cleaning.normalize import normalize_text
from smart_paste.config import MAX_TABLE_CELLS
from smart_paste.tables.classifiers import first_table, row_cells, table_rows
from smart_paste.tables.patterns import LINE_BREAK_RE
from smart_paste.tables.schema import TableGrid

logger = logging.getLogger(__name__)


def _split_lines(text: str) -> list[str]:
    """Split on line breaks, dropping only a trailing blank line (interior blanks are rows)."""
    lines = LINE_BREAK_RE.split(text)
    if lines and not lines[-1].strip():
        lines.pop()
    return lines


def _pad_grid(rows: list[list[str]]) -> TableGrid | None:
    """Pad *rows* to the widest row and wrap them in a TableGrid, or None if too large."""
    if not rows:
        return None
    n_cols = max(len(row) for row in rows)
    total = len(rows) * n_cols
    if total > MAX_TABLE_CELLS:
        logger.warning("Rejecting %dx%d table (%d cells > %d)", len(rows), n_cols, total, MAX_TABLE_CELLS)
        return None
    return TableGrid(rows=[row + [""] * (n_cols - len(row)) for row in rows])


def from_tsv(text: str) -> TableGrid | None:
    """Build a grid from tab-separated spreadsheet text."""
    lines = _split_lines(text or "")
    rows = [[normalize_text(cell) for cell in (line.split("\t") if "\t" in line else [line])] for line in lines]
    return _pad_grid(rows)


def from_csv(text: str) -> TableGrid | None:
    """Build a grid from comma-separated text; quoted fields may contain commas."""
    lines = _split_lines(text or "")
    rows = []
    for line in lines:
        fields = next(csv.reader([line]), [])
        rows.append([normalize_text(cell) for cell in fields] or [""])
    return _pad_grid(rows)


def from_delimited(text: str, delimiter: str) -> TableGrid | None:
    """Dispatch to the TSV or CSV builder for *delimiter*."""
    if delimiter == "\t":
        return from_tsv(text)
    if delimiter == ",":
        return from_csv(text)
    raise ValueError(f"Unsupported delimiter {delimiter!r}")


def from_html(html: str) -> TableGrid | None:
    """Build a text-only grid from the first <table> in *html*; styling is discarded."""
    table = first_table(html)
    if table is None:
        return None

    rows = []
    for tr in table_rows(table):
        cells = [normalize_text(cell.get_text()) for cell in row_cells(tr)]
        # Drop spacer rows Word / Excel inject between data rows
        if any(cells):
            rows.append(cells)
    return _pad_grid(rows)
