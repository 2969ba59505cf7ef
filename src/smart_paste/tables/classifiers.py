"""Heuristics that decide whether pasted content is tabular.

detect_delimiter looks at clipboard plain text (spreadsheet TSV, or short
CSV lines); is_definite_data_table looks at clipboard HTML and separates
data tables from tables used purely for visual layout.  Both lean towards
"not a table" when the evidence is ambiguous.
"""

import logging

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel

from smart_paste.tables.patterns import LAYOUT_ZERO_ATTRS, ZERO_VALUE_RE

logger = logging.getLogger(__name__)

# CSV lines longer than this on average are prose with commas, not data
MAX_CSV_AVG_LINE_LENGTH = 100

MAX_TAB_SPREAD = 1
MAX_COMMA_SPREAD = 2


# ─── Plain-Text Tables ────────────────────────────────────────────────────────


def _tabular_lines(text: str) -> list[str]:
    """Non-blank lines with spaces / CR trimmed (tabs kept so empty edge cells still count)."""
    return [line.strip(" \r") for line in text.split("\n") if line.strip()]


def detect_delimiter(text: str) -> str | None:
    """Return "\\t" for TSV, "," for CSV, or None when *text* is not a consistent grid."""
    if not text:
        return None
    lines = _tabular_lines(text)
    if len(lines) < 2:
        return None

    tab_counts = [line.count("\t") for line in lines]
    if min(tab_counts) >= 1 and max(tab_counts) - min(tab_counts) <= MAX_TAB_SPREAD:
        return "\t"

    comma_counts = [line.count(",") for line in lines]
    avg_length = sum(len(line.strip()) for line in lines) / len(lines)
    if (
        min(comma_counts) >= 1
        and max(comma_counts) - min(comma_counts) <= MAX_COMMA_SPREAD
        and avg_length < MAX_CSV_AVG_LINE_LENGTH
    ):
        return ","
    return None


# ─── HTML Tables ──────────────────────────────────────────────────────────────


class TableStats(BaseModel):
    """Counts taken from the first <table> of a paste."""

    rows: int
    cells: int
    header_cells: int
    zero_layout_attrs: list[str]


def first_table(html: str) -> Tag | None:
    """Parse *html* and return its first <table> element, if any."""
    if not html or "<table" not in html.lower():
        return None
    table = BeautifulSoup(html, "html.parser").find("table")
    return table if isinstance(table, Tag) else None


def table_rows(table: Tag) -> list[Tag]:
    """Return the rows that belong to *table* itself, skipping rows of nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def row_cells(row: Tag) -> list[Tag]:
    """Return the direct <td>/<th> cells of *row*."""
    return row.find_all(["td", "th"], recursive=False)


def table_stats(table: Tag) -> TableStats:
    """Count the table's own rows, cells, and header cells, and note explicit zero layout attributes.

    Nested tables are not counted, matching what the builders read.
    """
    zero_attrs = [
        attr for attr in LAYOUT_ZERO_ATTRS if table.has_attr(attr) and ZERO_VALUE_RE.match(str(table.get(attr)))
    ]
    rows = table_rows(table)
    cells = [cell for row in rows for cell in row_cells(row)]
    return TableStats(
        rows=len(rows),
        cells=len(cells),
        header_cells=sum(1 for cell in cells if cell.name == "th"),
        zero_layout_attrs=zero_attrs,
    )


def is_layout_table(stats: TableStats) -> bool:
    """Return True if the table shows a red flag for being used purely for layout."""
    if stats.zero_layout_attrs:
        return True
    # A single cell is a box, not a table
    if stats.rows == 1 and stats.cells == 1:
        return True
    # A single row without headers is a horizontal layout strip
    return stats.rows == 1 and stats.header_cells == 0


def is_data_table(stats: TableStats) -> bool:
    """Return True if the counts carry enough structure to be tabular data."""
    if stats.header_cells >= 1 and stats.cells >= 2:
        return True
    return stats.rows >= 2 and stats.cells >= 4


def is_definite_data_table(html: str) -> bool:
    """Return True if the first <table> in *html* is confidently a data table."""
    table = first_table(html)
    if table is None:
        return False

    stats = table_stats(table)
    if is_layout_table(stats):
        logger.debug("HTML table rejected as layout table: %s", stats)
        return False
    definite = is_data_table(stats)
    logger.debug("HTML table %s data table: %s", "is a" if definite else "is not a", stats)
    return definite
