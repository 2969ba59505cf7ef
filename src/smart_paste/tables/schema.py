"""Pydantic models for reconstructed tables.

TableGrid is the rectangular, text-only grid built from TSV/CSV/HTML.
StructuredTable keeps cell spans and whitelisted inline markup, so it is
not padded.  Both cap the total cell count; builders reject larger tables
instead of truncating them.
"""

from html import escape

from pydantic import BaseModel, ConfigDict, model_validator

from smart_paste.config import MAX_TABLE_CELLS


class TableGrid(BaseModel):
    """Rectangular grid of cell strings; every row has the same length."""

    rows: list[list[str]]

    @model_validator(mode="after")
    def validate_shape(self) -> "TableGrid":
        """Ensure rows are equal length and the grid is within MAX_TABLE_CELLS."""
        n_cols = len(self.rows[0]) if self.rows else 0
        for i, row in enumerate(self.rows):
            if len(row) != n_cols:
                raise ValueError(f"Row {i} has {len(row)} cells, expected {n_cols}")
        if len(self.rows) * n_cols > MAX_TABLE_CELLS:
            raise ValueError(f"Grid has {len(self.rows) * n_cols} cells, limit is {MAX_TABLE_CELLS}")
        return self

    @property
    def n_cols(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def to_html(self) -> str:
        """Render as a minimal escaped <table><tbody> fragment."""
        cells = ("".join(f"<td>{escape(cell, quote=False)}</td>" for cell in row) for row in self.rows)
        body = "".join(f"<tr>{row_html}</tr>" for row_html in cells)
        return f"<table><tbody>{body}</tbody></table>"


class StructuredCell(BaseModel):
    """One sanitized cell: inline HTML content plus span attributes."""

    html: str
    header: bool = False
    colspan: int = 1
    rowspan: int = 1

    def to_html(self) -> str:
        tag = "th" if self.header else "td"
        attrs = ""
        if self.colspan != 1:
            attrs += f' colspan="{self.colspan}"'
        if self.rowspan != 1:
            attrs += f' rowspan="{self.rowspan}"'
        return f"<{tag}{attrs}>{self.html}</{tag}>"


class StructuredTable(BaseModel):
    """Sanitized table that preserves spans and inline formatting."""

    rows: list[list[StructuredCell]]

    @model_validator(mode="after")
    def validate_size(self) -> "StructuredTable":
        """Ensure the total cell count is within MAX_TABLE_CELLS."""
        n_cells = sum(len(row) for row in self.rows)
        if n_cells > MAX_TABLE_CELLS:
            raise ValueError(f"Table has {n_cells} cells, limit is {MAX_TABLE_CELLS}")
        return self

    def to_html(self) -> str:
        body = "".join("<tr>" + "".join(cell.to_html() for cell in row) + "</tr>" for row in self.rows)
        return f"<table><tbody>{body}</tbody></table>"


class HtmlNode(BaseModel):
    """Immutable parsed-HTML node: an element (tag set) or a text run (tag None)."""

    model_config = ConfigDict(frozen=True)

    tag: str | None = None
    text: str = ""
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple["HtmlNode", ...] = ()

    def attr(self, name: str) -> str | None:
        for key, value in self.attrs:
            if key == name:
                return value
        return None


HtmlNode.model_rebuild()
