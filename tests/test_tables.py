"""Unit tests for table detection, grid building, and structure-preserving sanitization."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from bs4 import BeautifulSoup
from pydantic import ValidationError

from smart_paste.tables.builder import from_csv, from_delimited, from_html, from_tsv
from smart_paste.tables.classifiers import detect_delimiter, is_definite_data_table, table_stats, first_table
from smart_paste.tables.sanitize import freeze, is_cell_empty, sanitize_structured, strip_trivial
from smart_paste.tables.schema import StructuredCell, StructuredTable, TableGrid


def frozen_cell(cell_html: str):
    """Parse a single <td>/<th> inside a table and return it as an HtmlNode."""
    soup = BeautifulSoup(f"<table><tr>{cell_html}</tr></table>", "html.parser")
    return freeze(soup.find(["td", "th"]))


# ===========================================================================
# detect_delimiter tests
# ===========================================================================


class TestDetectDelimiter:

    def test_tsv(self):
        assert detect_delimiter("a\tb\nc\td\n") == "\t"

    def test_tsv_tab_spread_of_one(self):
        assert detect_delimiter("a\tb\tc\nd\te\n") == "\t"

    def test_tsv_trailing_empty_cell_keeps_tab(self):
        assert detect_delimiter("a\t\nc\td") == "\t"

    def test_csv(self):
        assert detect_delimiter("name,age\nAlice,30\nBob,25") == ","

    def test_single_line_not_tabular(self):
        assert detect_delimiter("a\tb\tc") is None

    def test_tab_spread_too_large(self):
        assert detect_delimiter("a\tb\tc\td\nx\ty") is None

    def test_line_without_delimiter(self):
        assert detect_delimiter("a,b,c\nplain line") is None

    def test_long_prose_with_commas(self):
        line = "Well, this sentence is long, and it has commas, but it is prose rather than data by any measure at all."
        assert detect_delimiter(f"{line}\n{line}") is None

    def test_empty(self):
        assert detect_delimiter("") is None


# ===========================================================================
# TableGrid schema tests
# ===========================================================================


class TestTableGrid:

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValidationError):
            TableGrid(rows=[["a"], ["b", "c"]])

    def test_too_many_cells_rejected(self):
        with pytest.raises(ValidationError):
            TableGrid(rows=[["x", "y"]] * 1001)

    def test_to_html_escapes(self):
        grid = TableGrid(rows=[["<a>&"]])
        assert grid.to_html() == "<table><tbody><tr><td>&lt;a&gt;&amp;</td></tr></tbody></table>"

    def test_n_cols(self):
        assert TableGrid(rows=[["a", "b"]]).n_cols == 2
        assert TableGrid(rows=[]).n_cols == 0


class TestStructuredTable:

    def test_to_html_keeps_spans(self):
        table = StructuredTable(rows=[[StructuredCell(html="<b>H</b>", header=True, colspan=2)]])
        assert table.to_html() == '<table><tbody><tr><th colspan="2"><b>H</b></th></tr></tbody></table>'

    def test_too_many_cells_rejected(self):
        with pytest.raises(ValidationError):
            StructuredTable(rows=[[StructuredCell(html="x")]] * 2001)


# ===========================================================================
# from_tsv / from_csv tests
# ===========================================================================


class TestFromTsv:

    def test_basic(self):
        assert from_tsv("a\tb\nc\td\n").rows == [["a", "b"], ["c", "d"]]

    def test_pads_to_max_columns(self):
        assert from_tsv("a\tb\tc\nd\te\n").rows == [["a", "b", "c"], ["d", "e", ""]]

    def test_interior_blank_line_kept_as_row(self):
        assert from_tsv("a\tb\n\nc\td").rows == [["a", "b"], ["", ""], ["c", "d"]]

    def test_line_without_tab_is_one_cell(self):
        assert from_tsv("title\na\tb").rows == [["title", ""], ["a", "b"]]

    def test_crlf(self):
        assert from_tsv("a\tb\r\nc\td\r\n").rows == [["a", "b"], ["c", "d"]]

    def test_cells_normalized(self):
        assert from_tsv("a\u00a0 b\tc\u200b\nd\te").rows == [["a b", "c"], ["d", "e"]]

    def test_n_rows_by_m_columns(self):
        text = "\n".join("\t".join(f"r{r}c{c}" for c in range(5 if r % 2 else 3)) for r in range(40)) + "\n"
        grid = from_tsv(text)
        assert len(grid.rows) == 40
        assert all(len(row) == 5 for row in grid.rows)
        assert grid.rows[0][3:] == ["", ""]

    def test_exactly_at_cell_limit(self):
        assert len(from_tsv("a\tb\n" * 1000).rows) == 1000

    def test_over_cell_limit_rejected(self):
        assert from_tsv("a\tb\n" * 1001) is None

    def test_empty(self):
        assert from_tsv("") is None


class TestFromCsv:

    def test_quoted_comma_stays_in_cell(self):
        assert from_csv('name,"Smith, John"\nage,30').rows == [["name", "Smith, John"], ["age", "30"]]

    def test_pads(self):
        assert from_csv("a,b,c\nd").rows == [["a", "b", "c"], ["d", "", ""]]


class TestFromDelimited:

    def test_dispatch(self):
        assert from_delimited("a\tb\nc\td", "\t").rows == [["a", "b"], ["c", "d"]]
        assert from_delimited("a,b\nc,d", ",").rows == [["a", "b"], ["c", "d"]]

    def test_unknown_delimiter(self):
        with pytest.raises(ValueError):
            from_delimited("a;b", ";")


# ===========================================================================
# from_html tests
# ===========================================================================


class TestFromHtml:

    def test_text_only_and_empty_rows_dropped(self):
        html = (
            "<table><tr><td><b>A</b></td><td style='color:red'>B</td></tr>"
            "<tr><td></td><td>&nbsp;</td></tr>"
            "<tr><td>C</td></tr></table>"
        )
        assert from_html(html).rows == [["A", "B"], ["C", ""]]

    def test_first_table_only(self):
        html = "<table><tr><td>1</td></tr></table><table><tr><td>2</td></tr></table>"
        assert from_html(html).rows == [["1"]]

    def test_nested_table_rows_not_duplicated(self):
        html = "<table><tr><td>outer<table><tr><td>inner</td></tr></table></td><td>x</td></tr></table>"
        assert from_html(html).rows == [["outerinner", "x"]]

    def test_no_table(self):
        assert from_html("<p>hello</p>") is None

    def test_all_rows_empty(self):
        assert from_html("<table><tr><td> </td></tr></table>") is None


# ===========================================================================
# Data-table heuristic tests
# ===========================================================================


class TestIsDefiniteDataTable:

    def test_border_zero_single_cell_is_layout(self):
        assert is_definite_data_table('<table border="0"><tr><td>x</td></tr></table>') is False

    def test_header_row(self):
        assert is_definite_data_table("<table><tr><th>Name</th><th>Age</th></tr></table>") is True

    def test_two_by_two(self):
        html = "<table><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>"
        assert is_definite_data_table(html) is True

    def test_single_row_without_header(self):
        assert is_definite_data_table("<table><tr><td>a</td><td>b</td><td>c</td></tr></table>") is False

    def test_too_few_cells(self):
        assert is_definite_data_table("<table><tr><td>a</td></tr><tr><td>b</td></tr></table>") is False

    def test_zero_cellspacing_is_layout(self):
        html = '<table cellspacing="0"><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>'
        assert is_definite_data_table(html) is False

    def test_zero_px_cellpadding_is_layout(self):
        html = '<table cellpadding="0px"><tr><th>a</th><th>b</th></tr></table>'
        assert is_definite_data_table(html) is False

    def test_nonzero_border_is_fine(self):
        html = '<table border="1"><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>'
        assert is_definite_data_table(html) is True

    def test_no_table(self):
        assert is_definite_data_table("<div>no table</div>") is False

    def test_nested_data_table_inside_layout_cell(self):
        nested = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>"
        assert is_definite_data_table(f"<table><tr><td>{nested}</td></tr></table>") is False

    def test_stats_ignore_nested_tables(self):
        nested = "<table><tr><th>A</th></tr><tr><td>1</td></tr></table>"
        stats = table_stats(first_table(f"<table><tr><td>{nested}</td><td>x</td></tr></table>"))
        assert (stats.rows, stats.cells, stats.header_cells) == (1, 2, 0)

    def test_stats(self):
        stats = table_stats(first_table('<table border="0"><tr><th>a</th><td>b</td></tr></table>'))
        assert (stats.rows, stats.cells, stats.header_cells) == (1, 2, 1)
        assert stats.zero_layout_attrs == ["border"]


# ===========================================================================
# Emptiness predicate tests
# ===========================================================================


class TestIsCellEmpty:

    def test_text(self):
        assert is_cell_empty(frozen_cell("<td>x</td>")) is False

    def test_blank(self):
        assert is_cell_empty(frozen_cell("<td> \u00a0 </td>")) is True

    def test_trivial_wrappers_and_breaks(self):
        assert is_cell_empty(frozen_cell("<td><span><br></span><p><b>\u200b</b></p></td>")) is True

    def test_image_is_content(self):
        assert is_cell_empty(frozen_cell('<td><img src="a.png"></td>')) is False

    def test_link_with_href_is_content(self):
        assert is_cell_empty(frozen_cell('<td><a href="https://example.com"></a></td>')) is False

    def test_anchor_without_href_is_not_content(self):
        assert is_cell_empty(frozen_cell('<td><a name="x"></a></td>')) is True

    def test_script_and_style_are_not_content(self):
        assert is_cell_empty(frozen_cell("<td><script>track()</script><style>p{color:red}</style></td>")) is True

    def test_predicate_does_not_mutate(self):
        cell = frozen_cell("<td><span> </span><br></td>")
        before = cell.model_dump()
        is_cell_empty(cell)
        assert cell.model_dump() == before

    def test_strip_trivial_drops_breaks(self):
        cell = frozen_cell("<td>a<br>b</td>")
        stripped = [node for child in cell.children for node in strip_trivial(child)]
        assert [node.text for node in stripped] == ["a", "b"]


# ===========================================================================
# sanitize_structured tests
# ===========================================================================


class TestSanitizeStructured:

    html = (
        '<table class="MsoTable" style="width:100%">'
        '<tr><td colspan="2" style="color:red"><p><b>Bold</b> and <font color="red">red</font></p></td></tr>'
        "<tr><td><span> </span><br></td><td>&nbsp;</td></tr>"
        '<tr><td>x<img src="a.png"></td><td rowspan="3" class="c">y</td></tr>'
        "</table>"
    )

    def test_empty_rows_removed(self):
        assert len(sanitize_structured(self.html).rows) == 2

    def test_inline_whitelist_kept_others_unwrapped(self):
        cell = sanitize_structured(self.html).rows[0][0]
        assert cell.html == "<b>Bold</b> and red"

    def test_spans_kept(self):
        table = sanitize_structured(self.html)
        assert table.rows[0][0].colspan == 2
        assert table.rows[1][1].rowspan == 3

    def test_other_attributes_stripped(self):
        table = sanitize_structured('<table><tr><td><span style="x" class="y">t</span></td></tr></table>')
        assert table.rows[0][0].html == "<span>t</span>"
        assert "style" not in table.to_html()

    def test_comments_and_styles_dropped(self):
        html = "<table><tr><td><!--[if gte mso 9]>junk<![endif]-->val<style>p{}</style></td></tr></table>"
        assert sanitize_structured(html).rows[0][0].html == "val"

    def test_style_only_row_removed(self):
        html = "<table><tr><td>a</td></tr><tr><td><style>td{border:0}</style></td></tr></table>"
        table = sanitize_structured(html)
        assert len(table.rows) == 1
        assert table.rows[0][0].html == "a"

    def test_header_cells(self):
        table = sanitize_structured("<table><tr><th>H</th><td>v</td></tr></table>")
        assert [cell.header for cell in table.rows[0]] == [True, False]

    def test_line_breaks_kept(self):
        table = sanitize_structured("<table><tr><td>a<br/>b</td></tr></table>")
        assert table.rows[0][0].html == "a<br>b"

    def test_invalid_span_defaults_to_one(self):
        table = sanitize_structured('<table><tr><td colspan="wide">a</td></tr></table>')
        assert table.rows[0][0].colspan == 1

    def test_too_large_rejected(self):
        html = "<table>" + "<tr><td>x</td></tr>" * 2001 + "</table>"
        assert sanitize_structured(html) is None

    def test_no_table(self):
        assert sanitize_structured("<p>none</p>") is None
