"""Tests for converter/tables.py: table tokens to ADF table nodes."""

from markfluence.converter.lexer import lex
from markfluence.converter.tables import build_table


def make_table_token(header, rows):
    def cell(text):
        children = [{"type": "text", "raw": text}] if text else []
        return {"type": "table_cell", "attrs": {"align": None}, "children": children}

    return {
        "type": "table",
        "header": [cell(h) for h in header],
        "rows": [[cell(c) for c in row] for row in rows],
    }


def cell_text(cell):
    paragraph = cell["content"][0]
    return "".join(n["text"] for n in paragraph["content"])


# =========================================================================
# Structure
# =========================================================================

class TestTableStructure:

    def test_two_column_table(self):
        node = build_table(make_table_token(["A", "B"], [["1", "2"]]))
        assert node["type"] == "table"
        assert node["attrs"] == {"isNumberColumnEnabled": False, "layout": "default"}
        header_row, body_row = node["content"]
        assert [c["type"] for c in header_row["content"]] == ["tableHeader", "tableHeader"]
        assert [c["type"] for c in body_row["content"]] == ["tableCell", "tableCell"]
        assert [cell_text(c) for c in header_row["content"]] == ["A", "B"]
        assert [cell_text(c) for c in body_row["content"]] == ["1", "2"]

    def test_cell_shape(self):
        node = build_table(make_table_token(["A"], []))
        cell = node["content"][0]["content"][0]
        assert cell == {
            "type": "tableHeader",
            "attrs": {},
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "A"}]}],
        }

    def test_empty_cell_still_has_paragraph(self):
        node = build_table(make_table_token(["A", "B"], [["1", ""]]))
        empty = node["content"][1]["content"][1]
        assert empty["content"] == [{"type": "paragraph", "content": []}]

    def test_header_only(self):
        node = build_table(make_table_token(["A", "B"], []))
        assert len(node["content"]) == 1

    def test_row_count(self):
        node = build_table(make_table_token(["A"], [["1"], ["2"], ["3"]]))
        assert len(node["content"]) == 4
        assert all(row["type"] == "tableRow" for row in node["content"])


# =========================================================================
# From Markdown
# =========================================================================

class TestTableFromMarkdown:

    def test_header_and_cells(self):
        tokens = lex("| Header 1 | Header 2 |\n| --- | --- |\n| Cell 1 | Cell 2 |")
        node = build_table(tokens[0])
        assert [cell_text(c) for c in node["content"][0]["content"]] == ["Header 1", "Header 2"]
        assert [cell_text(c) for c in node["content"][1]["content"]] == ["Cell 1", "Cell 2"]

    def test_inline_marks_in_cells(self):
        tokens = lex("| A |\n| --- |\n| **b** `c` |")
        cell = build_table(tokens[0])["content"][1]["content"][0]
        nodes = cell["content"][0]["content"]
        assert nodes[0] == {"type": "text", "text": "b", "marks": [{"type": "strong"}]}
        assert nodes[-1] == {"type": "text", "text": "c", "marks": [{"type": "code"}]}
