"""Table conversion: canonical table token to ADF ``table`` node.

The canonical table token produced by the lexer looks like::

    {
        "type": "table",
        "header": [
            {"type": "table_cell", "attrs": {"align": None},
             "children": [inline tokens...]},
            ...
        ],
        "rows": [
            [{"type": "table_cell", ...}, ...],
            ...
        ]
    }

The resulting ADF node::

    {
        "type": "table",
        "attrs": {"isNumberColumnEnabled": False, "layout": "default"},
        "content": [
            {"type": "tableRow", "content": [
                {"type": "tableHeader", "attrs": {},
                 "content": [{"type": "paragraph", "content": [...]}]},
                ...
            ]},
            {"type": "tableRow", "content": [
                {"type": "tableCell", "attrs": {}, "content": [...]},
                ...
            ]},
        ]
    }

Cells always hold exactly one paragraph, even when empty.
"""

from __future__ import annotations

from typing import Any

from markfluence.converter.adf_inline import build_inline_nodes


def build_table(token: dict[str, Any]) -> dict[str, Any]:
    """Build an ADF table node from a canonical table token."""
    rows: list[dict[str, Any]] = []

    header = token.get("header", [])
    if header:
        rows.append(_build_row(header, "tableHeader"))

    for row in token.get("rows", []):
        rows.append(_build_row(row, "tableCell"))

    return {
        "type": "table",
        "attrs": {
            "isNumberColumnEnabled": False,
            "layout": "default",
        },
        "content": rows,
    }


def _build_row(cells: list[dict[str, Any]], cell_type: str) -> dict[str, Any]:
    return {
        "type": "tableRow",
        "content": [_build_cell(cell, cell_type) for cell in cells],
    }


def _build_cell(cell: dict[str, Any], cell_type: str) -> dict[str, Any]:
    return {
        "type": cell_type,
        "attrs": {},
        "content": [
            {
                "type": "paragraph",
                "content": build_inline_nodes(cell.get("children", [])),
            },
        ],
    }
