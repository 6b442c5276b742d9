"""Lex Markdown into the canonical, format-agnostic token tree.

This module wraps mistune v3's AST renderer and normalises the raw token
stream into the set of canonical types consumed by both renderers.

Canonical block tokens:
    heading, paragraph, block_text, code_block, list, list_item,
    blockquote, table, rule, html

Canonical inline tokens:
    text, strong, emphasis, strikethrough, code_span, link, image,
    line_break, html_inline

Text, link titles and image alt text carry decoded characters: mistune keeps
character references such as ``&amp;`` and ``&copy;`` as written, and the
lexer resolves them here so each renderer escapes exactly once.  Code spans,
code blocks and raw HTML are left untouched.

``block_text`` only ever appears as a child of a tight ``list_item``; loose
items carry ``paragraph`` children instead.  Token types mistune produces
that are not listed above pass through under their original name so the
renderers can apply their unknown-token handling.
"""

from __future__ import annotations

import mistune
from mistune.util import unescape

# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_BLOCK_TYPE_MAP: dict[str, str] = {
    "heading": "heading",
    "paragraph": "paragraph",
    "block_text": "block_text",
    "block_code": "code_block",
    "list": "list",
    "list_item": "list_item",
    "block_quote": "blockquote",
    "table": "table",
    "thematic_break": "rule",
    "block_html": "html",
}

_INLINE_TYPE_MAP: dict[str, str] = {
    "text": "text",
    "strong": "strong",
    "emphasis": "emphasis",
    "strikethrough": "strikethrough",
    "codespan": "code_span",
    "link": "link",
    "image": "image",
    "linebreak": "line_break",
    "softbreak": "soft_break",
    "inline_html": "html_inline",
}

# Types that should be silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})

_PLUGINS: tuple[str, ...] = ("strikethrough", "table", "url")


class MarkdownLexer:
    """Parse Markdown and normalize it to canonical tokens.

    An instance owns one mistune parser.  mistune keeps per-parse state in
    fresh state objects, so one lexer may be reused for many documents.
    """

    def __init__(self) -> None:
        self._parser = mistune.create_markdown(
            renderer="ast",
            plugins=list(_PLUGINS),
        )

    def parse(self, markdown: str) -> list[dict]:
        """Parse markdown and return the normalized token list."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_blocks(raw_tokens)

    # ── Blocks ──────────────────────────────────────────────────────────

    def _normalize_blocks(self, tokens: list[dict]) -> list[dict]:
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_block(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _normalize_block(self, token: dict) -> dict | None:
        """Normalize a single block token, returning None if it should be skipped."""
        raw_type = token.get("type", "")

        if raw_type in _SKIP_TYPES:
            return None

        canonical_type = _BLOCK_TYPE_MAP.get(raw_type)
        if canonical_type is None:
            return self._passthrough(token)

        attrs = token.get("attrs") or {}

        if canonical_type == "heading":
            return {
                "type": "heading",
                "attrs": {"level": int(attrs.get("level", 1))},
                "children": self._normalize_inline_children(token),
            }

        if canonical_type in ("paragraph", "block_text"):
            return {
                "type": canonical_type,
                "children": self._normalize_inline_children(token),
            }

        if canonical_type == "code_block":
            raw_code = token.get("raw", "")
            # Strip trailing newline added by mistune
            if raw_code.endswith("\n"):
                raw_code = raw_code[:-1]
            result: dict = {"type": "code_block", "raw": raw_code, "attrs": {}}
            language = _info_language(attrs.get("info"))
            if language:
                result["attrs"]["language"] = language
            return result

        if canonical_type == "list":
            ordered = bool(attrs.get("ordered", False))
            list_attrs: dict = {"ordered": ordered}
            if ordered and attrs.get("start") is not None:
                list_attrs["start"] = int(attrs["start"])
            return {
                "type": "list",
                "attrs": list_attrs,
                "tight": bool(token.get("tight", True)),
                "children": self._normalize_blocks(token.get("children", [])),
            }

        if canonical_type in ("list_item", "blockquote"):
            return {
                "type": canonical_type,
                "children": self._normalize_blocks(token.get("children", [])),
            }

        if canonical_type == "table":
            return self._normalize_table(token)

        if canonical_type == "rule":
            return {"type": "rule"}

        # html
        return {"type": "html", "raw": token.get("raw", "")}

    def _normalize_table(self, token: dict) -> dict:
        """Flatten mistune's head/body/row nesting into ``header`` and ``rows``."""
        header: list[dict] = []
        rows: list[list[dict]] = []

        for part in token.get("children", []):
            part_type = part.get("type", "")
            if part_type == "table_head":
                children = part.get("children", [])
                # mistune puts head cells directly under table_head
                if children and children[0].get("type") == "table_row":
                    children = children[0].get("children", [])
                header = [self._normalize_cell(cell) for cell in children]
            elif part_type == "table_body":
                for row in part.get("children", []):
                    if row.get("type") == "table_row":
                        rows.append([
                            self._normalize_cell(cell)
                            for cell in row.get("children", [])
                        ])

        return {"type": "table", "header": header, "rows": rows}

    def _normalize_cell(self, cell: dict) -> dict:
        align = (cell.get("attrs") or {}).get("align")
        return {
            "type": "table_cell",
            "attrs": {"align": align},
            "children": self._normalize_inline_children(cell),
        }

    def _passthrough(self, token: dict) -> dict:
        """Keep an unrecognised token under its own name."""
        result: dict = {"type": token.get("type", "")}
        if "raw" in token:
            result["raw"] = token["raw"]
        if token.get("attrs"):
            result["attrs"] = dict(token["attrs"])
        children = token.get("children")
        if children:
            result["children"] = self._normalize_inlines(children)
        return result

    # ── Inlines ─────────────────────────────────────────────────────────

    def _normalize_inline_children(self, token: dict) -> list[dict]:
        return self._normalize_inlines(token.get("children") or [])

    def _normalize_inlines(self, tokens: list[dict]) -> list[dict]:
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_inline(token)
            if normalized is not None:
                result.append(normalized)
        return _merge_text_runs(result)

    def _normalize_inline(self, token: dict) -> dict | None:
        raw_type = token.get("type", "")

        if raw_type in _SKIP_TYPES:
            return None

        canonical_type = _INLINE_TYPE_MAP.get(raw_type)
        if canonical_type is None:
            if raw_type == "raw":
                return {"type": "text", "raw": unescape(token.get("raw", ""))}
            return self._passthrough(token)

        if canonical_type == "text":
            # Decoded per token: a backslash-escaped "&" is its own token.
            return {"type": "text", "raw": unescape(token.get("raw", ""))}

        if canonical_type in ("code_span", "html_inline"):
            return {"type": canonical_type, "raw": token.get("raw", "")}

        if canonical_type == "soft_break":
            return {"type": "text", "raw": "\n"}

        if canonical_type == "line_break":
            return {"type": "line_break"}

        attrs = token.get("attrs") or {}

        if canonical_type == "link":
            link_attrs: dict = {"url": attrs.get("url", "")}
            if attrs.get("title"):
                link_attrs["title"] = unescape(attrs["title"])
            return {
                "type": "link",
                "attrs": link_attrs,
                "children": self._normalize_inline_children(token),
            }

        if canonical_type == "image":
            image_attrs: dict = {
                "url": attrs.get("url", ""),
                "alt": extract_text(self._normalize_inline_children(token)),
            }
            if attrs.get("title"):
                image_attrs["title"] = unescape(attrs["title"])
            return {"type": "image", "attrs": image_attrs}

        # strong, emphasis, strikethrough
        return {
            "type": canonical_type,
            "children": self._normalize_inline_children(token),
        }


def lex(markdown: str) -> list[dict]:
    """Lex *markdown* into canonical tokens with a fresh :class:`MarkdownLexer`."""
    return MarkdownLexer().parse(markdown)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _info_language(info: str | None) -> str | None:
    """Return the first word of a fence info string, or None."""
    if not info:
        return None
    words = info.strip().split()
    return words[0] if words else None


def _merge_text_runs(tokens: list[dict]) -> list[dict]:
    """Join adjacent text tokens and drop empty ones."""
    merged: list[dict] = []
    for token in tokens:
        if token["type"] == "text":
            if not token.get("raw"):
                continue
            if merged and merged[-1]["type"] == "text":
                merged[-1] = {"type": "text", "raw": merged[-1]["raw"] + token["raw"]}
                continue
        merged.append(token)
    return merged


def extract_text(children: list[dict]) -> str:
    """Recursively extract plain text from inline tokens (raw or canonical)."""
    parts: list[str] = []
    for token in children:
        token_type = token.get("type", "")
        if token_type in ("softbreak", "soft_break"):
            parts.append("\n")
        elif "children" in token:
            parts.append(extract_text(token["children"]))
        elif "raw" in token:
            parts.append(token["raw"])
        elif token_type == "image":
            parts.append(token.get("attrs", {}).get("alt", ""))
    return "".join(parts)
