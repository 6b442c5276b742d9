"""Convert canonical tokens to an ADF document.

Block mapping:

- heading -> heading (attrs.level)
- paragraph -> paragraph, or one mediaSingle per image when the paragraph
  holds nothing but images
- code_block -> codeBlock (attrs.language), followed by a diagram
  extension node for mermaid fences
- list -> bulletList / orderedList of listItem
- blockquote -> blockquote
- table -> delegate to tables.py
- rule -> rule
- html -> paragraph carrying the raw HTML as text
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

from markfluence.config import MarkfluenceConfig
from markfluence.converter.adf_inline import build_inline_nodes
from markfluence.converter.mermaid import build_extension_node, is_diagram_block
from markfluence.converter.tables import build_table
from markfluence.errors import MarkfluenceConversionError
from markfluence.models import ConversionWarning

ADF_VERSION = 1


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_adf(
    tokens: list[dict],
    config: MarkfluenceConfig,
) -> tuple[dict, list[ConversionWarning]]:
    """Convert canonical tokens to an ADF document.

    Parameters
    ----------
    tokens:
        Block tokens from :func:`markfluence.converter.lexer.lex`.
    config:
        Conversion configuration.

    Returns
    -------
    tuple[dict, list[ConversionWarning]]
        (document, warnings).  The document always has at least one
        top-level node.

    Raises
    ------
    MarkfluenceConversionError
        If an unknown block token is met and
        ``config.unknown_token_policy == "raise"``.
    """
    ctx = _BuildContext(config)
    content = _process_tokens(tokens, ctx)
    if not content:
        content = [_empty_paragraph()]
    document = {
        "type": "doc",
        "version": ADF_VERSION,
        "content": content,
    }
    return document, ctx.warnings


class _BuildContext:
    """Mutable accumulator for the document building pass."""

    __slots__ = ("config", "warnings")

    def __init__(self, config: MarkfluenceConfig) -> None:
        self.config = config
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


# ---------------------------------------------------------------------------
# Token dispatch
# ---------------------------------------------------------------------------

def _process_tokens(tokens: list[dict], ctx: _BuildContext) -> list[dict]:
    """Convert a sequence of block tokens, in order, to ADF nodes."""
    produced: list[dict] = []
    for token in tokens:
        produced.extend(_process_token(token, ctx))
    return produced


def _process_token(token: dict, ctx: _BuildContext) -> list[dict]:
    """Convert a single block token to zero or more ADF nodes."""
    token_type = token.get("type", "")
    handler = _BLOCK_HANDLERS.get(token_type)
    if handler is not None:
        return handler(token, ctx)
    if ctx.config.unknown_token_policy == "raise":
        raise MarkfluenceConversionError(
            message=f"Unknown token type '{token_type}' cannot be converted to ADF.",
            context={"token_type": token_type, "target": "adf"},
        )
    ctx.add_warning(
        "UNKNOWN_TOKEN",
        f"Unknown token type '{token_type}' was skipped.",
        token_type=token_type,
    )
    return []


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def _build_heading(token: dict, ctx: _BuildContext) -> list[dict]:
    level = token.get("attrs", {}).get("level", 1)
    return [{
        "type": "heading",
        "attrs": {"level": level},
        "content": build_inline_nodes(token.get("children", [])),
    }]


def _build_paragraph(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build a paragraph, or mediaSingle nodes for an image-only paragraph."""
    children = token.get("children", [])

    if _is_image_only(children):
        return [
            _build_media_single(child)
            for child in children
            if child.get("type") == "image"
        ]

    return [{
        "type": "paragraph",
        "content": build_inline_nodes(children),
    }]


def _is_image_only(children: list[dict]) -> bool:
    significant = [
        child for child in children
        if not (child.get("type") == "text" and not child.get("raw", "").strip())
    ]
    return bool(significant) and all(
        child.get("type") == "image" for child in significant
    )


def _build_media_single(token: dict) -> dict:
    attrs = token.get("attrs", {})
    media_attrs: dict = {
        "type": "external",
        "url": attrs.get("url", ""),
    }
    if attrs.get("alt"):
        media_attrs["alt"] = attrs["alt"]
    return {
        "type": "mediaSingle",
        "attrs": {"layout": "center"},
        "content": [
            {"type": "media", "attrs": media_attrs},
        ],
    }


def _build_code_block(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build a codeBlock; mermaid fences get an extension node after it.

    Non-empty code becomes the block's single ``text`` child.  Empty code
    yields ``"content": []`` instead of an empty text child, which ADF
    rejects, so this is the one codeBlock without a text child.
    """
    raw = token.get("raw", "")
    language = token.get("attrs", {}).get("language")

    node: dict = {
        "type": "codeBlock",
        "attrs": {},
        "content": [{"type": "text", "text": raw}] if raw else [],
    }
    if language:
        node["attrs"]["language"] = language

    if ctx.config.mermaid_extension and is_diagram_block(
        language, ctx.config.diagram_language,
    ):
        return [node, build_extension_node()]
    return [node]


def _build_list(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build a bulletList / orderedList node.

    Nested lists stay nested: they become an extra child of the parent
    ``listItem`` rather than being flattened.
    """
    attrs = token.get("attrs", {})
    ordered = attrs.get("ordered", False)

    node: dict = {
        "type": "orderedList" if ordered else "bulletList",
        "content": [
            _build_list_item(item, ctx)
            for item in token.get("children", [])
            if item.get("type") == "list_item"
        ],
    }

    start = attrs.get("start")
    if ordered and start is not None and start != 1:
        node["attrs"] = {"order": start}

    return [node]


def _build_list_item(token: dict, ctx: _BuildContext) -> dict:
    """Build a single listItem.

    Tight content (``block_text``) is wrapped in one synthetic paragraph;
    loose paragraphs go through normal paragraph conversion; nested lists
    and any other block are converted with the usual handlers.
    """
    content: list[dict] = []

    for child in token.get("children", []):
        child_type = child.get("type", "")
        if child_type == "block_text":
            inline_nodes = build_inline_nodes(child.get("children", []))
            if inline_nodes:
                content.append({"type": "paragraph", "content": inline_nodes})
        else:
            content.extend(_process_token(child, ctx))

    # ADF requires at least one block child in a listItem.
    if not content:
        ctx.add_warning(
            "EMPTY_LIST_ITEM",
            "Empty list item was given an empty paragraph.",
        )
        content.append(_empty_paragraph())

    return {"type": "listItem", "content": content}


def _build_blockquote(token: dict, ctx: _BuildContext) -> list[dict]:
    content = _process_tokens(token.get("children", []), ctx)
    return [{
        "type": "blockquote",
        "content": content or [_empty_paragraph()],
    }]


def _build_table(token: dict, ctx: _BuildContext) -> list[dict]:
    return [build_table(token)]


def _build_rule(token: dict, ctx: _BuildContext) -> list[dict]:
    return [{"type": "rule"}]


def _build_html(token: dict, ctx: _BuildContext) -> list[dict]:
    """Keep a raw HTML block as the text of a paragraph."""
    raw = token.get("raw", "")
    if not raw.strip():
        return []
    ctx.add_warning(
        "HTML_BLOCK_PASSTHROUGH",
        "HTML block was kept as plain text.",
        raw=raw[:200],
    )
    return [{
        "type": "paragraph",
        "content": [{"type": "text", "text": raw.rstrip("\n")}],
    }]


def _empty_paragraph() -> dict:
    return {"type": "paragraph", "content": []}


# ---------------------------------------------------------------------------
# Block handler dispatch table
# ---------------------------------------------------------------------------

_BlockHandler = _Callable[[dict, _BuildContext], list[dict]]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "block_text": _build_paragraph,
    "code_block": _build_code_block,
    "list": _build_list,
    "blockquote": _build_blockquote,
    "table": _build_table,
    "rule": _build_rule,
    "html": _build_html,
}
