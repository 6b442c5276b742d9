"""Convert canonical tokens to storage-format markup.

Storage format is XHTML plus ``ac:``/``ri:`` macro elements.  Most tokens
map to their ordinary XHTML element; the exceptions are:

- code_block -> ``code`` structured macro with a CDATA body (and, for
  mermaid fences, a diagram extension right after it)
- image -> ``<ac:image>`` with an ``<ri:url>`` resource identifier
- link to a relative Markdown file -> ``<ac:link>`` page reference
- rule / line break -> self-closing ``<hr />`` / ``<br />``
"""

from __future__ import annotations

import re
from collections.abc import Callable as _Callable
from urllib.parse import unquote

from markfluence.config import MarkfluenceConfig
from markfluence.converter.escaping import escape_cdata, escape_text, escape_xml
from markfluence.converter.mermaid import is_diagram_block, render_extension_macro
from markfluence.errors import MarkfluenceConversionError
from markfluence.models import ConversionWarning

# Anything with a URI scheme ("https:", "mailto:", "c:") is not a relative path.
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

_INLINE_TAGS: dict[str, str] = {
    "strong": "strong",
    "emphasis": "em",
    "strikethrough": "del",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_storage(
    tokens: list[dict],
    config: MarkfluenceConfig,
) -> tuple[str, list[ConversionWarning]]:
    """Render canonical tokens as a storage-format string.

    Parameters
    ----------
    tokens:
        Block tokens from :func:`markfluence.converter.lexer.lex`.
    config:
        Conversion configuration.

    Returns
    -------
    tuple[str, list[ConversionWarning]]
        (markup, warnings).  An empty token list renders as ``""``.

    Raises
    ------
    MarkfluenceConversionError
        If an unknown block token is met and
        ``config.unknown_token_policy == "raise"``.
    """
    ctx = _RenderContext(config)
    return _render_blocks(tokens, ctx), ctx.warnings


def page_reference(
    url: str,
    extensions: tuple[str, ...],
) -> tuple[str, str | None] | None:
    """Resolve a relative Markdown link target to ``(page_title, anchor)``.

    Returns None when *url* is absolute, root-relative, fragment-only,
    carries a query string, or does not end in one of *extensions*.

    >>> page_reference("../guide/setup.md#install", (".md",))
    ('setup', 'install')
    """
    if not url or url.startswith(("/", "#")) or _SCHEME_RE.match(url):
        return None

    path, _, fragment = url.partition("#")
    if "?" in path:
        return None

    lowered = path.lower()
    for ext in extensions:
        if lowered.endswith(ext.lower()):
            name = unquote(path).replace("\\", "/").rsplit("/", 1)[-1]
            title = name[:-len(ext)]
            if not title:
                return None
            return title, unquote(fragment) or None
    return None


class _RenderContext:
    """Carries configuration and collects warnings during one render."""

    __slots__ = ("config", "warnings")

    def __init__(self, config: MarkfluenceConfig) -> None:
        self.config = config
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


# ---------------------------------------------------------------------------
# Block dispatch
# ---------------------------------------------------------------------------

def _render_blocks(tokens: list[dict], ctx: _RenderContext) -> str:
    return "".join(_render_block(token, ctx) for token in tokens)


def _render_block(token: dict, ctx: _RenderContext) -> str:
    token_type = token.get("type", "")
    handler = _BLOCK_HANDLERS.get(token_type)
    if handler is not None:
        return handler(token, ctx)
    if ctx.config.unknown_token_policy == "raise":
        raise MarkfluenceConversionError(
            message=f"Unknown token type '{token_type}' cannot be rendered to storage format.",
            context={"token_type": token_type, "target": "storage"},
        )
    ctx.add_warning(
        "UNKNOWN_TOKEN",
        f"Unknown token type '{token_type}' was skipped.",
        token_type=token_type,
    )
    return ""


# ---------------------------------------------------------------------------
# Block renderers
# ---------------------------------------------------------------------------

def _render_heading(token: dict, ctx: _RenderContext) -> str:
    level = token.get("attrs", {}).get("level", 1)
    return f"<h{level}>{_render_inlines(token.get('children', []), ctx)}</h{level}>\n"


def _render_paragraph(token: dict, ctx: _RenderContext) -> str:
    return f"<p>{_render_inlines(token.get('children', []), ctx)}</p>\n"


def _render_block_text(token: dict, ctx: _RenderContext) -> str:
    # Tight list item content sits directly inside <li>.
    return _render_inlines(token.get("children", []), ctx)


def _render_code_block(token: dict, ctx: _RenderContext) -> str:
    """Render a ``code`` structured macro with a CDATA-wrapped body."""
    language = token.get("attrs", {}).get("language")
    lang_param = (
        f'<ac:parameter ac:name="language">{escape_xml(language)}</ac:parameter>'
        if language else ""
    )
    markup = (
        '<ac:structured-macro ac:name="code">'
        + lang_param
        + f"<ac:plain-text-body><![CDATA[{escape_cdata(token.get('raw', ''))}]]></ac:plain-text-body>"
        + "</ac:structured-macro>\n"
    )
    if ctx.config.mermaid_extension and is_diagram_block(
        language, ctx.config.diagram_language,
    ):
        markup += render_extension_macro()
    return markup


def _render_list(token: dict, ctx: _RenderContext) -> str:
    attrs = token.get("attrs", {})
    ordered = attrs.get("ordered", False)
    tag = "ol" if ordered else "ul"
    start = attrs.get("start")
    start_attr = f' start="{start}"' if ordered and start is not None and start != 1 else ""

    items = "".join(
        f"<li>{_render_blocks(item.get('children', []), ctx)}</li>\n"
        for item in token.get("children", [])
        if item.get("type") == "list_item"
    )
    return f"<{tag}{start_attr}>\n{items}</{tag}>\n"


def _render_blockquote(token: dict, ctx: _RenderContext) -> str:
    return f"<blockquote>\n{_render_blocks(token.get('children', []), ctx)}</blockquote>\n"


def _render_table(token: dict, ctx: _RenderContext) -> str:
    parts = ["<table>\n"]

    header = token.get("header", [])
    if header:
        parts.append("<thead>\n")
        parts.append(_render_row(header, "th", ctx))
        parts.append("</thead>\n")

    rows = token.get("rows", [])
    if rows:
        parts.append("<tbody>\n")
        parts.extend(_render_row(row, "td", ctx) for row in rows)
        parts.append("</tbody>\n")

    parts.append("</table>\n")
    return "".join(parts)


def _render_row(cells: list[dict], tag: str, ctx: _RenderContext) -> str:
    rendered = []
    for cell in cells:
        align = cell.get("attrs", {}).get("align")
        style = f' style="text-align: {escape_xml(align)};"' if align else ""
        rendered.append(
            f"<{tag}{style}>{_render_inlines(cell.get('children', []), ctx)}</{tag}>\n"
        )
    return "<tr>\n" + "".join(rendered) + "</tr>\n"


def _render_rule(token: dict, ctx: _RenderContext) -> str:
    return "<hr />\n"


def _render_html(token: dict, ctx: _RenderContext) -> str:
    raw = token.get("raw", "")
    if raw.strip():
        ctx.add_warning(
            "HTML_BLOCK_PASSTHROUGH",
            "HTML block was copied into the output unchanged.",
            raw=raw[:200],
        )
    return raw


# ---------------------------------------------------------------------------
# Inline rendering
# ---------------------------------------------------------------------------

def _render_inlines(children: list[dict], ctx: _RenderContext) -> str:
    parts: list[str] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type == "text":
            parts.append(escape_text(token.get("raw", "")))

        elif token_type in _INLINE_TAGS:
            tag = _INLINE_TAGS[token_type]
            parts.append(f"<{tag}>{_render_inlines(token.get('children', []), ctx)}</{tag}>")

        elif token_type == "code_span":
            parts.append(f"<code>{escape_text(token.get('raw', ''))}</code>")

        elif token_type == "link":
            parts.append(_render_link(token, ctx))

        elif token_type == "image":
            parts.append(_render_image(token))

        elif token_type == "line_break":
            parts.append("<br />")

        elif token_type == "html_inline":
            parts.append(token.get("raw", ""))

        else:
            raw = token.get("raw")
            if isinstance(raw, str):
                parts.append(escape_text(raw))

    return "".join(parts)


def _render_link(token: dict, ctx: _RenderContext) -> str:
    """Render an anchor, or a page reference for relative Markdown targets."""
    attrs = token.get("attrs", {})
    url = attrs.get("url", "")
    title = attrs.get("title")
    body = _render_inlines(token.get("children", []), ctx)

    target = None
    if ctx.config.rewrite_relative_links:
        target = page_reference(url, ctx.config.document_extensions)

    if target is not None:
        page_title, anchor = target
        anchor_attr = f' ac:anchor="{escape_xml(anchor)}"' if anchor else ""
        tooltip_attr = f' ac:tooltip="{escape_xml(title)}"' if title else ""
        return (
            f"<ac:link{anchor_attr}{tooltip_attr}>"
            f'<ri:page ri:content-title="{escape_xml(page_title)}" />'
            f"<ac:link-body>{body}</ac:link-body>"
            "</ac:link>"
        )

    title_attr = f' title="{escape_xml(title)}"' if title else ""
    return f'<a href="{escape_xml(url)}"{title_attr}>{body}</a>'


def _render_image(token: dict) -> str:
    attrs = token.get("attrs", {})
    alt = attrs.get("alt")
    title = attrs.get("title")
    alt_attr = f' ac:alt="{escape_xml(alt)}"' if alt else ""
    title_attr = f' ac:title="{escape_xml(title)}"' if title else ""
    return (
        f"<ac:image{alt_attr}{title_attr}>"
        f'<ri:url ri:value="{escape_xml(attrs.get("url", ""))}" />'
        "</ac:image>"
    )


# ---------------------------------------------------------------------------
# Block handler dispatch table
# ---------------------------------------------------------------------------

_BlockRenderer = _Callable[[dict, _RenderContext], str]

_BLOCK_HANDLERS: dict[str, _BlockRenderer] = {
    "heading": _render_heading,
    "paragraph": _render_paragraph,
    "block_text": _render_block_text,
    "code_block": _render_code_block,
    "list": _render_list,
    "blockquote": _render_blockquote,
    "table": _render_table,
    "rule": _render_rule,
    "html": _render_html,
}
