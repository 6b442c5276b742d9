"""Markdown to Confluence conversion pipeline.

Public API:

- :func:`render_storage` — Markdown → storage-format markup.
- :func:`render_adf` — Markdown → ADF document.
- :class:`MarkdownConverter` — both conversions, with warnings and metrics.
- :class:`MarkdownLexer` / :func:`lex` — Markdown → canonical tokens.
- :func:`build_storage` / :func:`build_adf` — canonical tokens → output.
"""

from markfluence.converter.adf_builder import build_adf
from markfluence.converter.lexer import MarkdownLexer, lex
from markfluence.converter.pipeline import (
    MarkdownConverter,
    build_body,
    render_adf,
    render_storage,
)
from markfluence.converter.storage import build_storage

__all__ = [
    "MarkdownConverter",
    "MarkdownLexer",
    "build_adf",
    "build_body",
    "build_storage",
    "lex",
    "render_adf",
    "render_storage",
]
