"""markfluence — Markdown to Confluence storage format and ADF.

Public re-exports
-----------------

* **Rendering:** :func:`render_storage`, :func:`render_adf`,
  :func:`build_body`, :class:`MarkdownConverter`
* **Configuration:** :class:`MarkfluenceConfig`
* **Errors:** Every :class:`MarkfluenceError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses and the :class:`Representation` enum

Usage::

    from markfluence import build_body, render_adf, render_storage

    markup = render_storage("# Hello\\n\\nWorld")
    document = render_adf("# Hello\\n\\nWorld")
    body = build_body("# Hello", "atlas_doc_format").to_dict()
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from markfluence.config import (
    DEFAULT_DIAGRAM_LANGUAGE,
    DEFAULT_DOCUMENT_EXTENSIONS,
    MarkfluenceConfig,
)

# ── Rendering ───────────────────────────────────────────────────────────
from markfluence.converter import (
    MarkdownConverter,
    build_body,
    render_adf,
    render_storage,
)
from markfluence.converter.mermaid import MERMAID_EXTENSION_KEY

# ── Errors ──────────────────────────────────────────────────────────────
from markfluence.errors import (
    ErrorCode,
    MarkfluenceConversionError,
    MarkfluenceError,
    MarkfluenceInvalidInputError,
    MarkfluenceUnsupportedRepresentationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from markfluence.models import (
    ContentBody,
    ConversionResult,
    ConversionWarning,
    Representation,
)

__all__ = [
    # Rendering
    "render_storage",
    "render_adf",
    "build_body",
    "MarkdownConverter",
    "MERMAID_EXTENSION_KEY",
    # Configuration
    "MarkfluenceConfig",
    "DEFAULT_DIAGRAM_LANGUAGE",
    "DEFAULT_DOCUMENT_EXTENSIONS",
    # Errors
    "MarkfluenceError",
    "ErrorCode",
    "MarkfluenceInvalidInputError",
    "MarkfluenceUnsupportedRepresentationError",
    "MarkfluenceConversionError",
    # Models
    "ContentBody",
    "ConversionResult",
    "ConversionWarning",
    "Representation",
]
