"""Conversion configuration for markfluence.

:class:`MarkfluenceConfig` is a frozen dataclass that captures every
tuneable knob of the two renderers.  Instances are passed explicitly to
:func:`render_storage`, :func:`render_adf` and :class:`MarkdownConverter`;
there is no module-level "current configuration".

Two module-level constants define the defaults shared by both renderers:

* :data:`DEFAULT_DIAGRAM_LANGUAGE` — fence language that triggers the
  diagram extension.
* :data:`DEFAULT_DOCUMENT_EXTENSIONS` — file suffixes treated as links to
  other pages by the storage renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

DEFAULT_DIAGRAM_LANGUAGE = "mermaid"
"""Code fence language that gets a diagram extension node injected."""

DEFAULT_DOCUMENT_EXTENSIONS: tuple[str, ...] = (".md", ".markdown")
"""Suffixes of relative link targets rewritten to page references."""


@dataclass(frozen=True)
class MarkfluenceConfig:
    """Complete configuration for a Markdown conversion.

    Every parameter has a default, so ``MarkfluenceConfig()`` reproduces the
    behaviour of the plain :func:`render_storage` / :func:`render_adf`
    functions.

    Parameters
    ----------
    diagram_language:
        Code fence language (compared case-sensitively against the first
        word of the info string) whose blocks are followed by a diagram
        extension node.
    mermaid_extension:
        Inject the extension node / macro after diagram code blocks.  When
        ``False`` diagram fences render as ordinary code blocks.
    rewrite_relative_links:
        In storage output, render links to relative Markdown files as
        ``<ac:link>`` page references instead of ``<a href>``.
    document_extensions:
        Lower-case suffixes (with leading dot) that mark a relative link
        target as another page.
    unknown_token_policy:
        What to do with a block token neither renderer knows.

        * ``"skip"`` — drop it and record a ``UNKNOWN_TOKEN`` warning.
        * ``"raise"`` — raise :class:`MarkfluenceConversionError`.
    metrics:
        Optional :class:`~markfluence.observability.MetricsHook` backend.
    debug_dump_ast:
        Log the normalised token tree at ``DEBUG`` on each conversion.
    debug_dump_payload:
        Log the rendered storage string / ADF document at ``DEBUG``.
    """

    # ── Diagrams ────────────────────────────────────────────────────────
    diagram_language: str = DEFAULT_DIAGRAM_LANGUAGE

    mermaid_extension: bool = True

    # ── Links ───────────────────────────────────────────────────────────
    rewrite_relative_links: bool = True

    document_extensions: tuple[str, ...] = DEFAULT_DOCUMENT_EXTENSIONS

    # ── Unknown tokens ──────────────────────────────────────────────────
    unknown_token_policy: Literal["skip", "raise"] = "skip"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.diagram_language or not self.diagram_language.strip():
            raise ValueError("diagram_language must be a non-empty string")
        if any(ch.isspace() for ch in self.diagram_language):
            raise ValueError(
                f"diagram_language must be a single word, got {self.diagram_language!r}"
            )
        # Lists would make the frozen instance unhashable.
        if not isinstance(self.document_extensions, tuple):
            object.__setattr__(self, "document_extensions", tuple(self.document_extensions))
        for ext in self.document_extensions:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(
                    f"document_extensions entries must look like '.md', got {ext!r}"
                )
        if self.unknown_token_policy not in ("skip", "raise"):
            raise ValueError(
                "unknown_token_policy must be 'skip' or 'raise', "
                f"got {self.unknown_token_policy!r}"
            )
