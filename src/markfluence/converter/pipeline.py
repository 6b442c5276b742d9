"""Full Markdown conversion pipeline.

:class:`MarkdownConverter` runs the two-stage pipeline for either target:

1. **Lex** — :class:`MarkdownLexer` parses Markdown with mistune and
   normalises the AST into canonical tokens.
2. **Render** — :func:`build_storage` folds the tokens into storage markup,
   or :func:`build_adf` folds them into an ADF document.

The module-level :func:`render_storage` and :func:`render_adf` functions
are the stateless entry points used by callers that only need the output;
:func:`build_body` wraps either output in the ``{representation, value}``
body field expected by the content API.
"""

from __future__ import annotations

import time

from markfluence.config import MarkfluenceConfig
from markfluence.converter.adf_builder import build_adf
from markfluence.converter.lexer import MarkdownLexer
from markfluence.converter.mermaid import is_diagram_block
from markfluence.converter.storage import build_storage
from markfluence.errors import (
    MarkfluenceInvalidInputError,
    MarkfluenceUnsupportedRepresentationError,
)
from markfluence.models import (
    ContentBody,
    ConversionResult,
    ConversionWarning,
    Representation,
)
from markfluence.observability import NoopMetricsHook, get_logger

log = get_logger("markfluence.converter")


class MarkdownConverter:
    """Convert Markdown text to storage markup or ADF documents.

    Parameters
    ----------
    config:
        Conversion options.  Defaults to ``MarkfluenceConfig()``.

    Examples
    --------
    >>> converter = MarkdownConverter()
    >>> converter.convert_storage("# Hello").output
    '<h1>Hello</h1>\\n'
    >>> converter.convert_adf("# Hello").output["content"][0]["type"]
    'heading'
    """

    def __init__(self, config: MarkfluenceConfig | None = None) -> None:
        self._config = config or MarkfluenceConfig()
        self._lexer = MarkdownLexer()
        self._metrics = self._config.metrics or NoopMetricsHook()

    @property
    def config(self) -> MarkfluenceConfig:
        return self._config

    def convert_storage(self, markdown: str) -> ConversionResult:
        """Lex *markdown* and render it as storage-format markup.

        Returns
        -------
        ConversionResult
            ``output`` is the markup string, ``warnings`` any non-fatal
            issues.

        Raises
        ------
        MarkfluenceInvalidInputError
            If *markdown* is not a ``str``.
        """
        t0 = time.monotonic()
        tokens = self._lex(markdown)
        markup, warnings = build_storage(tokens, self._config)

        if self._config.debug_dump_payload:
            log.debug(
                "storage payload",
                extra={"extra_fields": {"payload": markup}},
            )

        self._record("storage", t0, warnings, self._count_diagrams(tokens))
        return ConversionResult(output=markup, warnings=warnings)

    def convert_adf(self, markdown: str) -> ConversionResult:
        """Lex *markdown* and render it as an ADF document.

        Returns
        -------
        ConversionResult
            ``output`` is the document dict, ``warnings`` any non-fatal
            issues.

        Raises
        ------
        MarkfluenceInvalidInputError
            If *markdown* is not a ``str``.
        """
        t0 = time.monotonic()
        tokens = self._lex(markdown)
        document, warnings = build_adf(tokens, self._config)

        if self._config.debug_dump_payload:
            log.debug(
                "adf payload",
                extra={"extra_fields": {"payload": document}},
            )

        self._record("adf", t0, warnings, self._count_diagrams(tokens))
        return ConversionResult(output=document, warnings=warnings)

    def _lex(self, markdown: str) -> list[dict]:
        _require_str(markdown)
        tokens = self._lexer.parse(markdown)
        if self._config.debug_dump_ast:
            log.debug(
                "normalized tokens",
                extra={"extra_fields": {"tokens": tokens}},
            )
        return tokens

    def _count_diagrams(self, tokens: list[dict]) -> int:
        """Count the diagram fences that received an extension."""
        if not self._config.mermaid_extension:
            return 0
        total = 0
        for token in tokens:
            if token.get("type") == "code_block" and is_diagram_block(
                token.get("attrs", {}).get("language"),
                self._config.diagram_language,
            ):
                total += 1
            elif token.get("type") in ("list", "list_item", "blockquote"):
                total += self._count_diagrams(token.get("children", []))
        return total

    def _record(
        self,
        fmt: str,
        t0: float,
        warnings: list[ConversionWarning],
        diagrams: int,
    ) -> None:
        elapsed_ms = (time.monotonic() - t0) * 1000
        tags = {"format": fmt}
        self._metrics.timing("markfluence.render_duration_ms", elapsed_ms, tags=tags)
        for warning in warnings:
            log.info(
                warning.message,
                extra={"extra_fields": {"format": fmt, "warning": warning}},
            )
        if warnings:
            self._metrics.increment(
                "markfluence.conversion_warnings_total", len(warnings), tags=tags,
            )
        if diagrams:
            self._metrics.increment(
                "markfluence.diagram_extensions_total", diagrams, tags=tags,
            )
        log.debug(
            "render complete",
            extra={"extra_fields": {
                "format": fmt,
                "duration_ms": round(elapsed_ms, 3),
                "warnings": len(warnings),
                "diagrams": diagrams,
            }},
        )


# ---------------------------------------------------------------------------
# Stateless entry points
# ---------------------------------------------------------------------------

def render_storage(markdown: str, config: MarkfluenceConfig | None = None) -> str:
    """Convert *markdown* to a storage-format string.

    >>> render_storage("---")
    '<hr />\\n'
    """
    return MarkdownConverter(config).convert_storage(markdown).output


def render_adf(markdown: str, config: MarkfluenceConfig | None = None) -> dict:
    """Convert *markdown* to an ADF document dict.

    >>> render_adf("")["content"]
    [{'type': 'paragraph', 'content': []}]
    """
    return MarkdownConverter(config).convert_adf(markdown).output


def build_body(
    markdown: str,
    representation: Representation | str = Representation.STORAGE,
    config: MarkfluenceConfig | None = None,
) -> ContentBody:
    """Render *markdown* into a content body for the given representation.

    Raises
    ------
    MarkfluenceUnsupportedRepresentationError
        If *representation* is not ``"storage"`` or ``"atlas_doc_format"``.
    """
    try:
        target = Representation(representation)
    except ValueError as exc:
        raise MarkfluenceUnsupportedRepresentationError(
            message=f"Cannot render Markdown as {representation!r}.",
            context={
                "representation": str(representation),
                "supported": [r.value for r in Representation],
            },
            cause=exc,
        ) from exc

    if target is Representation.STORAGE:
        return ContentBody(
            representation=target,
            value=render_storage(markdown, config),
        )
    return ContentBody.from_adf(render_adf(markdown, config))


def _require_str(markdown: object) -> None:
    if not isinstance(markdown, str):
        raise MarkfluenceInvalidInputError(
            message=f"Markdown input must be str, got {type(markdown).__name__}.",
            context={"received_type": type(markdown).__name__},
        )
