"""Public data models for markfluence.

This module contains the result types, warning type and enums referenced
by the public API surface.  All types are plain dataclasses with no
behaviour beyond what is needed to hand results to a caller.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Representation(str, Enum):
    """Body representations accepted by the remote content API."""

    STORAGE = "storage"
    """XHTML-like storage markup with ``<ac:...>`` macros."""

    ATLAS_DOC_FORMAT = "atlas_doc_format"
    """A serialised ADF document tree."""


# ---------------------------------------------------------------------------
# Conversion warnings
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during conversion.

    Warnings are accumulated in result objects so callers can inspect
    them after the conversion completes.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"UNKNOWN_TOKEN"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    """Output of one Markdown conversion.

    Attributes
    ----------
    output:
        The storage string or the ADF document dict, depending on which
        converter method produced the result.
    warnings:
        Non-fatal issues discovered during conversion.
    """

    output: Any
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass(frozen=True)
class ContentBody:
    """A body field ready to be embedded in a content API request.

    ``value`` is always a string: the storage markup itself, or the ADF
    document serialised to JSON.
    """

    representation: Representation
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"representation": self.representation.value, "value": self.value}

    @classmethod
    def from_adf(cls, document: dict) -> ContentBody:
        # json.dumps keeps insertion order, so "type"/"version" stay first.
        return cls(
            representation=Representation.ATLAS_DOC_FORMAT,
            value=json.dumps(document, ensure_ascii=False),
        )
