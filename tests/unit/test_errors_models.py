"""Tests for errors.py and models.py."""

import json

import pytest

from markfluence.errors import (
    ErrorCode,
    MarkfluenceConversionError,
    MarkfluenceError,
    MarkfluenceInvalidInputError,
    MarkfluenceUnsupportedRepresentationError,
)
from markfluence.models import ContentBody, ConversionResult, ConversionWarning, Representation

# =========================================================================
# Errors
# =========================================================================


class TestErrorHierarchy:

    @pytest.mark.parametrize("cls,code", [
        (MarkfluenceInvalidInputError, ErrorCode.INVALID_INPUT),
        (MarkfluenceUnsupportedRepresentationError, ErrorCode.UNSUPPORTED_REPRESENTATION),
        (MarkfluenceConversionError, ErrorCode.CONVERSION_ERROR),
    ])
    def test_subclass_codes(self, cls, code):
        err = cls("boom")
        assert isinstance(err, MarkfluenceError)
        assert err.code == code
        assert err.message == "boom"
        assert err.context == {}
        assert str(err) == "boom"

    def test_error_code_is_str(self):
        assert ErrorCode.INVALID_INPUT == "INVALID_INPUT"

    def test_cause_chained(self):
        original = ValueError("inner")
        err = MarkfluenceConversionError("outer", cause=original)
        assert err.cause is original
        assert err.__cause__ is original

    def test_repr_includes_context(self):
        err = MarkfluenceInvalidInputError("bad", context={"received_type": "int"})
        text = repr(err)
        assert text.startswith("MarkfluenceInvalidInputError(")
        assert "received_type" in text

    def test_repr_without_context(self):
        assert "context" not in repr(MarkfluenceError("X", "msg"))


# =========================================================================
# Models
# =========================================================================


class TestRepresentation:

    def test_values(self):
        assert Representation("storage") is Representation.STORAGE
        assert Representation("atlas_doc_format") is Representation.ATLAS_DOC_FORMAT

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            Representation("wiki")


class TestContentBody:

    def test_to_dict(self):
        body = ContentBody(Representation.STORAGE, "<p>x</p>\n")
        assert body.to_dict() == {"representation": "storage", "value": "<p>x</p>\n"}

    def test_from_adf_serialises_json(self):
        document = {"type": "doc", "version": 1, "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "héllo"}]},
        ]}
        body = ContentBody.from_adf(document)
        assert body.representation is Representation.ATLAS_DOC_FORMAT
        assert json.loads(body.value) == document
        assert "héllo" in body.value
        assert body.value.startswith('{"type": "doc", "version": 1')


class TestResults:

    def test_warning_default_context(self):
        assert ConversionWarning(code="X", message="m").context == {}

    def test_result_default_warnings(self):
        result = ConversionResult(output="")
        assert result.warnings == []
        assert ConversionResult(output="").warnings is not result.warnings
