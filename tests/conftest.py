"""Shared test fixtures for the markfluence test suite."""

from __future__ import annotations

import pytest

from markfluence.config import MarkfluenceConfig
from markfluence.converter.pipeline import MarkdownConverter


@pytest.fixture
def config() -> MarkfluenceConfig:
    """Default conversion configuration."""
    return MarkfluenceConfig()


@pytest.fixture
def converter(config: MarkfluenceConfig) -> MarkdownConverter:
    """Converter using the default test config."""
    return MarkdownConverter(config)
