"""Metrics hook protocol and no-op default implementation.

markfluence emits one timing and two counters per conversion.  A
conversion keeps no long-lived state, so the hook has no gauge.  By default
a :class:`NoopMetricsHook` is used so there is zero overhead.
Callers can supply any object satisfying :class:`MetricsHook` through
``MarkfluenceConfig(metrics=...)`` to route them to their own backend.

Emitted metric names:

* ``markfluence.render_duration_ms``        -- timing, tag ``format``
* ``markfluence.conversion_warnings_total`` -- counter, tag ``format``
* ``markfluence.diagram_extensions_total``  -- counter, tag ``format``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
