from __future__ import annotations


class TelemetryError(Exception):
    """Base class for failures inside the acquisition pipeline.

    These never reach callers of :class:`~hostmon.engine.TelemetryFacade`;
    the facade converts them into fallback values.
    """


class SourceUnavailable(TelemetryError):
    """A counter or external tool could not be read."""


class ParseMismatch(TelemetryError, ValueError):
    """Tool output did not contain a usable value for a field."""
