"""
Engine Error Taxonomy
=====================

Bounded Context: Failure values surfaced to the admin and ordering layers.

Every failure is terminal for the call that raised it. Geometry and interval
computations are deterministic, so retrying with the same input cannot help.
"""

from typing import Any, Optional


class ZoneEngineError(ValueError):
    """Base class for all delivery zone engine failures."""
    pass


class InvalidGeometryKind(ZoneEngineError):
    """
    Raised when no Polygon/MultiPolygon can be extracted from a payload.

    Attributes:
        kind: Geometry type found in the payload (None if it had none)
    """

    def __init__(self, kind: Optional[str], detail: str = ""):
        self.kind = kind
        message = f"Unsupported geometry kind: {kind!r}. Only Polygon or MultiPolygon are allowed"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MalformedInterval(ZoneEngineError):
    """
    Raised when a {start, end} pair is unparsable or has start >= end.

    Attributes:
        value: Raw offending value
    """

    def __init__(self, value: Any, detail: str):
        self.value = value
        super().__init__(f"Malformed delivery window {value!r}: {detail}")


class ZoneMergeError(ZoneEngineError):
    """Raised when the union of two zone shapes cannot be computed."""
    pass
