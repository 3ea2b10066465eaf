"""
Engine exceptions.

Only InvalidFilterCriteria is meant to reach the caller. The other two are
raised inside the pipeline and handled at the batch / fan-in boundary.
"""

from __future__ import annotations


class ComplianceEngineError(Exception):
    """Base exception for engine errors."""
    pass


class NormalizationError(ComplianceEngineError):
    """Raised when a raw record lacks its identity fields or cannot be parsed."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id


class SourceFetchError(ComplianceEngineError):
    """Raised (or recorded) when an upstream collaborator fails."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class InvalidFilterCriteria(ComplianceEngineError):
    """Raised when filter input is malformed. No partial filtering is attempted."""
    pass
