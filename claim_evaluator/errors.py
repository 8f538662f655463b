"""
Typed failures for the claim evaluation pipeline.

Every stage raises exactly one of these. Callers catch ClaimEvaluationError
to handle any pipeline failure, or a subclass to react to a specific stage.
"""

from typing import Any, Optional


class ClaimEvaluationError(Exception):
    """Base class for every failure surfaced by the pipeline."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class IngestionError(ClaimEvaluationError):
    """An uploaded document could not be read or decoded."""


class AuthError(ClaimEvaluationError):
    """The reasoning service rejected the credential."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class TransportError(ClaimEvaluationError):
    """The reasoning service could not be reached at all."""


class ServiceError(ClaimEvaluationError):
    """The reasoning service was reached but returned a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class SchemaError(ClaimEvaluationError):
    """
    The model output was not valid JSON or did not match the result schema.

    `raw` keeps the untouched model output so callers can log it.
    """

    def __init__(
        self,
        message: str,
        raw: Optional[str] = None,
        missing_fields: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.raw = raw
        self.missing_fields = missing_fields or []


class UnrecognizedDecisionError(SchemaError):
    """The model returned a decision outside Approved / Rejected / More Info Needed."""

    def __init__(self, decision: Any, raw: Optional[str] = None) -> None:
        super().__init__(f"Unrecognized decision value: {decision!r}", raw=raw)
        self.decision = decision


class ConfigurationError(ClaimEvaluationError):
    """An environment setting is missing or malformed."""
