"""Custom exception hierarchy for TaxRecon.

Every error raised by the report pipeline derives from ``TaxReconException`` so
the worker and the API layer can catch one base type.

Error codes follow pattern: [CATEGORY][NUMBER]
- PER: Reporting period errors (300-309)
- LED: Ledger errors (310-319)
- PUB: Publishing errors (320-329)
- NTF: Notification errors (330-339)
- SYS: System errors (400-499)
"""

from __future__ import annotations

from typing import Any


class TaxReconException(Exception):
    """Base exception for all TaxRecon application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with a readable message and metadata.

        Args:
            message: Human readable error message
            code: Unique error code (e.g., "PER300")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# PERIOD ERRORS (PER300-309)
# ============================================================================

class InvalidPeriodError(TaxReconException, ValueError):
    """Month or year outside the reportable range."""

    def __init__(self, month: Any, year: Any, reason: str | None = None):
        message = reason or f"Invalid reporting period: month={month} year={year}"
        super().__init__(
            message=message,
            code="PER300",
            status_code=400,
            details={"month": month, "year": year},
        )


# ============================================================================
# LEDGER ERRORS (LED310-319)
# ============================================================================

class LedgerQueryError(TaxReconException):
    """Ledger unreachable or returned data the report cannot use."""

    def __init__(self, message: str = "Failed to query transaction ledger", details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="LED310",
            status_code=503,
            details=details,
        )


# ============================================================================
# PUBLISH ERRORS (PUB320-329)
# ============================================================================

class PublishError(TaxReconException):
    """Report artifact could not be written to object storage."""

    def __init__(self, key: str, reason: str | None = None):
        message = f"Failed to publish report to {key}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="PUB320",
            status_code=502,
            details={"key": key},
        )


# ============================================================================
# NOTIFICATION ERRORS (NTF330-339)
# ============================================================================

class NotifyError(TaxReconException):
    """Operational notification could not be delivered."""

    def __init__(self, channel: str, reason: str | None = None):
        message = f"Failed to notify channel '{channel}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="NTF330",
            status_code=502,
            details={"channel": channel},
        )


# ============================================================================
# SYSTEM ERRORS (SYS400-499)
# ============================================================================

class MaxRetriesExceededError(TaxReconException):
    """An operation still failed after its last permitted attempt."""

    def __init__(self, operation: str, attempts: int, reason: str | None = None):
        message = f"Failed to perform '{operation}' after {attempts} attempts"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="SYS400",
            status_code=500,
            details={"operation": operation, "attempts": attempts},
        )
