"""Custom exception types for the report conversion and reconciliation pipeline.

This module defines exceptions used throughout the pipeline to provide
clear error classification and recovery strategies.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for pipeline-related errors."""

    pass


class ConversionError(PipelineError):
    """
    Raised when an external CVE record cannot be mapped into a report.

    Only the conversion of that single record is aborted; callers processing
    a batch continue with the next record.
    """

    def __init__(self, record: str, reason: str):
        """
        Initialize ConversionError.

        Args:
            record: Identifier or path of the offending record
            reason: Why the record could not be converted
        """
        self.record = record
        self.reason = reason
        super().__init__(f"Cannot convert {record}: {reason}")


class InvalidVersionError(PipelineError, ValueError):
    """Raised when a string is not a valid semantic version."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"invalid semantic version {version!r}")


class SymbolExtractionError(PipelineError):
    """
    Raised when the exported symbols of a package cannot be computed.

    Aborts the symbol refresh of the enclosing module only.
    """

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"package {package}: {reason}")


class ExternalAPIError(PipelineError):
    """
    Raised when an external API call (OSV, Claude, etc.) fails.

    Callers treat this as a local, recoverable condition.
    """

    def __init__(self, service: str, status_code: Optional[int] = None, message: Optional[str] = None):
        """
        Initialize ExternalAPIError.

        Args:
            service: Name of the external service (e.g., 'OSV', 'Claude')
            status_code: HTTP status code (if applicable)
            message: Optional additional error details
        """
        self.service = service
        self.status_code = status_code
        self.message = message

        msg = f"External API error: {service}"
        if status_code:
            msg += f" (HTTP {status_code})"
        if message:
            msg += f": {message}"

        super().__init__(msg)


class ReconciliationFailure(PipelineError):
    """
    Raised when a report still has problems after a full fix pass.

    The report has already been written when this is raised; it needs
    manual review.
    """

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"{report_id}: could not fix all errors; requires manual review")
