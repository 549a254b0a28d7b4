"""Exceptions raised while handling meeting requests."""

from typing import Optional


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing."""


class MeetingServiceError(Exception):
    """Base error translated into an `{error, details, code}` response."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, summary: Optional[str] = None):
        self.message = message
        self.summary = summary
        super().__init__(message)


class ValidationError(MeetingServiceError):
    """Raised when request input is missing or violates a constraint."""

    status_code = 400
    code = "VALIDATION_ERROR"


class UpstreamError(MeetingServiceError):
    """Raised when a provider is unreachable or reports a failure."""

    code = "UPSTREAM_ERROR"


class ParseError(MeetingServiceError):
    """Raised when a provider answers but violates the expected response contract."""

    code = "PARSE_ERROR"
