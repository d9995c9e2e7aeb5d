"""
Audit errors.

Every error is terminal for the request. The exception handlers in
app.platform.exceptions turn them into JSON responses using `to_content()`.
"""
from typing import Any, Dict, Optional

from fastapi import status

from app.features.audit.utils.suggestions import suggest_fix
from app.platform.utils.timestamps import utc_timestamp


class AuditError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.message}


class MissingParameter(AuditError):
    """The `url` query parameter is absent or empty."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(AuditError):
    """The PageSpeed Insights API key is unset or still the placeholder."""

    def __init__(self, message: str, detail: str):
        super().__init__(message)
        self.detail = detail

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.message, "message": self.detail}


class UpstreamError(AuditError):
    """A PageSpeed Insights call failed or returned unusable data."""

    def __init__(self, message: str, url: Optional[str] = None, suggestion: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.suggestion = suggestion if suggestion is not None else suggest_fix(message)
        self.timestamp = utc_timestamp()

    def to_content(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "suggestion": self.suggestion,
            "url": self.url,
            "timestamp": self.timestamp,
        }
