"""
Exception types raised by the classifier service.

Each error carries the HTTP status the API answers with when it escapes a
route handler.
"""

from typing import Optional, Any, Dict


class WaypointError(Exception):
    """Base exception for all application errors"""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(WaypointError):
    """A required setting is missing. Raised at startup."""

    error = "Configuration Error"


class AuthenticationError(WaypointError):
    """The request carries no usable merchant session."""

    status_code = 401
    error = "Unauthorized"


class UpstreamQueryError(WaypointError):
    """The Shopify Admin API call failed or returned no data."""

    status_code = 502
    error = "Upstream Query Failed"


class ClassificationFailed(WaypointError):
    """A product could not be classified."""

    status_code = 502
    error = "Classification Failed"


class AIProviderError(ClassificationFailed):
    """The completion call itself failed."""


class ClassificationParseError(ClassificationFailed):
    """The model answered, but not with the expected two-key JSON object."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message, details={"raw_text": raw_text} if raw_text is not None else None)
        self.raw_text = raw_text
