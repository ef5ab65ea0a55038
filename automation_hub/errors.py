"""
Error taxonomy for Automation Hub.

Routes raise these directly; ``api.py`` registers handlers that turn them
into HTTP responses.
"""

from typing import Any, Dict, Optional


class AutomationHubError(Exception):
    """Base class for application errors."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class NotFoundError(AutomationHubError):
    """Raised when a resource is absent or not owned by the caller.

    Both cases produce the same message and status.
    """

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str = "Session"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConfigurationError(AutomationHubError):
    """Raised when a required provider credential is missing."""

    code = "CONFIGURATION_ERROR"
    status_code = 500

    def __init__(self, message: str = "OpenRouter not configured"):
        super().__init__(message)


class UpstreamError(AutomationHubError):
    """Raised when the model provider call fails or returns a non-success status."""

    code = "UPSTREAM_FAILURE"
    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["upstream_status"] = self.status
        return data
