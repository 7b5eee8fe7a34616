"""Exception classes for export and configuration failures."""

from typing import Optional


class FieldInsightsError(Exception):
    """Base exception for field insights failures."""


class ConfigError(FieldInsightsError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, variable: str, message: str):
        super().__init__(f"Invalid {variable}: {message}")
        self.variable = variable


class ExportError(FieldInsightsError):
    """Raised when fetching an export batch fails."""

    def __init__(self, message: str, path: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class InvalidPayloadError(ExportError):
    """Raised when an export response does not carry a ``data`` list."""

    def __init__(self, path: Optional[str] = None, detail: str = ""):
        message = "Unexpected data format"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path=path)
