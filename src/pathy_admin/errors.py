"""
Error types for the admin SDK.

Every error carries a machine-readable ``code`` so views can render an inline
error state without parsing messages.
"""

from typing import Any, Optional


class PathyAdminError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(PathyAdminError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class APIError(PathyAdminError):
    def __init__(self, status_code: int, message: str):
        super().__init__("http_error", message, {"status_code": status_code})
        self.status_code = status_code


class ConnectionError(PathyAdminError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)


class ValidationError(PathyAdminError):
    def __init__(self, message: str, code: str = "validation_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class AttachmentError(ValidationError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="attachment_rejected", details=details)


class ChatError(PathyAdminError):
    def __init__(self, message: str, code: str = "chat_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)
