"""Errors surfaced to API callers.

Every error renders as a JSON body carrying ``success: false`` and a
human-readable ``message`` so clients can branch on the flag alone.
"""

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationError(ApiError):
    """Client-correctable input problem, detected before any store call."""

    status_code = 400

    def __init__(self, message: str = "Missing required fields",
                 missing_fields: Optional[List[str]] = None,
                 invalid_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []
        self.invalid_fields = invalid_fields or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.missing_fields:
            body["missingFields"] = self.missing_fields
        if self.invalid_fields:
            body["invalidFields"] = self.invalid_fields
        return body


class StoreError(ApiError):
    """The Record Store rejected or failed an operation."""

    def __init__(self, error: str, message: str = "Record store error"):
        super().__init__(message)
        self.error = error

    def with_context(self, message: str) -> "StoreError":
        return StoreError(self.error, message=message)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["error"] = self.error
        return body


class UnexpectedError(ApiError):
    def __init__(self, message: str, error: str):
        super().__init__(message)
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["error"] = self.error
        return body


class NotFoundError(ApiError):
    status_code = 404
