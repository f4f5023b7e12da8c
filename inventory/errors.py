# inventory/errors.py
from typing import Any, Dict


class InventoryError(Exception):
    """Base for errors that map onto an HTTP status and a stable error code."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class NotFound(InventoryError):
    status_code = 404
    code = "not_found"


class ValidationFailed(InventoryError):
    status_code = 422
    code = "validation_error"


class StorageUnavailable(InventoryError):
    status_code = 503
    code = "storage_unavailable"
