"""Custom exception hierarchy for PhotoVault."""

from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Lookup errors (absent and not-owned are reported the same way)
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    PHOTO_NOT_FOUND = "PHOTO_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    CONFLICT = "CONFLICT"

    # Storage errors
    BLOB_STORE_ERROR = "BLOB_STORE_ERROR"
    PARTIAL_DELETION = "PARTIAL_DELETION"

    # Database errors
    TRANSACTION_ERROR = "TRANSACTION_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class PhotoVaultException(Exception):
    """
    Base exception for all PhotoVault errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class FolderNotFoundError(PhotoVaultException):
    """Folder is missing or belongs to another user."""

    def __init__(self, folder_id: Any):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class PhotoNotFoundError(PhotoVaultException):
    """No photo matched the caller's ownership."""

    def __init__(self, photo_ids: Any):
        super().__init__(
            "Photo not found",
            ErrorCode.PHOTO_NOT_FOUND,
            status_code=404,
            details={"photo_ids": photo_ids}
        )


class ValidationError(PhotoVaultException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class AuthenticationError(PhotoVaultException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class ForbiddenError(PhotoVaultException):
    """Authenticated user is not entitled to the referenced resources."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        resource_ids: Optional[List[Any]] = None,
    ):
        super().__init__(
            message,
            ErrorCode.FORBIDDEN,
            status_code=403,
            details={"ids": resource_ids} if resource_ids else None,
        )


class ConflictError(PhotoVaultException):
    """Operation conflicts with the current state of a resource."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            ErrorCode.CONFLICT,
            status_code=409,
            details=details
        )


class BlobStoreError(PhotoVaultException):
    """Object store call failed for a reason other than a missing key."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Blob store operation failed for {key}",
            ErrorCode.BLOB_STORE_ERROR,
            status_code=500,
            details={"key": key, "reason": reason}
        )
        self.key = key
        self.reason = reason


class BlobNotFoundError(Exception):
    """The object store has no object under this key.

    Not a PhotoVaultException: a missing blob is never reported to the client,
    delete paths treat it as an already-completed delete.
    """

    def __init__(self, key: str):
        super().__init__(f"No such key: {key}")
        self.key = key


class PartialDeletionError(PhotoVaultException):
    """Rows were deleted and committed but some blob objects could not be removed.

    Callers must treat this as "objects may be orphaned in the blob store",
    not as "nothing happened".
    """

    def __init__(self, deleted: int, failed_keys: List[str]):
        super().__init__(
            f"Deleted {deleted} photo(s) but {len(failed_keys)} stored object(s) could not be removed",
            ErrorCode.PARTIAL_DELETION,
            status_code=500,
            details={"deleted": deleted, "failed_keys": failed_keys}
        )


class TransactionError(PhotoVaultException):
    """Begin, commit or rollback failed."""

    def __init__(self, operation: str):
        super().__init__(
            f"Transaction failed during {operation}",
            ErrorCode.TRANSACTION_ERROR,
            status_code=500,
            details={"operation": operation}
        )


class DatabaseError(PhotoVaultException):
    """Database operation failed. The driver message is logged, never returned."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
        )
