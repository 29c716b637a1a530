"""
Custom Exceptions for the Campus Activity Board
===============================================

Services raise these instead of HTTPException so the same rules hold
whether an operation is called from a route, a script or a test. The API
layer turns them into JSON responses (see app.main).

Usage:
    from app.core.exceptions import ActivityNotFoundError, ConflictError

    if not activity:
        raise ActivityNotFoundError(activity_id)

    if existing_like:
        raise ConflictError("You have already reported this activity")
"""

from typing import Optional, Any, Dict, List


class CampusBoardError(Exception):
    """Base exception for all Campus Activity Board errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusBoardError):
    """No identity, or the identity could not be established"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class InvalidCredentialsError(AuthenticationError):
    """Roll number / password pair did not match"""

    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


class AuthorizationError(CampusBoardError):
    """Authenticated but not allowed to do this"""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class AdminRequiredError(AuthorizationError):
    def __init__(self):
        super().__init__("Admin access required")
        self.code = "ADMIN_REQUIRED"


class VerificationRequiredError(AuthorizationError):
    def __init__(self):
        super().__init__("Only verified users can create activities")
        self.code = "VERIFICATION_REQUIRED"


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CampusBoardError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class ActivityNotFoundError(ResourceNotFoundError):
    def __init__(self, activity_id: str):
        super().__init__("Activity", activity_id)


class JoinRequestNotFoundError(ResourceNotFoundError):
    def __init__(self, activity_id: str):
        super().__init__("Join request", activity_id)


class VerificationRequestNotFoundError(ResourceNotFoundError):
    def __init__(self, request_id: str):
        super().__init__("Verification request", request_id)


class ReportNotFoundError(ResourceNotFoundError):
    def __init__(self, report_id: str):
        super().__init__("Report", report_id)


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(CampusBoardError):
    """Duplicate row, full activity, or a state that was already decided"""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code=code)


class CapacityReachedError(ConflictError):
    def __init__(self, capacity: int):
        super().__init__("Activity is at full capacity", code="CAPACITY_REACHED")
        self.details["capacity"] = capacity


class AlreadyProcessedError(ConflictError):
    def __init__(self, what: str = "Request"):
        super().__init__(f"{what} already processed", code="ALREADY_PROCESSED")


# ============================================
# Validation Errors
# ============================================

class ValidationError(CampusBoardError):
    """
    Input validation failed.

    `errors` is a list of {"field": ..., "message": ...} dicts so clients can
    attach each message to the offending form field.
    """

    status_code = 422

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"errors": errors or []})

    @property
    def errors(self) -> List[Dict[str, str]]:
        return self.details["errors"]

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"field": field, "message": message}])


class InvalidActivityTypeError(ValidationError):
    def __init__(self):
        super().__init__(
            "Invalid activity type",
            errors=[{"field": "type", "message": "Invalid activity type"}]
        )
        self.code = "INVALID_ACTIVITY_TYPE"


# ============================================
# Quota Errors
# ============================================

class QuotaExceededError(CampusBoardError):
    """Per-user limit on simultaneously active activities reached"""

    status_code = 429

    def __init__(self, limit: int):
        super().__init__(
            f"Maximum {limit} active activities allowed per user",
            code="QUOTA_EXCEEDED",
            details={"limit": limit}
        )


# ============================================
# Storage Errors
# ============================================

class StorageError(CampusBoardError):
    """Upload to object storage failed"""

    status_code = 502

    def __init__(self, key: str, message: str = "Upload failed"):
        super().__init__(f"Failed to store file: {message}", code="STORAGE_ERROR")
        self.details["object_key"] = key


def error_response(error: CampusBoardError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "detail": error.message,
        "error": error.to_dict()
    }
