# Pydantic schemas
from app.schemas.common import CamelModel, FieldError, MessageResponse
from app.schemas.auth import (
    ROLL_NUMBER_PATTERN,
    SignupRequest,
    LoginRequest,
    UserResponse,
    SignupResponse,
    LoginResponse,
)
from app.schemas.activity import (
    ActivityCreate,
    OpenActivityCreate,
    CommunityActivityCreate,
    FundedActivityCreate,
    ActivityUpdate,
    ActivityResponse,
    ActivityValidationResult,
    validate_activity_payload,
)

__all__ = [
    "CamelModel",
    "FieldError",
    "MessageResponse",
    "ROLL_NUMBER_PATTERN",
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "SignupResponse",
    "LoginResponse",
    "ActivityCreate",
    "OpenActivityCreate",
    "CommunityActivityCreate",
    "FundedActivityCreate",
    "ActivityUpdate",
    "ActivityResponse",
    "ActivityValidationResult",
    "validate_activity_payload",
]
