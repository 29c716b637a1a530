"""
Shared schema plumbing: camelCase wire format, field-keyed error lists
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Leading loc entries FastAPI adds for where a value came from
_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class CamelModel(BaseModel):
    """
    Base for every request/response schema.

    Fields are snake_case in Python and camelCase on the wire; input is
    accepted in either form.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(CamelModel):
    field: str
    message: str


class MessageResponse(CamelModel):
    message: str


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC, the convention used by every DateTime column"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def wire_name(part: Any) -> str:
    """
    camelCase form of one error loc entry.

    pydantic reports the Python field name for values populated by name and
    for defaults checked with validate_default, so normalise here.
    """
    part = str(part)
    if "_" in part.strip("_"):
        return to_camel(part)
    return part


def collect_errors(exc) -> List[Dict[str, str]]:
    """
    Flatten pydantic (or FastAPI request) errors into
    [{"field": "title", "message": "..."}]
    """
    errors = []
    for err in exc.errors():
        loc = [wire_name(part) for part in err.get("loc", ()) if part not in _REQUEST_LOCATIONS]
        message = err.get("msg", "Invalid value")
        # ValueError raised in a validator is reported as "Value error, <msg>"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return errors


def parse_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """Validate data against model_cls, raising the domain ValidationError on failure"""
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(errors=collect_errors(exc))
