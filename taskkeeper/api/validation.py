"""Request validation at the API boundary.

Endpoints call these functions explicitly before any service logic runs:

    data = validate_body(TaskCreate, request.get_json(silent=True))
    filters = validate_query(TaskFilter, request.args)

On failure a ValidationError is raised with structured details:

    {
        "model": "TaskCreate",
        "received": {...},
        "errors": [
            {"field": "title", "message": "...", "expected_type": "string_too_short"}
        ]
    }
"""

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Never echoed back in error details
SENSITIVE_FIELDS = {"password"}


def format_errors(error: PydanticValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into field/message/expected_type dicts."""
    formatted = []
    for err in error.errors():
        formatted.append({
            "field": ".".join(str(part) for part in err["loc"]) or "__root__",
            "message": err["msg"],
            "expected_type": err["type"],
        })
    return formatted


def _redact(payload: Any) -> Any:
    """Mask sensitive fields at any depth of a JSON value."""
    if isinstance(payload, dict):
        return {
            key: "***" if key in SENSITIVE_FIELDS else _redact(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [_redact(item) for item in payload]
    return payload


def validate_body(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a JSON request body against a pydantic model.

    Args:
        model: Pydantic model class
        payload: Parsed JSON (None when the body is missing or not JSON)

    Raises:
        ValidationError: If the body is not a JSON object or fails validation
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            {"model": model.__name__, "received": _redact(payload)}
        )

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request data",
            {
                "model": model.__name__,
                "received": _redact(payload),
                "errors": format_errors(e),
            }
        ) from e


def validate_query(model: type[ModelT], args: Mapping[str, str]) -> ModelT:
    """Validate query string parameters against a pydantic model.

    Only parameters named by the model are considered; repeated
    parameters keep their first value.

    Raises:
        ValidationError: If a parameter fails validation
    """
    received = {key: args.get(key) for key in model.model_fields if key in args}

    try:
        return model.model_validate(received)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid query parameters",
            {
                "model": model.__name__,
                "received": received,
                "errors": format_errors(e),
            }
        ) from e
