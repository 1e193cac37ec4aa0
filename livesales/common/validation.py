from typing import Annotated, Any, Optional, Type, TypeVar

import pydantic
from pydantic import BeforeValidator

from .errors import ValidationError

M = TypeVar("M", bound=pydantic.BaseModel)

# error types that mean "the client left something out"
_MISSING_TYPES = {"missing", "string_too_short", "none_required"}


def parse_body(model: Type[M], data: Any, missing_message: str) -> M:
    """Validate a JSON body against ``model``.

    Absent or blank required fields raise ``missing_message``; any other
    problem is reported with the offending field name.
    """
    if not isinstance(data, dict):
        raise ValidationError(missing_message)
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        if any(_is_missing(err) for err in errors):
            raise ValidationError(missing_message) from exc
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(f"{field}: {first['msg']}") from exc


def _is_missing(err: dict) -> bool:
    if err["type"] in _MISSING_TYPES:
        return True
    # a required field sent as null or ""
    value = err.get("input")
    return value is None or (isinstance(value, str) and not value.strip())


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
