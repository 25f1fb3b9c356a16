"""Base schemas and shared validators"""

from pydantic import BaseModel, ConfigDict, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from typing import Iterable, Optional

_http_url = TypeAdapter(HttpUrl)

class BaseSchema(BaseModel):
    """
    Base schema with common configuration

    Wire names are camelCase; snake_case input is accepted as well.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

def validate_optional_url(value: Optional[str]) -> Optional[str]:
    """Check a URL is well formed, keeping the caller's spelling. Empty clears."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid http(s) URL")
    return value

def reject_explicit_null(model: BaseModel, fields: Iterable[str]) -> None:
    """Raise if any of the required fields was sent as an explicit null"""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{to_camel(name)} cannot be null")
