"""
realty_frontend/validators.py
Uniform evaluation of the form schemas.

Every form (registration, login, property create/edit, profile edit, contact,
waitlist) is a pydantic model under domains/. validate_form() runs one of
them against raw form input and turns pydantic's error list into a
{field: message} map, so callers never depend on pydantic error shapes.
Validation always happens before anything is sent to the backend.
"""

import re
from typing import Any, Dict, Mapping, Type, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from domains.account.models.requests import (
    ContactRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegistrationRequest,
    WaitlistRequest,
)
from domains.base import CamelModel
from domains.property.models.property_draft import PropertyDraft
from realty_frontend.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=CamelModel)

# Raised when a numeric field gets something that is not a number at all
NUMBER_TYPE_ERRORS = {
    "float_parsing",
    "float_type",
    "int_parsing",
    "int_type",
    "int_from_float",
    "finite_number",
}

FORM_SCHEMAS: Dict[str, Type[CamelModel]] = {
    "login": LoginRequest,
    "registration": RegistrationRequest,
    "profile": ProfileUpdateRequest,
    "property": PropertyDraft,
    "contact": ContactRequest,
    "waitlist": WaitlistRequest,
}


def humanize(field: str) -> str:
    """Turn a wire name into a label, e.g. squareFeet -> Square feet."""
    words = re.sub(r"([A-Z])", r" \1", field).strip().lower()
    return words[:1].upper() + words[1:]


def _wire_name(schema: Type[CamelModel], loc: str) -> str:
    # Error locs follow the input key, which may be the snake_case name
    field = schema.model_fields.get(loc)
    if field is not None and field.alias:
        return field.alias
    return loc


def _message_for(schema: Type[CamelModel], field: str, error: Mapping[str, Any]) -> str:
    error_type = error.get("type", "")

    if error_type in NUMBER_TYPE_ERRORS:
        if error_type == "int_from_float":
            return f"{humanize(field)} must be a whole number"
        return f"{humanize(field)} must be a number"

    configured = schema.error_messages.get(field)
    if isinstance(configured, str):
        return configured
    if isinstance(configured, dict):
        message = configured.get(error_type) or configured.get("*")
        if message:
            return message

    if error_type == "missing":
        return f"{humanize(field)} is required"
    return error.get("msg", "Invalid value")


def field_errors(schema: Type[CamelModel], exc: PydanticValidationError) -> Dict[str, str]:
    """First error per top-level field, keyed by wire name."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = _wire_name(schema, str(loc[0])) if loc else "__root__"
        if field in errors:
            continue
        errors[field] = _message_for(schema, field, error)
    return errors


def validate_form(schema: Type[SchemaT], data: Union[Mapping[str, Any], SchemaT]) -> SchemaT:
    """
    Validate form input against a schema.

    Args:
        schema: one of the request models (e.g. PropertyDraft)
        data: raw form values keyed by wire name (or snake_case), or an
            already-built instance of the schema

    Returns:
        The validated model

    Raises:
        ValidationError: with {field: message} for every failing field
    """
    if isinstance(data, schema):
        return data
    if isinstance(data, CamelModel):
        data = data.model_dump(by_alias=True, exclude_unset=True)
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(schema, exc)) from None


def validate_named_form(form: str, data: Mapping[str, Any]) -> CamelModel:
    """validate_form() by form name ("login", "registration", "property", ...)."""
    try:
        schema = FORM_SCHEMAS[form]
    except KeyError:
        raise ValueError(f"Unknown form: {form}") from None
    return validate_form(schema, data)
