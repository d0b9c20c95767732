from typing import ClassVar, Dict, Union

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

_URL_ADAPTER = TypeAdapter(AnyUrl)

ErrorMessages = Dict[str, Union[str, Dict[str, str]]]


class CamelModel(BaseModel):
    """
    Base for every request/record exchanged with the marketplace API.

    Python attributes are snake_case; the wire format (and field error keys)
    are camelCase, e.g. ``full_name`` <-> ``fullName``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Per-field user-facing messages, keyed by wire name. A value is either one
    # message for every failure on that field, or a {error_type: message} map
    # ("*" = any other type).
    error_messages: ClassVar[ErrorMessages] = {}

    def to_payload(self) -> dict:
        """JSON-ready body using wire names, omitting fields never provided."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


def check_url(value: str) -> str:
    """Validate a URL while keeping the caller's exact string."""
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        raise PydanticCustomError("url_parsing", "Please provide a valid URL")
    return value
