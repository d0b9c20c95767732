from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from domains.base import CamelModel

# Never mirrored into client storage even if the backend echoes them
_PRIVATE_FIELDS = ("password", "confirmPassword")


class UserType(str, Enum):
    RENT_AND_BUY = "Rent & Buy"
    LANDLORD_AND_SELL = "Landlord & Sell"


class Session(CamelModel):
    """
    The authenticated user's identity and profile snapshot.

    This is whatever the backend returned for the user; profile fields the
    client has no attribute for (bio, phoneNumber, ...) are kept as extras
    so a storage round trip is lossless. Fields the backend did not send stay
    absent rather than becoming null.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    username: str
    email: str
    user_type: UserType
    full_name: Optional[str] = None
    profile_image: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_private_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and any(k in data for k in _PRIVATE_FIELDS):
            data = {k: v for k, v in data.items() if k not in _PRIVATE_FIELDS}
        return data

    @property
    def user_id(self) -> int:
        return self.id

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @property
    def is_landlord(self) -> bool:
        return self.user_type == UserType.LANDLORD_AND_SELL

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by wire name, including extras (e.g. "bio")."""
        data = self.to_storage()
        return data.get(key, default)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def to_json(self) -> str:
        return json.dumps(self.to_storage())

    @classmethod
    def from_json(cls, raw: str) -> "Session":
        return cls.model_validate(json.loads(raw))
