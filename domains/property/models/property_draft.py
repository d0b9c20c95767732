from typing import ClassVar, List, Optional

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from domains.base import CamelModel, ErrorMessages, check_url


class PropertyDraft(CamelModel):
    """
    A listing as entered in the create/edit form.

    This is what the frontend sends to the backend (plus ownerId).
    Numeric fields accept numeric strings from form inputs.
    """

    # Basic identity & location
    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=20)
    location: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)

    # Deal basics
    price: float = Field(..., gt=0, allow_inf_nan=False)
    square_feet: float = Field(..., gt=0, allow_inf_nan=False)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0, allow_inf_nan=False)
    property_type: str = Field(..., min_length=1)
    listing_type: str = Field(..., min_length=1)

    # Media
    image_url: str
    additional_images: List[str] = Field(default_factory=list)

    # Flags
    is_featured: bool = False
    is_new: bool = True

    # Optional map position
    latitude: Optional[float] = Field(None, allow_inf_nan=False)
    longitude: Optional[float] = Field(None, allow_inf_nan=False)

    error_messages: ClassVar[ErrorMessages] = {
        "title": "Title must be at least 5 characters",
        "description": "Description must be at least 20 characters",
        "location": "Location is required",
        "city": "City is required",
        "state": "State/Province is required",
        "price": "Price must be positive",
        "squareFeet": "Area must be positive",
        "bedrooms": "Number of bedrooms must be positive",
        "bathrooms": "Number of bathrooms must be positive",
        "propertyType": "Property type is required",
        "listingType": "Listing type is required",
        "imageUrl": "Please provide a valid main image URL",
        "additionalImages": "Please provide valid URLs for additional images",
    }

    @field_validator("price", "square_feet", "bedrooms", "bathrooms", "latitude", "longitude", mode="before")
    @classmethod
    def reject_booleans(cls, v):
        # True/False would otherwise coerce to 1/0
        if isinstance(v, bool):
            raise PydanticCustomError("float_type", "Input should be a valid number")
        return v

    @field_validator("image_url")
    @classmethod
    def main_image_is_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("additional_images")
    @classmethod
    def additional_images_are_urls(cls, v: List[str]) -> List[str]:
        return [check_url(url) for url in v]

    def to_payload(self, owner_id: Optional[int] = None) -> dict:
        # Drafts are submitted whole (defaults included), unlike profile PATCHes
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if owner_id is not None:
            payload["ownerId"] = owner_id
        return payload
