from typing import List, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from domains.base import CamelModel


class Property(CamelModel):
    """
    A listing as returned by the backend.

    Lenient: only the id is required and unknown
    fields are kept, since older listings predate the form's constraints.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    owner_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[float] = None
    property_type: Optional[str] = None
    listing_type: Optional[str] = None
    image_url: Optional[str] = None
    additional_images: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_new: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
