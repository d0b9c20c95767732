# realty_frontend/query_builder.py
# Filter criteria -> listings query parameters (pure, no I/O)

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

ANY_LOCATION = "Any Location"
ANY_TYPE = "Any Type"
ANY_PRICE = "Any Price"

LOCATIONS: List[str] = [ANY_LOCATION, "New York", "Los Angeles", "Miami", "Chicago", "Seattle"]
PROPERTY_TYPES: List[str] = [ANY_TYPE, "Apartment", "House", "Villa", "Penthouse", "Estate", "Mansion"]

# Discrete price buckets offered by the search panel, label -> (min, max)
PRICE_BUCKETS: Dict[str, Tuple[int, Optional[int]]] = {
    "$500,000 - $1,000,000": (500000, 1000000),
    "$1,000,000 - $2,000,000": (1000000, 2000000),
    "$2,000,000 - $5,000,000": (2000000, 5000000),
    "$5,000,000+": (5000000, None),
}
PRICE_RANGES: List[str] = [ANY_PRICE, *PRICE_BUCKETS]

# Slider bounds of the filter panel
SLIDER_MIN_PRICE = 0
SLIDER_MAX_PRICE = 10000000
SLIDER_STEP = 500000

NO_PRICE_CONSTRAINT: Tuple[int, Optional[int]] = (0, None)


def _is_any(value: Optional[str], sentinel: str) -> bool:
    if value is None:
        return True
    value = value.strip()
    return not value or value == sentinel or value.lower() == "any"


def price_range_bounds(label: Optional[str]) -> Tuple[int, Optional[int]]:
    """
    Map a price bucket label to (min, max).

    Unknown labels (including "Any Price") mean no constraint: (0, None).
    """
    if label is None:
        return NO_PRICE_CONSTRAINT
    return PRICE_BUCKETS.get(label.strip(), NO_PRICE_CONSTRAINT)


@dataclass
class FilterCriteria:
    """Search constraints chosen on the listing page; every field defaults to "any"."""

    location: str = ANY_LOCATION
    property_type: str = ANY_TYPE
    min_price: float = 0
    max_price: Optional[float] = None

    @classmethod
    def from_selection(
        cls,
        location: str = ANY_LOCATION,
        property_type: str = ANY_TYPE,
        price_range: str = ANY_PRICE,
    ) -> "FilterCriteria":
        """Criteria from the home page search panel (price as a bucket label)."""
        min_price, max_price = price_range_bounds(price_range)
        return cls(location=location, property_type=property_type, min_price=min_price, max_price=max_price)

    @property
    def is_unconstrained(self) -> bool:
        return not build_query(self)


def reset_criteria() -> FilterCriteria:
    """What the filter panel's Reset button produces."""
    return FilterCriteria()


def _as_number(value: float) -> Union[int, float]:
    # 500000.0 -> 500000 so query strings read "minPrice=500000"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def build_query(criteria: FilterCriteria) -> Dict[str, Union[int, float, str]]:
    """
    Canonical query parameters for GET /api/properties.

    Order is location, propertyType, minPrice, maxPrice. Parameters equal to
    their "any" sentinel, or zero/None prices, are left out.
    """
    params: Dict[str, Union[int, float, str]] = {}

    if not _is_any(criteria.location, ANY_LOCATION):
        params["location"] = criteria.location.strip()
    if not _is_any(criteria.property_type, ANY_TYPE):
        params["propertyType"] = criteria.property_type.strip()
    if criteria.min_price:
        params["minPrice"] = _as_number(criteria.min_price)
    if criteria.max_price:
        params["maxPrice"] = _as_number(criteria.max_price)

    return params


def to_query_string(criteria: FilterCriteria) -> str:
    """e.g. "location=Miami&minPrice=5000000" (empty string when unconstrained)."""
    return urlencode(build_query(criteria))


def parse_query_string(query: str) -> FilterCriteria:
    """
    Rebuild criteria from a listing page query string.

    Unparseable prices are ignored rather than rejected.
    """
    values = dict(parse_qsl(query.lstrip("?")))
    criteria = FilterCriteria(
        location=values.get("location", ANY_LOCATION),
        property_type=values.get("propertyType", ANY_TYPE),
    )
    for key, attr in (("minPrice", "min_price"), ("maxPrice", "max_price")):
        raw = values.get(key)
        if raw is None:
            continue
        try:
            setattr(criteria, attr, _as_number(float(raw)))
        except ValueError:
            continue
    return criteria
