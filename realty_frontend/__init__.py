"""Client-side core of the real-estate marketplace frontend."""

from realty_frontend.api_client import ApiClient
from realty_frontend.auth import AuthState, SessionStore
from realty_frontend.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NetworkUnreachable,
    NotFoundError,
    RealtyError,
    RequestFailed,
    ValidationError,
)
from realty_frontend.listings import ListingService
from realty_frontend.query_builder import FilterCriteria, build_query
from realty_frontend.uploads import ImageUploader

__all__ = [
    "ApiClient",
    "AuthState",
    "SessionStore",
    "ListingService",
    "ImageUploader",
    "FilterCriteria",
    "build_query",
    "RealtyError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "RequestFailed",
    "NetworkUnreachable",
]
