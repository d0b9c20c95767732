"""
realty_frontend/listings.py
Property, agent, testimonial, saved-property, waitlist and contact operations.

Every write is validated locally first; a ValidationError is raised before
any request is made. Remote failures are shown as a notification and then
re-raised so the calling view can keep the user's input.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from domains.account.models.requests import ContactRequest, WaitlistRequest
from domains.property.models.property import Property
from domains.property.models.property_draft import PropertyDraft
from realty_frontend.api_client import ApiClient
from realty_frontend.auth import SessionStore
from realty_frontend.config import IS_DEV
from realty_frontend.errors import NetworkUnreachable, RealtyError, RequestFailed
from realty_frontend.notifications import Notifier
from realty_frontend.query_builder import FilterCriteria, build_query
from realty_frontend.validators import validate_form

FormData = Union[Mapping[str, Any], PropertyDraft]


def _to_property(data: Any) -> Property:
    try:
        return Property.model_validate(data)
    except PydanticValidationError as e:
        raise RequestFailed("Backend returned an invalid property record") from e


def _to_properties(data: Any) -> List[Property]:
    if not data:
        return []
    if not isinstance(data, list):
        raise RequestFailed("Backend returned an invalid property list")
    return [_to_property(item) for item in data]


class ListingService:
    def __init__(
        self,
        api: ApiClient,
        sessions: SessionStore,
        notifier: Optional[Notifier] = None,
        max_workers: int = 4,
    ):
        self.api = api
        self.sessions = sessions
        self.notifier = notifier or sessions.notifier
        self.max_workers = max_workers

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    def list_properties(self, criteria: Optional[FilterCriteria] = None) -> List[Property]:
        """GET /api/properties with the filter translated to query parameters."""
        params = build_query(criteria) if criteria is not None else {}
        return _to_properties(self.api.get("/api/properties", params=params or None))

    def get_property(self, property_id: int) -> Property:
        return _to_property(self.api.get(f"/api/properties/{property_id}", default_error="Failed to fetch property"))

    def featured_properties(self) -> List[Property]:
        return _to_properties(self.api.get("/api/properties/featured/list"))

    def properties_by_owner(self, owner_id: int) -> List[Property]:
        return _to_properties(
            self.api.get(
                "/api/properties/search",
                params={"ownerId": owner_id},
                default_error="Failed to fetch properties",
            )
        )

    def agents(self) -> List[Dict[str, Any]]:
        return self.api.get("/api/agents") or []

    def testimonials(self) -> List[Dict[str, Any]]:
        return self.api.get("/api/testimonials") or []

    def saved_properties(self, user_id: int) -> List[Property]:
        """
        Properties a user saved, resolved to full records.

        Saved entries whose property lookup answers an error status are
        skipped; an unreachable backend fails the whole call.
        """
        saved = self.api.get(f"/api/saved-properties/user/{user_id}", default_error="Failed to fetch saved properties")
        property_ids = [entry.get("propertyId") for entry in (saved or []) if isinstance(entry, dict)]
        property_ids = [pid for pid in property_ids if pid is not None]
        if not property_ids:
            return []

        def fetch(property_id: int) -> Optional[Property]:
            try:
                return self.get_property(property_id)
            except NetworkUnreachable:
                raise
            except RealtyError as e:
                if IS_DEV:
                    print(f"[LISTINGS] Skipping saved property {property_id}: {e.message}")
                return None

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            resolved = list(pool.map(fetch, property_ids))
        return [prop for prop in resolved if prop is not None]

    # ------------------------------------------------------------------
    # Landlord writes
    # ------------------------------------------------------------------

    def create_property(self, data: FormData) -> Property:
        """
        Validate and submit a new listing owned by the current landlord.

        Raises:
            ValidationError: form errors (nothing is sent)
            AuthenticationError / ForbiddenError: not logged in / not a landlord
        """
        draft = validate_form(PropertyDraft, data)
        owner = self.sessions.require_landlord()

        try:
            created = self.api.post(
                "/api/properties",
                json=draft.to_payload(owner_id=owner.id),
                default_error="Failed to create property",
            )
            prop = _to_property(created)
        except RealtyError as e:
            self.notifier.failure("Error", e.message)
            raise

        self.notifier.success("Property Created", "Your property has been listed successfully!")
        return prop

    def update_property(self, property_id: int, data: FormData) -> Property:
        """Validate and PATCH an existing listing with the full draft."""
        draft = validate_form(PropertyDraft, data)
        owner = self.sessions.require_landlord()

        try:
            updated = self.api.patch(
                f"/api/properties/{property_id}",
                json=draft.to_payload(owner_id=owner.id),
                default_error="Failed to update property",
            )
            prop = _to_property(updated)
        except RealtyError as e:
            self.notifier.failure("Error", e.message)
            raise

        self.notifier.success("Property Updated", "Your property has been updated successfully!")
        return prop

    # ------------------------------------------------------------------
    # Public forms
    # ------------------------------------------------------------------

    def join_waitlist(self, data: Union[Mapping[str, Any], WaitlistRequest]) -> Any:
        request = validate_form(WaitlistRequest, data)
        try:
            result = self.api.post("/api/waitlist", json=request.to_payload())
        except RealtyError:
            self.notifier.failure(
                "Error",
                "There was a problem submitting your information. Please try again.",
            )
            raise
        self.notifier.success("Success!", "You've been added to our waitlist.")
        return result

    def submit_contact(self, data: Union[Mapping[str, Any], ContactRequest]) -> ContactRequest:
        """Validate the contact form and acknowledge it (the API has no contact endpoint)."""
        request = validate_form(ContactRequest, data)
        self.notifier.success("Message Sent", "We've received your message and will respond shortly.")
        return request
