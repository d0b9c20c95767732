"""
realty_frontend/auth.py
Client-side authentication & session state for the marketplace frontend.

SessionStore is the single source of truth for who is logged in. It owns:
- the in-memory Session snapshot,
- its mirror in durable client storage (keys "user", "userId", "userType",
  always written and cleared together),
- the login / register / logout / profile-update operations that change it.

Lifecycle:
- init(): load the stored session as tentative truth, then verify the user
  still exists on the backend. Any non-success answer (404, 5xx, ...) purges
  it; an unreachable backend keeps it (stale-but-usable, so the app still
  works offline).
- update(session): replace the snapshot and its storage mirror.
- clear(): drop the snapshot and every storage key.

State machine: UNKNOWN -> AUTHENTICATED | ANONYMOUS. There is no terminal
state; logout goes back to ANONYMOUS and a later login to AUTHENTICATED.

Views receive a SessionStore instance; nothing here is module-level state.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from domains.account.models.requests import LoginRequest, ProfileUpdateRequest, RegistrationRequest
from domains.account.models.session import Session
from realty_frontend.api_client import ApiClient
from realty_frontend.config import ENABLE_VERBOSE_LOGGING, get_storage_path
from realty_frontend.dev_observability import export_snapshot_json, mark_key_set, track_event
from realty_frontend.errors import (
    AuthenticationError,
    ForbiddenError,
    NetworkUnreachable,
    RealtyError,
    RequestFailed,
)
from realty_frontend.notifications import Notifier, default_notifier
from realty_frontend.storage import (
    SESSION_KEYS,
    USER_ID_KEY,
    USER_KEY,
    USER_TYPE_KEY,
    ClientStorage,
    JsonFileStorage,
)
from realty_frontend.validators import validate_form


class AuthState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


def _log(message: str) -> None:
    if ENABLE_VERBOSE_LOGGING:
        print(f"[AUTH] {message}")


class SessionStore:
    """
    Explicit session store injected into every consumer.

    Args:
        api: client used for the auth/user endpoints
        storage: durable key/value storage (defaults to the JSON file at
            config.get_storage_path())
        notifier: where success/failure messages go
    """

    def __init__(
        self,
        api: ApiClient,
        storage: Optional[ClientStorage] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.storage = storage if storage is not None else JsonFileStorage(get_storage_path())
        self.notifier = notifier or default_notifier()

        self._session: Optional[Session] = None
        self._state = AuthState.UNKNOWN
        self._lock = threading.RLock()
        self.is_loading = False

        # Redacted timeline of session mutations (see dev_observability)
        self.debug_state: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def current_user(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def user_id(self) -> Optional[int]:
        return self._session.id if self._session else None

    @property
    def is_landlord(self) -> bool:
        return bool(self._session and self._session.is_landlord)

    def require_auth(self) -> Session:
        """Current session, or AuthenticationError when nobody is logged in."""
        session = self._session
        if session is None:
            raise AuthenticationError("You need to be logged in to do that")
        return session

    def require_landlord(self) -> Session:
        session = self.require_auth()
        if not session.is_landlord:
            raise ForbiddenError("Only landlord accounts can manage property listings")
        return session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, background: bool = False) -> Optional[threading.Thread]:
        """
        Load the stored session and verify it against the backend.

        Args:
            background: verify on a daemon thread instead of blocking; the
                thread is returned so callers can join it.

        Returns:
            The verification thread when background=True, else None
        """
        session = self.load_stored_session()
        if session is None:
            return None

        if background:
            thread = threading.Thread(
                target=self.verify_stored_session,
                name="session-verification",
                daemon=True,
            )
            thread.start()
            return thread

        self.verify_stored_session()
        return None

    def load_stored_session(self) -> Optional[Session]:
        """Adopt the stored session as tentative truth (no network)."""
        with self._lock:
            raw = self.storage.get_item(USER_KEY)
            if not raw:
                self._session = None
                self._state = AuthState.ANONYMOUS
                track_event(self.debug_state, "session_absent")
                return None

            try:
                session = Session.from_json(raw)
            except ValueError:
                # bad JSON or a record missing required fields
                _log("Stored session is corrupted, discarding it")
                self._clear_locked("corrupted_storage")
                return None

            self._session = session
            self._state = AuthState.AUTHENTICATED
            track_event(self.debug_state, "session_loaded", {"userId": str(session.id)})
            return session

    def verify_stored_session(self) -> bool:
        """
        Check that the loaded session's user still exists.

        Returns:
            True if the session was kept, False if it was purged
        """
        session = self._session
        if session is None:
            return False

        try:
            self.api.get(f"/api/users/{session.id}", default_error="Failed to verify user")
        except NetworkUnreachable as e:
            _log(f"Failed to verify user, keeping stored session: {e.message}")
            track_event(self.debug_state, "session_verification_skipped", {"reason": "network"})
            return True
        except RealtyError as e:
            if e.status_code is None or 200 <= e.status_code < 300:
                # answered OK but the body was unusable
                track_event(self.debug_state, "session_verification_skipped", {"status": e.status_code})
                return True
            with self._lock:
                # A login/logout may have happened while the request was in flight
                if self._session is not None and self._session.id == session.id:
                    _log(f"User verification returned {e.status_code}, purging stored session")
                    self._clear_locked("session_purged")
                    return False
            return True

        track_event(self.debug_state, "session_verified", {"userId": str(session.id)})
        return True

    def update(self, session: Session, source: str = "update") -> None:
        """Replace the session snapshot and its storage mirror together."""
        with self._lock:
            self.storage.write_many(
                {
                    USER_KEY: session.to_json(),
                    USER_ID_KEY: str(session.id),
                    USER_TYPE_KEY: session.user_type.value,
                }
            )
            self._session = session
            self._state = AuthState.AUTHENTICATED
            for key in SESSION_KEYS:
                mark_key_set(self.debug_state, key, source)
            track_event(self.debug_state, source, {"userId": str(session.id)})

    def clear(self, source: str = "clear") -> None:
        """Drop the session and every storage key. Never fails."""
        with self._lock:
            self._clear_locked(source)

    def _clear_locked(self, source: str) -> None:
        self.storage.remove_many(SESSION_KEYS)
        self._session = None
        self._state = AuthState.ANONYMOUS
        track_event(self.debug_state, source)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> Session:
        """
        Log in with username/password.

        Raises:
            ValidationError: empty username/password (no request sent)
            AuthenticationError: invalid credentials; session untouched
            RealtyError: any other failure reported by the API client
        """
        request = validate_form(LoginRequest, {"username": username, "password": password})

        self.is_loading = True
        try:
            data = self.api.post(
                "/api/auth/login",
                json=request.to_payload(),
                default_error="Invalid username or password",
            )
            session = self._session_from_response(data)
        except RealtyError as e:
            self._report_failure("Login Failed", e, "login_failed")
            raise
        finally:
            self.is_loading = False

        self.update(session, "login_success")
        self.notifier.success("Login Successful", f"Welcome back, {session.display_name}!")
        return session

    def register(self, profile_data: Union[Mapping[str, Any], RegistrationRequest]) -> Session:
        """
        Create an account; the created user becomes the session.

        A missing confirmPassword is filled from password before validation.

        Raises:
            ValidationError: local field errors (no request sent) or field
                errors reported by the endpoint
            ConflictError: username or email already taken
        """
        if not isinstance(profile_data, RegistrationRequest):
            data = dict(profile_data)
            confirm = data.get("confirmPassword") or data.get("confirm_password")
            if not confirm and data.get("password"):
                data.pop("confirm_password", None)
                data["confirmPassword"] = data["password"]
            profile_data = data
        request = validate_form(RegistrationRequest, profile_data)

        self.is_loading = True
        try:
            data = self.api.post(
                "/api/users/register",
                json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
                default_error="Failed to create account",
            )
            session = self._session_from_response(data)
        except RealtyError as e:
            self._report_failure("Registration Failed", e, "register_failed")
            raise
        finally:
            self.is_loading = False

        self.update(session, "register_success")
        self.notifier.success("Registration Successful", f"Welcome to Realty Estate, {session.display_name}!")
        return session

    def logout(self) -> None:
        """Clear the session and storage synchronously; no network call."""
        self.clear("logout")
        self.notifier.success("Logged Out", "You have been successfully logged out.")

    def update_profile(
        self,
        user_id: int,
        fields: Union[Mapping[str, Any], ProfileUpdateRequest],
    ) -> Session:
        """
        PATCH the given profile fields.

        Only provided fields are sent. The server's returned user replaces the
        whole session snapshot (fields it omits are gone afterwards).
        """
        request = validate_form(ProfileUpdateRequest, fields)

        self.is_loading = True
        try:
            data = self.api.patch(
                f"/api/users/{user_id}",
                json=request.to_payload(),
                default_error="Failed to update profile",
            )
            session = self._session_from_response(data)
        except RealtyError as e:
            self._report_failure("Update Failed", e, "profile_update_failed")
            raise
        finally:
            self.is_loading = False

        self.update(session, "profile_updated")
        self.notifier.success("Profile Updated", "Your profile has been successfully updated.")
        return session

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def storage_snapshot(self) -> Dict[str, Optional[str]]:
        return {key: self.storage.get_item(key) for key in SESSION_KEYS}

    def export_debug_snapshot(self) -> str:
        """Redacted JSON dump of the storage mirror and recent session events."""
        return export_snapshot_json(self.debug_state, self.storage_snapshot(), list(SESSION_KEYS))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _session_from_response(data: Any) -> Session:
        if not isinstance(data, dict):
            raise RequestFailed("Backend returned no user record")
        try:
            return Session.model_validate(data)
        except PydanticValidationError as e:
            raise RequestFailed(f"Backend returned an incomplete user record ({e.error_count()} errors)") from e

    def _report_failure(self, title: str, error: RealtyError, event: str) -> None:
        _log(f"{title}: {type(error).__name__}")
        track_event(self.debug_state, event, {"error": type(error).__name__, "status": error.status_code})
        self.notifier.failure(title, error.message)
