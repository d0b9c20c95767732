# realty_frontend/test_auth.py
# Unit tests for the session store: storage mirror, verification, auth operations

import json

import pytest
import requests

from domains.account.models.session import Session
from realty_frontend.auth import AuthState, SessionStore
from realty_frontend.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    RequestFailed,
    ValidationError,
)
from realty_frontend.storage import SESSION_KEYS, MemoryStorage


def _stored(user):
    return MemoryStorage(
        {
            "user": json.dumps(user),
            "userId": str(user["id"]),
            "userType": user["userType"],
        }
    )


def _assert_mirror(storage, user_id, user_type):
    assert json.loads(storage.get_item("user"))["id"] == user_id
    assert storage.get_item("userId") == str(user_id)
    assert storage.get_item("userType") == user_type


def _assert_cleared(storage):
    for key in SESSION_KEYS:
        assert storage.get_item(key) is None


# ---------------------------------------------------------------------------
# init / verification
# ---------------------------------------------------------------------------

def test_init_without_stored_session_is_anonymous(store, fake_session):
    assert store.state == AuthState.UNKNOWN

    store.init()

    assert store.state == AuthState.ANONYMOUS
    assert store.current_user is None
    assert fake_session.calls == []


def test_init_keeps_verified_session(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    fake_session.route("GET", "/api/users/7", 200, renter_user)
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.state == AuthState.AUTHENTICATED
    assert store.user_id == 7
    assert store.current_user.get("bio") == "Looking for a flat in Lusaka"
    assert len(fake_session.calls_to("GET", "/api/users/7")) == 1
    _assert_mirror(storage, 7, "Rent & Buy")


def test_deleted_user_is_purged(api, fake_session, notifier, renter_user):
    """A 404 on verification removes the session and every storage key."""
    storage = _stored(renter_user)
    fake_session.route("GET", "/api/users/7", 404, {"message": "User not found"})
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.state == AuthState.ANONYMOUS
    assert store.current_user is None
    _assert_cleared(storage)


def test_unreachable_backend_keeps_session(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    fake_session.route_error("GET", "/api/users/7", requests.exceptions.ConnectionError("refused"))
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.state == AuthState.AUTHENTICATED
    assert store.user_id == 7
    _assert_mirror(storage, 7, "Rent & Buy")
    assert api.backend_status == "connection_error"


@pytest.mark.parametrize("status", [401, 403, 500, 503])
def test_any_error_status_purges_session(api, fake_session, notifier, renter_user, status):
    """Only an unreachable backend keeps the stored session."""
    storage = _stored(renter_user)
    fake_session.route("GET", "/api/users/7", status, {"message": "boom"})
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.state == AuthState.ANONYMOUS
    assert not store.is_authenticated
    _assert_cleared(storage)


def test_timeout_keeps_session(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    fake_session.route_error("GET", "/api/users/7", requests.exceptions.Timeout())
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.is_authenticated
    _assert_mirror(storage, 7, "Rent & Buy")


def test_session_is_tentative_before_verification_finishes(api, fake_session, notifier, respond, renter_user):
    """The stored session is usable while the check is in flight."""
    storage = _stored(renter_user)
    seen = {}

    def handler(**kwargs):
        seen["state"] = store.state
        seen["user_id"] = store.user_id
        return respond(200, renter_user)

    fake_session.route_callable("GET", "/api/users/7", handler)
    store = SessionStore(api, storage=storage, notifier=notifier)

    thread = store.init(background=True)
    thread.join(timeout=5)

    assert seen == {"state": AuthState.AUTHENTICATED, "user_id": 7}
    assert store.is_authenticated


def test_purge_skipped_when_another_user_logged_in_meanwhile(api, fake_session, notifier, respond, renter_user, landlord_user):
    storage = _stored(renter_user)
    store = SessionStore(api, storage=storage, notifier=notifier)

    def handler(**kwargs):
        store.update(Session.model_validate(landlord_user), "login_success")
        return respond(404, {"message": "User not found"})

    fake_session.route_callable("GET", "/api/users/7", handler)
    store.load_stored_session()

    assert store.verify_stored_session() is True
    assert store.user_id == 12
    _assert_mirror(storage, 12, "Landlord & Sell")


def test_corrupted_storage_is_cleared(api, fake_session, notifier):
    storage = MemoryStorage({"user": "{not json", "userId": "7", "userType": "Rent & Buy"})
    store = SessionStore(api, storage=storage, notifier=notifier)

    store.init()

    assert store.state == AuthState.ANONYMOUS
    _assert_cleared(storage)
    assert fake_session.calls == []


def test_stored_record_missing_fields_is_cleared(api, fake_session, notifier):
    storage = MemoryStorage({"user": json.dumps({"username": "ghost"}), "userId": "3"})
    store = SessionStore(api, storage=storage, notifier=notifier)

    assert store.load_stored_session() is None
    _assert_cleared(storage)


# ---------------------------------------------------------------------------
# login / logout
# ---------------------------------------------------------------------------

def test_login_success(store, storage, fake_session, notifier, renter_user):
    fake_session.route("POST", "/api/auth/login", 200, renter_user)

    session = store.login("amara", "secret1")

    assert session.id == 7
    assert store.state == AuthState.AUTHENTICATED
    assert fake_session.calls_to("POST", "/api/auth/login")[0]["json"] == {
        "username": "amara",
        "password": "secret1",
    }
    _assert_mirror(storage, 7, "Rent & Buy")
    assert notifier.last() == ("Login Successful", "Welcome back, Amara Banda!", "default")
    assert store.is_loading is False


def test_storage_mirror_round_trips_every_field(store, storage, fake_session, renter_user):
    """The stored user decodes back to exactly the in-memory session."""
    fake_session.route("POST", "/api/auth/login", 200, renter_user)

    store.login("amara", "secret1")

    restored = Session.from_json(storage.get_item("user"))
    assert restored == store.current_user
    assert restored.to_storage() == renter_user
    assert restored.full_name == "Amara Banda"
    assert restored.email == "amara@example.com"
    assert restored.profile_image == "https://cdn.realty.test/u/7.jpg"
    assert restored.get("bio") == "Looking for a flat in Lusaka"


def test_login_never_stores_password(store, storage, fake_session, renter_user):
    fake_session.route("POST", "/api/auth/login", 200, {**renter_user, "password": "secret1"})

    store.login("amara", "secret1")

    assert "password" not in json.loads(storage.get_item("user"))
    assert store.current_user.get("password") is None


def test_invalid_credentials_leave_session_untouched(store, storage, fake_session, notifier):
    fake_session.route("POST", "/api/auth/login", 401)

    with pytest.raises(AuthenticationError) as exc_info:
        store.login("amara", "wrong")

    assert exc_info.value.message == "Invalid username or password"
    assert store.current_user is None
    _assert_cleared(storage)
    assert notifier.last() == ("Login Failed", "Invalid username or password", "destructive")


def test_failed_login_keeps_previous_session(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    store = SessionStore(api, storage=storage, notifier=notifier)
    store.load_stored_session()
    fake_session.route("POST", "/api/auth/login", 401, {"message": "Invalid credentials"})

    with pytest.raises(AuthenticationError):
        store.login("someone", "else1")

    assert store.user_id == 7
    _assert_mirror(storage, 7, "Rent & Buy")


def test_empty_login_is_rejected_locally(store, fake_session):
    with pytest.raises(ValidationError) as exc_info:
        store.login("", "")

    assert set(exc_info.value.errors) == {"username", "password"}
    assert fake_session.calls == []


def test_logout_clears_everything(store, storage, fake_session, notifier, renter_user):
    fake_session.route("POST", "/api/auth/login", 200, renter_user)
    store.login("amara", "secret1")
    calls_before = len(fake_session.calls)

    store.logout()

    assert store.state == AuthState.ANONYMOUS
    assert store.current_user is None
    _assert_cleared(storage)
    assert len(fake_session.calls) == calls_before
    assert notifier.last()[0] == "Logged Out"


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------

def _registration(**overrides):
    data = {
        "username": "amara",
        "password": "secret1",
        "confirmPassword": "secret1",
        "email": "amara@example.com",
        "fullName": "Amara Banda",
        "userType": "Rent & Buy",
    }
    data.update(overrides)
    return data


def test_register_mismatched_passwords_makes_no_request(store, fake_session):
    with pytest.raises(ValidationError) as exc_info:
        store.register(_registration(confirmPassword="secret2"))

    assert "confirmPassword" in exc_info.value.errors
    assert fake_session.calls == []


def test_register_mismatch_with_snake_case_keys_makes_no_request(store, fake_session):
    data = _registration()
    del data["confirmPassword"]
    data["confirm_password"] = "different"

    with pytest.raises(ValidationError) as exc_info:
        store.register(data)

    assert exc_info.value.errors == {"confirmPassword": "Passwords do not match"}
    assert fake_session.calls == []


def test_register_success_logs_in(store, storage, fake_session, notifier, renter_user):
    fake_session.route("POST", "/api/users/register", 201, renter_user)

    session = store.register(_registration(phoneNumber=None))

    body = fake_session.calls_to("POST", "/api/users/register")[0]["json"]
    assert body["userType"] == "Rent & Buy"
    assert body["fullName"] == "Amara Banda"
    assert "phoneNumber" not in body
    assert session.id == 7
    _assert_mirror(storage, 7, "Rent & Buy")
    assert notifier.last() == ("Registration Successful", "Welcome to Realty Estate, Amara Banda!", "default")


def test_register_fills_missing_confirm_password(store, fake_session, renter_user):
    fake_session.route("POST", "/api/users/register", 201, renter_user)
    data = _registration()
    del data["confirmPassword"]

    store.register(data)

    assert fake_session.calls_to("POST", "/api/users/register")[0]["json"]["confirmPassword"] == "secret1"


def test_register_duplicate_username(store, storage, fake_session, notifier):
    fake_session.route("POST", "/api/users/register", 409, {"message": "Username already exists"})

    with pytest.raises(ConflictError) as exc_info:
        store.register(_registration())

    assert exc_info.value.message == "Username already exists"
    assert store.current_user is None
    _assert_cleared(storage)
    assert notifier.last() == ("Registration Failed", "Username already exists", "destructive")


def test_register_field_errors_from_backend(store, fake_session):
    fake_session.route(
        "POST",
        "/api/users/register",
        400,
        {"message": "Invalid input", "errors": [{"path": ["email"], "message": "Email already in use"}]},
    )

    with pytest.raises(ValidationError) as exc_info:
        store.register(_registration())

    assert exc_info.value.errors == {"email": "Email already in use"}
    assert exc_info.value.status_code == 400


# ---------------------------------------------------------------------------
# update_profile
# ---------------------------------------------------------------------------

def test_update_profile_replaces_session_with_server_record(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    store = SessionStore(api, storage=storage, notifier=notifier)
    store.load_stored_session()

    returned = {k: v for k, v in renter_user.items() if k != "bio"}
    returned["fullName"] = "Amara B."
    fake_session.route("PATCH", "/api/users/7", 200, returned)

    session = store.update_profile(7, {"fullName": "Amara B."})

    assert fake_session.calls_to("PATCH", "/api/users/7")[0]["json"] == {"fullName": "Amara B."}
    assert session.full_name == "Amara B."
    assert session.get("bio") is None
    stored_user = json.loads(storage.get_item("user"))
    assert stored_user["fullName"] == "Amara B."
    assert "bio" not in stored_user
    assert notifier.last()[0] == "Profile Updated"


def test_update_profile_invalid_field_makes_no_request(store, fake_session):
    with pytest.raises(ValidationError):
        store.update_profile(7, {"fullName": "A"})
    assert fake_session.calls == []


def test_update_profile_failure_keeps_session(api, fake_session, notifier, renter_user):
    storage = _stored(renter_user)
    store = SessionStore(api, storage=storage, notifier=notifier)
    store.load_stored_session()
    fake_session.route("PATCH", "/api/users/7", 500)

    with pytest.raises(RequestFailed):
        store.update_profile(7, {"bio": "New bio"})

    assert store.current_user.get("bio") == "Looking for a flat in Lusaka"
    assert notifier.last() == ("Update Failed", "Failed to update profile", "destructive")


# ---------------------------------------------------------------------------
# guards & diagnostics
# ---------------------------------------------------------------------------

def test_require_auth_and_landlord(store, landlord_user, renter_user):
    with pytest.raises(AuthenticationError):
        store.require_auth()

    store.update(Session.model_validate(renter_user))
    assert store.require_auth().id == 7
    with pytest.raises(ForbiddenError):
        store.require_landlord()

    store.update(Session.model_validate(landlord_user))
    assert store.is_landlord
    assert store.require_landlord().id == 12


def test_debug_snapshot_tracks_mutations(store, fake_session, renter_user):
    fake_session.route("POST", "/api/auth/login", 200, renter_user)
    store.login("amara", "secret1")
    store.logout()

    export = json.loads(store.export_debug_snapshot())

    assert export["state"]["user"] == {"exists": False}
    names = [event["name"] for event in export["recent_events"]]
    assert names[:2] == ["logout", "login_success"]
