# realty_frontend/conftest.py
# Shared fixtures: a fake requests.Session routed by (method, path), a
# recording notifier and in-memory storage.

import json
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest
import requests

from realty_frontend.api_client import ApiClient
from realty_frontend.auth import SessionStore
from realty_frontend.notifications import Notifier
from realty_frontend.storage import MemoryStorage

BASE_URL = "https://api.realty.test"


def make_response(status_code: int, body: Any = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode("utf-8") if body is not None else b""
    resp.headers["Content-Type"] = "application/json"
    resp.encoding = "utf-8"
    return resp


Route = Union[requests.Response, Exception, Callable[..., requests.Response]]


class FakeSession:
    """Stands in for requests.Session; unrouted requests answer 404."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def route(self, method: str, path: str, status_code: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = make_response(status_code, body)

    def route_error(self, method: str, path: str, error: Exception) -> None:
        self.routes[(method, path)] = error

    def route_callable(self, method: str, path: str, handler: Callable[..., requests.Response]) -> None:
        self.routes[(method, path)] = handler

    def request(self, method, url, headers=None, json=None, params=None, files=None, timeout=None):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        with self._lock:
            self.calls.append(
                {"method": method, "path": path, "json": json, "params": params, "files": files}
            )
        route = self.routes.get((method, path))
        if route is None:
            return make_response(404, {"message": "Not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route) and not isinstance(route, requests.Response):
            return route(method=method, path=path, json=json, params=params, files=files)
        return route

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages: List[Tuple[str, str, str]] = []

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        self.messages.append((title, description, variant))

    @property
    def titles(self) -> List[str]:
        return [m[0] for m in self.messages]

    def last(self) -> Optional[Tuple[str, str, str]]:
        return self.messages[-1] if self.messages else None


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def api(fake_session) -> ApiClient:
    return ApiClient(base_url=BASE_URL, session=fake_session, timeout=5)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(api, storage, notifier) -> SessionStore:
    return SessionStore(api, storage=storage, notifier=notifier)


@pytest.fixture
def renter_user() -> Dict[str, Any]:
    return {
        "id": 7,
        "username": "amara",
        "fullName": "Amara Banda",
        "email": "amara@example.com",
        "userType": "Rent & Buy",
        "profileImage": "https://cdn.realty.test/u/7.jpg",
        "bio": "Looking for a flat in Lusaka",
    }


@pytest.fixture
def landlord_user() -> Dict[str, Any]:
    return {
        "id": 12,
        "username": "mwila",
        "fullName": "Mwila Phiri",
        "email": "mwila@example.com",
        "userType": "Landlord & Sell",
    }


@pytest.fixture
def respond() -> Callable[..., requests.Response]:
    """make_response for route_callable handlers."""
    return make_response
