"""
realty_frontend/api_client.py
Centralized API client for all backend requests.

This module ensures:
1. All backend calls go through one requests.Session (cookies, base URL, timeout)
2. Non-success responses are mapped onto the error taxonomy in errors.py
3. Connection failures surface as NetworkUnreachable, never as raw requests errors
4. No duplicate HTTP logic scattered across the services
"""

import time
from typing import Any, Dict, Literal, Optional

import requests

from realty_frontend.config import API_TIMEOUT_SECONDS, IS_DEV, get_api_base_url
from realty_frontend.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NetworkUnreachable,
    NotFoundError,
    RequestFailed,
    ValidationError,
)

__all__ = ["ApiClient", "HttpMethod", "extract_message"]

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

_STATUS_ERRORS = {
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def extract_message(resp: requests.Response, default: str) -> str:
    """
    Pull the human-readable message out of an error response.

    The backend answers errors with {"message": "..."}; anything else
    falls back to the supplied default.
    """
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return default


def _field_errors(resp: requests.Response) -> Dict[str, str]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    if not isinstance(body, dict):
        return {}
    errors = body.get("errors")
    if isinstance(errors, dict):
        return {str(k): str(v) for k, v in errors.items()}
    if isinstance(errors, list):
        # [{"path": ["email"], "message": "..."}] as produced by schema validators
        result = {}
        for item in errors:
            if not isinstance(item, dict):
                continue
            path = item.get("path") or item.get("field")
            if isinstance(path, list):
                path = ".".join(str(p) for p in path)
            if path:
                result.setdefault(str(path), str(item.get("message", "Invalid value")))
        return result
    return {}


class ApiClient:
    """
    Thin wrapper over requests.Session for the marketplace REST API.

    Every service in the package receives one of these; tests inject a fake
    session object exposing the same ``request`` signature.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = API_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/") if base_url else None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.backend_status = "unknown"
        self.last_status_change = None

    @property
    def base_url(self) -> str:
        # Resolved lazily so importing the package never requires BACKEND_URL
        if self._base_url is None:
            self._base_url = get_api_base_url()
        return self._base_url

    def request(
        self,
        method: HttpMethod,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        default_error: str = "Request failed",
    ) -> Any:
        """
        Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: API endpoint path (e.g., "/api/properties")
            json: JSON body for POST/PATCH/PUT requests
            params: Query parameters
            files: Multipart files for upload endpoints
            default_error: Message used when the backend gives none

        Returns:
            Decoded JSON (dict/list), or None for an empty body

        Raises:
            NetworkUnreachable: connection error or timeout
            ValidationError / AuthenticationError / ForbiddenError /
            NotFoundError / ConflictError / RequestFailed: non-2xx responses
        """
        if method not in ("GET", "POST", "PUT", "PATCH", "DELETE"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}

        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                json=json,
                params=params,
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            if IS_DEV:
                print(f"[API] Timeout on {method} {path}")
            self._update_backend_status("timeout")
            raise NetworkUnreachable(f"Request timed out after {self.timeout}s. Please try again.") from e
        except requests.exceptions.ConnectionError as e:
            if IS_DEV:
                print(f"[API] Connection error on {method} {path}")
            self._update_backend_status("connection_error")
            raise NetworkUnreachable(f"Cannot connect to backend at {self.base_url}.") from e

        self._update_backend_status("ok")

        if not 200 <= resp.status_code < 300:
            if IS_DEV:
                print(f"[API] {resp.status_code} on {method} {path}")
            self._raise_for_status(resp, default_error)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RequestFailed("Backend returned an invalid response", resp.status_code) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def patch(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def _raise_for_status(self, resp: requests.Response, default_error: str) -> None:
        status = resp.status_code
        message = extract_message(resp, default_error)

        if status in (400, 422):
            errors = _field_errors(resp)
            raise ValidationError(errors, message=message, status_code=status)

        error_cls = _STATUS_ERRORS.get(status, RequestFailed)
        raise error_cls(message, status)

    def _update_backend_status(self, status: str) -> None:
        """Track backend reachability ("ok", "timeout", "connection_error")."""
        if status != self.backend_status:
            self.backend_status = status
            self.last_status_change = time.time()
