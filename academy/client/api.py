# academy/client/api.py
"""Thin synchronous client for the Academy REST API."""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again."


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status: int, message: str, code: Optional[str] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code
        self.body = body


class TransportError(Exception):
    """The request never produced an HTTP response."""


def error_from_response(response: httpx.Response, fallback: str = "Request failed") -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    message, code = fallback, None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or fallback
        code = body.get("code")
    return ApiError(response.status_code, str(message), code=code, body=body)


class AcademyClient:
    def __init__(self, base_url: str = "", token: Optional[str] = None, *,
                 http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def request(self, method: str, path: str, *, json: Any = None, params: Optional[Dict[str, Any]] = None,
                fallback: str = "Request failed") -> Any:
        try:
            response = self.http.request(method, path, json=json, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(str(e)) from e
        if response.status_code >= 400:
            raise error_from_response(response, fallback)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {path}") from e

    def get(self, path: str, **kw) -> Any:
        return self.request("GET", path, **kw)

    def post(self, path: str, json: Any = None, **kw) -> Any:
        return self.request("POST", path, json=json, **kw)

    def patch(self, path: str, json: Any = None, **kw) -> Any:
        return self.request("PATCH", path, json=json, **kw)

    def delete(self, path: str, **kw) -> Any:
        return self.request("DELETE", path, **kw)

    # ---- auth ----
    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.post("/api/auth/login", {"email": email, "password": password}, fallback="Login failed")
        self.token = data["accessToken"]
        return data

    def session(self) -> Optional[Dict[str, Any]]:
        """Current session, or None when signed out."""
        if not self.token:
            return None
        try:
            return self.get("/api/auth/session")
        except ApiError as e:
            if e.status == 401:
                return None
            raise
