"""
HTTP client for the auth API, used by the login wizard.
"""
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.logging_config import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """A failed API call, carrying the message the server sent back."""

    def __init__(self, message: str, status_code: int = 0, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


def _error_from_response(res: httpx.Response) -> ApiError:
    message = None
    code = None
    try:
        data = res.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            code = error.get("code")
        if not message and isinstance(data.get("detail"), str):
            message = data["detail"]

    return ApiError(message or f"Request failed with status {res.status_code}", res.status_code, code)


class ApiClient:
    def __init__(self, base_url: str = None, client: httpx.Client = None, timeout: float = 10.0):
        self.client = client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout,
        )

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            res = self.client.post(path, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("api_request_failed", path=path, error=str(exc))
            raise ApiError(f"Network error: {exc}") from exc

        if res.status_code >= 400:
            raise _error_from_response(res)

        try:
            return res.json()
        except ValueError as exc:
            logger.warning("api_invalid_response", path=path, status_code=res.status_code)
            raise ApiError("Invalid response from server", res.status_code) from exc

    def register(self, phone_e164: str, password: str, preferred_lang: str = None) -> Dict[str, Any]:
        payload = {"phoneE164": phone_e164, "password": password}
        if preferred_lang:
            payload["preferredLang"] = preferred_lang
        return self._post("/v1/auth/register", payload)

    def login_initiate(self, phone_e164: str, password: str) -> Dict[str, Any]:
        return self._post("/v1/auth/login/initiate", {"phoneE164": phone_e164, "password": password})

    def login_verify(self, phone_e164: str, otp: str) -> Dict[str, Any]:
        return self._post("/v1/auth/login/verify", {"phoneE164": phone_e164, "otp": otp})

    def close(self):
        self.client.close()
