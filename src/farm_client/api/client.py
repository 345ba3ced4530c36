"""HTTP API client that multiplexes the farmer and admin sessions."""

from typing import Any, Callable, Dict, Optional

import requests

from ..core.credentials import Credential, normalize_path, resolve_credential
from ..core.session_store import SessionStore
from ..utils.config import Config, DEFAULT_BASE_URL
from ..utils.error_handler import ApiError, SessionInvalidatedError, classify_auth_failure
from ..utils.logging_setup import get_logger
from .invalidation import SessionInvalidationHandler

logger = get_logger('client')


class ApiClient:
    """
    Single outbound request path for the whole application.

    Every call gets the bearer token picked by resolve_credential(). A 401/403
    response carrying requiresLogin=true clears the active session through the
    invalidation handler and is raised as SessionInvalidatedError; every other
    failure is raised as ApiError without touching storage. Successful
    responses are returned as-is.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        http_session: Optional[requests.Session] = None,
        invalidation_handler: Optional[SessionInvalidationHandler] = None,
        alert: Optional[Callable[[str], None]] = None,
        redirect: Optional[Callable[[str], None]] = None,
    ):
        self.store = store or SessionStore()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = http_session or requests.Session()
        self.invalidation = invalidation_handler or SessionInvalidationHandler(
            self.store, alert=alert, redirect=redirect
        )

    @classmethod
    def from_config(cls, config: Config, store: Optional[SessionStore] = None,
                    **kwargs) -> 'ApiClient':
        """Create a client from loaded configuration"""
        return cls(
            store=store,
            base_url=config.api.base_url,
            timeout=config.api.timeout,
            **kwargs
        )

    def _url(self, path: str) -> str:
        """Build full URL from path."""
        return f"{self.base_url}{normalize_path(path)}"

    def credential_for(self, path: str) -> Credential:
        """Resolve the credential a request to path would carry."""
        farmer, admin = self.store.snapshot()
        return resolve_credential(path, farmer, admin)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Any] = None,
        **kwargs,
    ) -> requests.Response:
        """Send a request and return the untouched response on success."""
        credential = self.credential_for(path)
        headers = dict(kwargs.pop("headers", None) or {})
        if credential.authorization:
            headers["Authorization"] = credential.authorization

        url = self._url(path)
        logger.debug(f"{method} {url} (credential: {credential.kind.value})")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            raise ApiError(0, f"Connection error: {e}") from e

        if response.ok:
            return response

        self._raise_for_response(response)

    def _raise_for_response(self, response: requests.Response):
        body = _decode_body(response)

        info = classify_auth_failure(response.status_code, body)
        if info is not None:
            self.invalidation.handle(info)
            raise SessionInvalidatedError(info, body=body, response=response)

        message = response.reason or "Request failed"
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        elif isinstance(body, str) and body:
            message = body

        logger.debug(f"Request failed with HTTP {response.status_code}: {message}")
        raise ApiError(response.status_code, message, body=body, response=response)

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """HTTP GET request."""
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """HTTP POST request."""
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """HTTP PUT request."""
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        """HTTP DELETE request."""
        return self.request("DELETE", path, **kwargs)

    def get_json(self, path: str, params: Optional[Dict] = None) -> Any:
        return decode_json(self.get(path, params=params))

    def post_json(self, path: str, json: Optional[Any] = None) -> Any:
        return decode_json(self.post(path, json=json))

    def put_json(self, path: str, json: Optional[Any] = None) -> Any:
        return decode_json(self.put(path, json=json))

    def delete_json(self, path: str) -> Any:
        return decode_json(self.delete(path))

    def close(self):
        self.session.close()

    def __enter__(self) -> 'ApiClient':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def decode_json(response: requests.Response) -> Any:
    """Decode a successful response body, {} when it is empty."""
    return response.json() if response.content else {}


def _decode_body(response: requests.Response) -> Any:
    """Decode an error body as JSON, falling back to its text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
