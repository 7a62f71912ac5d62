"""CorpCulture REST API client."""

import logging
from typing import Any, Optional

import httpx

from ..config import Config, delete_session
from ..exceptions import (
    APIResponseError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


def _error_details(response: httpx.Response) -> tuple[Optional[str], Optional[str]]:
    """Pull ``message`` and ``errorType`` out of an error envelope, if present."""
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    return body.get("message"), body.get("errorType")


class CorpCultureClient:
    """HTTP client for the CorpCulture API.

    Every request carries the session token in the ``Authorization`` header
    exactly as the server issued it.
    """

    def __init__(self, config: Config, token: Optional[str] = None):
        self.config = config
        self._token = token
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.config.timeout)
        return self._client

    @property
    def token(self) -> Optional[str]:
        if self._token is not None:
            return self._token
        if self.config.session:
            return self.config.session.token
        return None

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers."""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = self.token
        return headers

    def url(self, path: str) -> str:
        """Build an API URL from a resource path."""
        return f"{self.config.api_url}/{path.lstrip('/')}"

    def _handle_response(self, response: httpx.Response, check_success: bool = True) -> dict[str, Any]:
        """Map error statuses to exceptions and return the decoded envelope."""
        status = response.status_code

        if status == 401:
            message, error_type = _error_details(response)
            if self.config.session is not None:
                logger.warning("Session rejected by server, clearing stored session")
                delete_session()
                self.config.session = None
            raise AuthenticationError(
                message or "Session expired or invalid", error_type=error_type, server_message=message
            )

        if status == 403:
            message, _ = _error_details(response)
            raise PermissionDeniedError(
                key=response.request.url.path,
                message=message or "Access denied by server",
                server_message=message,
            )

        if status == 404:
            message, error_type = _error_details(response)
            raise NotFoundError(message or "Record not found.", error_type=error_type, server_message=message)

        if status >= 400:
            message, _ = _error_details(response)
            detail = f": {message}" if message else ""
            raise APIResponseError(f"HTTP {status}{detail}", status_code=status, server_message=message)

        try:
            body = response.json()
        except ValueError as e:
            raise APIResponseError(f"Invalid JSON in response from {response.request.url.path}", status_code=status) from e

        if not isinstance(body, dict):
            raise APIResponseError("Unexpected response format: expected a JSON object", status_code=status)

        if check_success and body.get("success") is False:
            raise APIResponseError(
                body.get("message") or "Request failed", status_code=status, server_message=body.get("message")
            )

        return body

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        data: Optional[dict] = None,
        check_success: bool = True,
    ) -> dict[str, Any]:
        """Make a request against the API and return the response envelope."""
        url = self.url(path)
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self.client.request(method, url, headers=self.headers, params=params, json=data)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request to {path} timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Network error: {e}") from e

        return self._handle_response(response, check_success=check_success)

    def get(self, path: str, params: Optional[dict] = None, check_success: bool = True) -> dict[str, Any]:
        """Make GET request."""
        return self.request("GET", path, params=params, check_success=check_success)

    def post(self, path: str, data: Optional[dict] = None, check_success: bool = True) -> dict[str, Any]:
        """Make POST request."""
        return self.request("POST", path, data=data, check_success=check_success)

    def put(self, path: str, data: Optional[dict] = None, check_success: bool = True) -> dict[str, Any]:
        """Make PUT request."""
        return self.request("PUT", path, data=data, check_success=check_success)

    def patch(self, path: str, data: Optional[dict] = None, check_success: bool = True) -> dict[str, Any]:
        """Make PATCH request."""
        return self.request("PATCH", path, data=data, check_success=check_success)

    def delete(self, path: str) -> dict[str, Any]:
        """Make DELETE request."""
        return self.request("DELETE", path)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "CorpCultureClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
