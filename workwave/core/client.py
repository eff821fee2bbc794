"""
Core HTTP client for the WorkWave Route Manager API.

Handles authentication, request building, response checking and decoding,
and error handling.
"""

import json
import logging
import os
import re
import time
from typing import Any

import httpx

from workwave.core.types import Callback

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_BASE_URL = "https://wwrm.workwave.com"
DEFAULT_TIMEOUT = 60.0
CONNECT_TIMEOUT = 30.0
MAX_IDLE_CONNECTIONS = 100
IDLE_CONNECTION_TIMEOUT = 60.0

API_KEY_HEADER = "X-WorkWave-Key"
AGENT_STRING = "workwave-python/0.1.0"
CONTENT_TYPE = "application/json"

# RFC 7230 token characters
_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2}).{0,2}", re.DOTALL)


class WorkWaveError(Exception):
    """Base error class for WorkWave client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class RequestError(WorkWaveError):
    """A request could not be built (bad method, path, body or configuration)."""


class APIError(WorkWaveError):
    """API responded with a status outside the accepted band."""

    def __init__(self, message: str, status: int = 0, details: dict | None = None):
        super().__init__(message, details)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class DecodeError(WorkWaveError):
    """Response body could not be decoded into the requested shape."""


class CallbackError(WorkWaveError):
    """
    The API accepted a callback request but reported a failure in the body.

    The populated reply is kept on ``callback`` so the caller can inspect
    the error code and message.
    """

    def __init__(self, message: str, callback: Callback):
        super().__init__(
            message,
            details={"errorCode": callback.error_code, "errorMessage": callback.error_message},
        )
        self.callback = callback
        self.error_code = callback.error_code


class ValidationError(WorkWaveError):
    """Validation error for local input/data issues (not API errors)."""


def check_response(response: httpx.Response) -> None:
    """
    Raise APIError unless the response carries the success status.

    Only 200 is accepted. No body detail is attached to the error.
    """
    status = response.status_code
    if status == 200:
        return
    raise APIError(f"HTTP {status} error", status=status)


def _encode_default(value: Any) -> Any:
    """json.dumps hook: encode records through their to_dict()."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"unsupported type: {type(value).__name__}")


def encode_body(body: Any) -> bytes:
    """JSON-encode a request body, raising RequestError on unsupported values."""
    try:
        return json.dumps(body, default=_encode_default).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RequestError(f"json: {e}")


def filter_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop empty query values so omitted filters are not sent at all."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != "" and v is not False}


class APIClient:
    """
    Low-level HTTP client for the WorkWave API.

    Handles:
    - Authentication via API key header
    - Building requests (headers, JSON body, query filters)
    - Executing requests with uniform status checking and body decoding
    - A pooled, keep-alive transport shared by all calls

    The client is safe to share between threads; its configuration is
    fixed at construction.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        territory_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            api_key: WorkWave API key (or WORKWAVE_API_KEY env var)
            base_url: API base URL (or WORKWAVE_BASE_URL env var)
            territory_id: Default territory ID (or WORKWAVE_TERRITORY_ID env var)
            timeout: Request timeout in seconds
            transport: Optional httpx transport override (used by tests)

        """
        self.api_key = api_key or os.environ.get("WORKWAVE_API_KEY")
        env_base_url = os.environ.get("WORKWAVE_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = httpx.URL((base_url or env_base_url).rstrip("/"))
        self.territory_id = territory_id or os.environ.get("WORKWAVE_TERRITORY_ID")
        self.timeout = timeout
        self._http = new_http_client(timeout, transport)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _ensure_api_key(self) -> str:
        """Ensure API key is configured."""
        if not self.api_key:
            raise RequestError("WORKWAVE_API_KEY environment variable not set")
        return self.api_key

    def _ensure_territory_id(self, territory_id: str | None = None) -> str:
        """Ensure territory ID is available."""
        t_id = territory_id or self.territory_id
        if not t_id:
            raise RequestError("Territory ID required. Set WORKWAVE_TERRITORY_ID env var or use --territory flag")
        return t_id

    def territory_path(self, territory_id: str | None = None) -> str:
        """Get the territory path prefix."""
        t_id = self._ensure_territory_id(territory_id)
        return f"/api/v1/territories/{t_id}"

    def _build_url(self, path: str) -> httpx.URL:
        """Resolve a path against the base URL."""
        bad = _BAD_ESCAPE_RE.search(path)
        if bad:
            raise RequestError(f'parse "{path}": invalid URL escape "{bad.group(0)}"')
        return self.base_url.join(path)

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> httpx.Request:
        """
        Prepare an API request.

        Args:
            method: HTTP method (GET, POST, DELETE, ...)
            path: API path (e.g., /api/v1/territories/{id}/orders)
            body: Optional value to send as JSON
            params: Query filters; empty values are left out
            timeout: Per-call timeout override in seconds

        Returns:
            A fully-headed request, not yet sent

        Raises:
            RequestError: On an invalid method, path or body

        """
        if not _METHOD_RE.match(method or ""):
            raise RequestError(f"invalid method {method!r}")

        api_key = self._ensure_api_key()
        url = self._build_url(path)
        content = encode_body(body) if body is not None else None

        headers = {
            API_KEY_HEADER: api_key,
            "User-Agent": AGENT_STRING,
            "Content-Type": CONTENT_TYPE,
            "Accept": CONTENT_TYPE,
        }

        request = self._http.build_request(
            method,
            url,
            content=content,
            params=filter_params(params) or None,
            headers=headers,
        )
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout, connect=min(timeout, CONNECT_TIMEOUT)).as_dict()
        return request

    def do(self, request: httpx.Request, target: Any = None) -> Any:
        """
        Send a request and decode the response into target.

        Args:
            request: Request from new_request()
            target: None to skip the body, a writable byte sink to receive
                the raw body, or a parser called with the decoded JSON

        Returns:
            The parser's result, or the response when target is None or a
            byte sink

        Raises:
            httpx.TransportError: On connection, DNS or timeout failures
            APIError: On a non-success status
            DecodeError: When the body cannot be decoded into target

        """
        start = time.monotonic()
        response = self._http.send(request, stream=True)
        try:
            logger.debug(
                "%s %s -> %d (%.3fs)",
                request.method,
                request.url,
                response.status_code,
                time.monotonic() - start,
            )
            check_response(response)

            if target is None:
                return response

            write = getattr(target, "write", None)
            if callable(write):
                for chunk in response.iter_bytes():
                    write(chunk)
                return response

            raw = response.read()
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise DecodeError(f"Invalid JSON response: {e}")
            try:
                return target(data)
            except (TypeError, LookupError, AttributeError, ValueError) as e:
                raise DecodeError(f"json: cannot unmarshal into {_target_name(target)}: {e}")
        finally:
            response.close()

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(
        self,
        path: str,
        target: Any = None,
        params: dict[str, Any] | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Make a GET request."""
        return self.do(self.new_request("GET", path, body=body, params=params, timeout=timeout), target)

    def post(
        self,
        path: str,
        body: Any = None,
        target: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Make a POST request."""
        return self.do(self.new_request("POST", path, body=body, params=params, timeout=timeout), target)

    def delete(self, path: str, body: Any = None, target: Any = None, timeout: float | None = None) -> Any:
        """Make a DELETE request."""
        return self.do(self.new_request("DELETE", path, body=body, timeout=timeout), target)


def new_http_client(timeout: float, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Create the pooled httpx client used for every request."""
    return httpx.Client(
        timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT),
        limits=httpx.Limits(
            max_keepalive_connections=MAX_IDLE_CONNECTIONS,
            keepalive_expiry=IDLE_CONNECTION_TIMEOUT,
        ),
        trust_env=True,
        transport=transport,
    )


def _target_name(target: Any) -> str:
    return getattr(target, "__qualname__", type(target).__name__)
