"""HTTP client for the marketplace REST backend.

A thin wrapper over ``httpx.Client`` that attaches the session's bearer
token, unwraps the backend's response envelope and turns every failure into
an ``ApiError``. Each call is one request: no retries, no backoff.
"""

from collections.abc import Callable
from typing import Any

import httpx
import structlog

from shared.api.exceptions import ApiError, ApiUnauthorized, ApiUnavailable
from shared.api.response import extract_error_detail, unwrap_envelope

logger = structlog.get_logger(__name__)

TokenProvider = Callable[[], str | None]


class MarketplaceClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 10.0,
        token_provider: TokenProvider | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token_provider = token_provider

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "MarketplaceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------
    def _headers(self, auth: bool) -> dict[str, str]:
        if not auth or self.token_provider is None:
            return {}
        token = self.token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: dict[str, Any] | None = None,
        auth: bool = False,
        raw_text: bool = False,
        full_body: bool = False,
    ) -> Any:
        """Send one request and return the unwrapped payload.

        ``raw_text`` returns the body as text (used by endpoints that answer
        with a bare string); ``full_body`` returns the whole document
        instead of the envelope's ``data`` (the login token sits beside it).
        Raises ``ApiUnavailable`` when no response arrives and ``ApiError``
        for non-2xx answers or ``success: false``.
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.http.request(
                method,
                path,
                params=params or None,
                json=json,
                files=files,
                headers=self._headers(auth),
            )
        except httpx.TimeoutException as exc:
            logger.warning("Backend request timed out", method=method, path=path)
            raise ApiUnavailable(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Backend unreachable", method=method, path=path, error=str(exc))
            raise ApiUnavailable(f"Request to {path} failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise ApiUnauthorized(extract_error_detail(response), status_code=response.status_code)

        if response.is_error:
            detail = extract_error_detail(response)
            logger.warning(
                "Backend returned an error",
                method=method,
                path=path,
                status_code=response.status_code,
                detail=detail,
            )
            raise ApiError(detail, status_code=response.status_code, payload=_safe_json(response))

        if raw_text:
            return response.text

        if not response.content:
            return None

        body = _safe_json(response)
        if body is None:
            raise ApiError(f"Expected JSON from {path}", status_code=response.status_code)

        success, message, data = unwrap_envelope(body)
        if not success:
            raise ApiError(message or "Request was not successful", status_code=response.status_code, payload=body)
        return body if full_body else data

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
