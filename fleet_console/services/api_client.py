import logging
import time
from typing import Any, AsyncIterator, Dict, Mapping, Optional

import httpx
from fastapi import Request

from fleet_console.config import settings
from fleet_console.metrics import TOKEN_REFRESHES, UPSTREAM_ERRORS, UPSTREAM_LATENCY

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh-token"


class ApiError(Exception):
    """Failure talking to the fleet backend, normalized to message/status/data."""

    def __init__(self, message: str, status: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class SessionExpired(ApiError):
    pass


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop empty values so they never reach the backend as blank filters."""
    out = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        out[key] = str(value)
    return out


def _error_message(response: Optional[httpx.Response], exc: Optional[Exception] = None) -> str:
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    if exc is not None and str(exc):
        return str(exc)
    return "An error occurred"


def _error_data(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class ApiClient:
    def __init__(self, http: httpx.AsyncClient, token: Optional[str] = None):
        self.http = http
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _send(self, method: str, path: str, params=None, json=None) -> httpx.Response:
        start = time.perf_counter()
        try:
            return await self.http.request(method, path, params=clean_params(params), json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            UPSTREAM_ERRORS.labels(status="network").inc()
            logger.error("Upstream %s %s failed: %s", method, path, exc)
            raise ApiError(_error_message(None, exc)) from exc
        finally:
            UPSTREAM_LATENCY.labels(method=method).observe(time.perf_counter() - start)

    async def _refresh_token(self) -> None:
        try:
            response = await self.http.post(REFRESH_PATH, json={}, headers=self._headers())
            response.raise_for_status()
            self.token = response.json()["data"]["accessToken"]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            TOKEN_REFRESHES.labels(result="failed").inc()
            logger.info("Token refresh failed: %s", exc)
            raise SessionExpired("Session expired, please log in again", status=401) from exc
        TOKEN_REFRESHES.labels(result="success").inc()

    async def request(self, method: str, path: str, params=None, json=None) -> httpx.Response:
        response = await self._send(method, path, params=params, json=json)
        if response.status_code == 401:
            # one refresh, one retry
            await self._refresh_token()
            response = await self._send(method, path, params=params, json=json)
            if response.status_code == 401:
                raise SessionExpired(_error_message(response), status=401, data=_error_data(response))
        if response.is_error:
            UPSTREAM_ERRORS.labels(status=str(response.status_code)).inc()
            message = _error_message(response)
            logger.error("Upstream %s %s returned %s: %s", method, path, response.status_code, message)
            raise ApiError(message, status=response.status_code, data=_error_data(response))
        return response

    async def get(self, path: str, params=None) -> Any:
        response = await self.request("GET", path, params=params)
        return response.json()

    async def get_bytes(self, path: str, params=None) -> bytes:
        response = await self.request("GET", path, params=params)
        return response.content

    async def post(self, path: str, json=None) -> Any:
        response = await self.request("POST", path, json=json)
        return response.json() if response.content else None

    async def put(self, path: str, json=None) -> Any:
        response = await self.request("PUT", path, json=json)
        return response.json() if response.content else None

    async def patch(self, path: str, json=None) -> Any:
        response = await self.request("PATCH", path, json=json)
        return response.json() if response.content else None

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)


def bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


async def get_api_client(request: Request) -> AsyncIterator[ApiClient]:  # to be used as dependency
    async with httpx.AsyncClient(
        base_url=settings.UPSTREAM_API_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        cookies=request.cookies,
    ) as http:
        yield ApiClient(http, token=bearer_token(request))
