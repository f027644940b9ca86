# src/tenantlic/http/client.py
from __future__ import annotations
import json as _json
import logging
from typing import Any, Dict, Iterable, Optional
import requests

from tenantlic.http.errors import (
    HttpError, UnauthorizedError, ForbiddenError, NotFoundError,
    ThrottleError, ServerError, NetworkError
)
from tenantlic.http.throttle import RETRY_STATUSES, compute_sleep_seconds, sleep_backoff

log = logging.getLogger(__name__)


class HttpClient:
    """
    Synchronous JSON client with bounded retries.
    Non-2xx responses are mapped to the typed errors in tenantlic.http.errors.
    """
    def __init__(self, base_url: str = "", timeout: float = 30.0, max_retries: int = 4,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or requests.Session()

    def _full_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        if self.base_url:
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None
    ) -> requests.Response:
        full = self._full_url(url)
        attempt = 0

        while True:
            try:
                log.debug("HTTP %s %s", method.upper(), full)
                resp = self._session.request(
                    method=method.upper(),
                    url=full,
                    headers=headers or {},
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as ex:
                if attempt >= self.max_retries:
                    raise NetworkError(-1, full, str(ex)) from ex
                log.debug("HTTP %s %s failed (%s), retry %d", method.upper(), full, ex, attempt)
                sleep_backoff(compute_sleep_seconds(attempt, None))
                attempt += 1
                continue

            if resp.status_code < 400:
                log.debug("HTTP %s %s", resp.status_code, full)
                return resp

            # Retryable?
            if resp.status_code in RETRY_STATUSES and attempt < self.max_retries:
                log.debug("HTTP %s %s (retry %d)", resp.status_code, full, attempt)
                sleep_backoff(compute_sleep_seconds(attempt, resp.headers.get("Retry-After")))
                attempt += 1
                continue

            # Map to typed errors
            body_snip = _safe_snip(resp)
            detail = _graph_error_message(resp.text or "")
            if resp.status_code == 401:
                raise UnauthorizedError(401, full, detail or "Unauthorized", body_snip)
            if resp.status_code == 403:
                raise ForbiddenError(403, full, detail or "Forbidden", body_snip)
            if resp.status_code == 404:
                raise NotFoundError(404, full, detail or "Not Found", body_snip)
            if resp.status_code == 429:
                raise ThrottleError(429, full, detail or "Too Many Requests", body_snip)
            if 500 <= resp.status_code <= 599:
                raise ServerError(resp.status_code, full, detail or "Server error", body_snip)
            raise HttpError(resp.status_code, full, detail or "HTTP error", body_snip)

    # ---------- Convenience helpers ----------
    def get_json(self, url: str, **kwargs) -> dict:
        r = self.request("GET", url, **kwargs)
        return _json.loads(r.text or "{}")

    def post_json(self, url: str, *, headers=None, json=None) -> dict:
        r = self.request("POST", url, headers=headers, json=json)
        return _json.loads(r.text or "{}")

    def patch_json(self, url: str, *, headers=None, json=None) -> dict:
        # PATCH /users/{id} answers 204 with no body
        r = self.request("PATCH", url, headers=headers, json=json)
        return _json.loads(r.text or "{}")

    def get_paged(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Iterable[dict]:
        """Iterate Graph-style pages. Yields each page dict with a 'value' list."""
        next_url = url
        while next_url:
            data = self.get_json(next_url, headers=headers, params=params)
            yield data
            next_url = data.get("@odata.nextLink")
            params = None  # nextLink already carries the query


def _safe_snip(resp: requests.Response, max_len: int = 400) -> str:
    txt = resp.text or ""
    return txt[:max_len]


def _graph_error_message(body: str) -> str:
    """Pull error.message out of a Graph error body, if there is one."""
    try:
        data = _json.loads(body)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    err = data.get("error") or {}
    if isinstance(err, dict):
        return str(err.get("message") or "")
    return ""
