from __future__ import annotations
import json as _json
import threading
import time
from typing import Any, Dict, Iterable, Optional
import requests

from xtenant.http.errors import (
    HttpError, BadRequestError, UnauthorizedError, ForbiddenError, NotFoundError,
    ThrottleError, ServerError, NetworkError, RequestTimeoutError
)
from xtenant.http.throttle import (
    ConcurrencyGate, RETRY_STATUSES, compute_sleep_seconds, sleep_backoff
)


class HttpClient:
    def __init__(self, base_url: str = "", timeout: float = 30.0, max_retries: int = 4, logger=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = requests.Session()
        self._log = logger  # optional, expects .debug()

    def _full_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        if self.base_url:
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    def _log_debug(self, msg: str) -> None:
        if self._log:
            self._log.debug(msg)

    def _request_timeout(self, full: str, deadline: Optional[float]) -> float:
        if deadline is None:
            return self.timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise RequestTimeoutError(-1, full, "Deadline exceeded before request")
        return min(self.timeout, remaining)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        deadline: Optional[float] = None
    ) -> requests.Response:
        """
        Send one request with retry on transient statuses.
        `deadline` is a time.monotonic() value; no attempt starts after it.
        """
        full = self._full_url(url)
        attempt = 0

        while True:
            timeout = self._request_timeout(full, deadline)
            try:
                with ConcurrencyGate():
                    self._log_debug(f"HTTP {method.upper()} {full}")
                    resp = self._session.request(
                        method=method.upper(),
                        url=full,
                        headers=headers or {},
                        params=params,
                        json=json,
                        timeout=timeout,
                    )
            except requests.exceptions.Timeout as ex:
                if attempt >= self.max_retries or _expired(deadline):
                    raise RequestTimeoutError(-1, full, str(ex))
                sleep_backoff(compute_sleep_seconds(attempt, None), deadline)
                attempt += 1
                continue
            except requests.exceptions.RequestException as ex:
                if attempt >= self.max_retries:
                    raise NetworkError(-1, full, str(ex))
                sleep_backoff(compute_sleep_seconds(attempt, None), deadline)
                attempt += 1
                continue

            if resp.status_code < 400:
                self._log_debug(f"HTTP {resp.status_code} {full}")
                return resp

            # Retryable?
            if resp.status_code in RETRY_STATUSES and attempt < self.max_retries:
                self._log_debug(f"HTTP {resp.status_code} {full} (retry {attempt})")
                sleep_backoff(compute_sleep_seconds(attempt, resp.headers.get("Retry-After")), deadline)
                attempt += 1
                continue

            # Map to typed errors
            body_snip = _safe_snip(resp)
            if resp.status_code == 400:
                raise BadRequestError(400, full, "Bad Request", body_snip)
            if resp.status_code == 401:
                raise UnauthorizedError(401, full, "Unauthorized", body_snip)
            if resp.status_code == 403:
                raise ForbiddenError(403, full, "Forbidden", body_snip)
            if resp.status_code == 404:
                raise NotFoundError(404, full, "Not Found", body_snip)
            if resp.status_code == 429:
                raise ThrottleError(429, full, "Too Many Requests", body_snip)
            if 500 <= resp.status_code <= 599:
                raise ServerError(resp.status_code, full, "Server error", body_snip)
            raise HttpError(resp.status_code, full, "HTTP error", body_snip)

    # ---------- Convenience helpers ----------
    def get_json(self, url: str, **kwargs) -> dict:
        r = self.request("GET", url, **kwargs)
        return _json.loads(r.text or "{}")

    def get_paged(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None
    ) -> Iterable[dict]:
        """
        Iterate Graph-style pages. Yields each page dict with a 'value' list.
        Stops quietly before the next page once `cancel` is set.
        """
        next_url = url
        while next_url:
            if cancel is not None and cancel.is_set():
                self._log_debug(f"HTTP paging cancelled before {next_url}")
                return
            data = self.get_json(next_url, headers=headers, params=params, deadline=deadline)
            yield data
            next_url = data.get("@odata.nextLink")
            # nextLink already carries the query string
            params = None


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def _safe_snip(resp: requests.Response, max_len: int = 400) -> str:
    try:
        txt = resp.text or ""
        return txt[:max_len]
    except (UnicodeDecodeError, AttributeError):
        return ""
