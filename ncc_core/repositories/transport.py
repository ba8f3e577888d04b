"""HTTP transport shared by every repository adapter.

Transport failures are retried a bounded number of times; HTTP status codes
are never retried and map straight to typed errors.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from requests.auth import HTTPBasicAuth
from requests.exceptions import RequestException, Timeout

from ..config import NccConfig
from ..errors import AuthenticationException, NetworkException, ResponseParsingException
from ..security import redact_headers, redact_url
from .cache import ResponseCache

logger = logging.getLogger(__name__)


def _error_body_snippet(response: requests.Response, max_chars: int = 200) -> str:
    body = response.text or ""
    compact = " ".join(body.split())
    return compact[:max_chars]


class RepositoryTransport:
    def __init__(self, config: NccConfig | None = None, cache: ResponseCache | None = None) -> None:
        self.config = config or NccConfig()
        self.cache = cache if cache is not None else ResponseCache()
        self.max_attempts = max(int(self.config.max_attempts), 1)
        self.timeout = max(float(self.config.timeout_seconds), 1.0)
        self.backoff = max(float(self.config.backoff_seconds), 0.0)

    @property
    def user_agent(self) -> str:
        return self.config.user_agent

    def get_json(
        self,
        url: str,
        *,
        headers: dict[str, str],
        auth: HTTPBasicAuth | None = None,
        label: str,
    ) -> Any:
        found, cached = self.cache.lookup(url)
        if found:
            logger.debug("http cache hit url=%s", redact_url(url))
            return cached

        response = self._request("GET", url, headers=headers, auth=auth, label=label)
        self._raise_for_status(response, label)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseParsingException(f"invalid JSON response from {label}: {exc}") from exc
        self.cache.set(url, payload)
        return payload

    def resolve_redirect(
        self,
        url: str,
        *,
        headers: dict[str, str],
        auth: HTTPBasicAuth | None = None,
        label: str,
    ) -> str:
        """Follow redirects from ``url`` and return the effective location."""
        found, cached = self.cache.lookup(url)
        if found:
            return str(cached)

        response = self._request("HEAD", url, headers=headers, auth=auth, label=label)
        self._raise_for_status(response, label)
        effective_url = str(response.url or url)
        self.cache.set(url, effective_url)
        return effective_url

    def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        auth: HTTPBasicAuth | None,
        label: str,
    ) -> requests.Response:
        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            logger.debug(
                "http request attempt=%s/%s method=%s url=%s headers=%s",
                attempt,
                self.max_attempts,
                method,
                redact_url(url),
                redact_headers(headers),
            )
            try:
                if method == "HEAD":
                    return requests.head(
                        url,
                        headers=headers,
                        auth=auth,
                        timeout=self.timeout,
                        allow_redirects=True,
                    )
                return requests.get(url, headers=headers, auth=auth, timeout=self.timeout)
            except Timeout as exc:
                last_error = exc
                logger.warning(
                    "HTTP request failed for %s: timed out after %.1fs, retrying (%s/%s)",
                    label,
                    self.timeout,
                    attempt,
                    self.max_attempts,
                )
            except RequestException as exc:
                last_error = exc
                logger.warning(
                    "HTTP request failed for %s: %s, retrying (%s/%s)",
                    label,
                    exc,
                    attempt,
                    self.max_attempts,
                )
            if attempt < self.max_attempts and self.backoff:
                time.sleep(min(self.backoff * attempt, 2.0))
        raise NetworkException(
            f"HTTP request failed for {label} after {self.max_attempts} attempts"
        ) from last_error

    @staticmethod
    def _raise_for_status(response: requests.Response, label: str) -> None:
        status = response.status_code
        if status == 200:
            return
        if status in {401, 403}:
            raise AuthenticationException(f"authentication failed for {label} (status={status})")
        if status == 404:
            raise NetworkException(f"resource not found for {label}")
        raise NetworkException(
            f"server responded with HTTP code {status} for {label}: {_error_body_snippet(response)}"
        )
