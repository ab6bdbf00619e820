"""
Shared HTTP client for outbound weather API calls.

A ``requests.Session`` that retries transient failures (rate limiting and
502/503/504) with exponential backoff and applies a default timeout to every
request. Only the outbound weather API goes through here; the correlation
engine itself never retries.

Usage::

    from pest_correlation.services.http import session

    resp = session.get(OPENWEATHERMAP_CURRENT, params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

#: Scheduled fetches run every few hours, so a short retry budget is enough.
DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=1,  # 0s, 1s, 2s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET"],
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 15  # seconds

USER_AGENT = "pest-correlation/0.1"

# Query parameters that carry credentials
SECRET_PARAMS = frozenset({"appid", "api_key", "apikey"})


class TimeoutHTTPAdapter(HTTPAdapter):
    """HTTPAdapter that fills in a default timeout when the caller gives none."""

    def __init__(self, *args: Any, timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> None:
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(  # type: ignore[override]
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the retrying, timeout-aware adapter.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = TimeoutHTTPAdapter(max_retries=retry or DEFAULT_RETRY, timeout=timeout)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT
    return s


def redact_url(url: str) -> str:
    """Mask credential query parameters so URLs can be logged."""
    parts = urlsplit(url)
    query = [
        (key, "***" if key.lower() in SECRET_PARAMS else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


#: Module-level session; import and use directly.
session: requests.Session = create_session()
