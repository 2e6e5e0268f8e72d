from __future__ import annotations

import json
import logging
import threading
import time
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

from openlibrary_search.core.models import ErrorKind, Failure, SearchOutcome, SearchQuery, Success
from openlibrary_search.core.parse import DocParseError, parse_search_response
from openlibrary_search.profiler import RequestProfiler

OPENLIBRARY_BASE_URL = "https://openlibrary.org"
SEARCH_PATH = "/search.json"
DEFAULT_USER_AGENT = "openlibrary-search/0.1"
logger = logging.getLogger(__name__)


def _safe_body_preview(resp: requests.Response, limit: int = 800) -> str:
    try:
        if "application/json" in (resp.headers.get("Content-Type") or "").lower():
            try:
                payload = resp.json()
                text = json.dumps(payload, ensure_ascii=False, indent=2)
            except ValueError:
                text = resp.text or ""
        else:
            text = resp.text or ""
    except Exception:
        return "<unavailable>"
    text = text.replace("\r", " ").strip()
    if len(text) > limit:
        return text[:limit].rstrip() + "..."
    return text


class SearchClientError(RuntimeError):
    pass


def build_search_url(base_url: str) -> str:
    parsed = urlparse((base_url or "").strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise SearchClientError(f"Invalid Open Library base URL: {base_url!r}")
    return base_url.strip().rstrip("/") + SEARCH_PATH


def make_openlibrary_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    s = requests.Session()
    s.headers.update({
        "Accept": "application/json",
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
    })
    return s


class OpenLibrarySearchPort:
    """
    Remote Search Port backed by requests.

    One GET per search(...) call, no retries. Every outcome is returned as a
    value; only a malformed base URL raises (at construction time).
    Sessions are per thread so the port can be shared by a worker pool.
    """

    def __init__(
        self,
        base_url: str = OPENLIBRARY_BASE_URL,
        *,
        timeout_s: float = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        profiler: Optional[RequestProfiler] = None,
    ) -> None:
        self.url = build_search_url(base_url)
        self.timeout_s = timeout_s
        self.session_factory = session_factory or (lambda: make_openlibrary_session(user_agent))
        self.profiler = profiler
        self._local = threading.local()

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self.session_factory()
            self._local.session = sess
        return sess

    def search(self, query: SearchQuery) -> SearchOutcome:
        started = time.monotonic()
        outcome = self._search(query)
        if self.profiler is not None:
            error = "" if outcome.ok else outcome.error.value
            self.profiler.record(SEARCH_PATH, time.monotonic() - started, outcome.ok, error)
        return outcome

    def _search(self, query: SearchQuery) -> SearchOutcome:
        params = query.to_params()
        logger.debug("request | method=GET | url=%s | params=%s", self.url, params)
        try:
            r = self._session().get(self.url, params=params, timeout=self.timeout_s)
        except requests.RequestException as e:
            logger.error("request failed | url=%s | params=%s | err=%r", self.url, params, e)
            return Failure(ErrorKind.REQUEST_FAILED, f"Request failed: {e}")

        if r.status_code >= 400:
            logger.error(
                "http error | status=%s | url=%s | params=%s | body=%s",
                r.status_code,
                self.url,
                params,
                _safe_body_preview(r),
            )
            return Failure(ErrorKind.REQUEST_FAILED, f"HTTP {r.status_code}")

        if not r.content:
            logger.warning("empty response body | url=%s | params=%s", self.url, params)
            return Failure(ErrorKind.INVALID_RESPONSE, "empty response body")

        try:
            response = parse_search_response(r.json())
        except (ValueError, DocParseError) as e:
            logger.error(
                "serialization failed | url=%s | params=%s | err=%s | body=%s",
                self.url,
                params,
                e,
                _safe_body_preview(r, limit=300),
            )
            return Failure(ErrorKind.SERIALIZATION_FAILED, str(e))

        logger.debug(
            "response | url=%s | params=%s | docs=%s | num_found=%s",
            self.url,
            params,
            len(response.docs),
            response.num_found,
        )
        return Success(response.docs)
