# openlibrary_search/search.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

from openlibrary_search.config import ClientConfig
from openlibrary_search.core.collector import OutcomeCollector
from openlibrary_search.core.expand import generate_candidate_pairs
from openlibrary_search.core.models import (
    ErrorKind,
    Failure,
    SearchOutcome,
    SearchQuery,
    Success,
)
from openlibrary_search.integrations.http_client import OpenLibrarySearchPort
from openlibrary_search.profiler import RequestProfiler

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


class SearchClient:
    def __init__(self, port, *, max_workers: Optional[int] = None) -> None:
        """
        port: any object with search(SearchQuery) -> SearchOutcome.
        max_workers: pool size for search_by_free_text; None or 0 = one per pair.
        """
        if max_workers is not None and max_workers < 0:
            raise ValueError(f"max_workers must be 0 or more (got {max_workers!r})")
        self.port = port
        self.max_workers = max_workers or None

    @classmethod
    def from_config(cls, config: ClientConfig, *, profiler: Optional[RequestProfiler] = None) -> "SearchClient":
        port = OpenLibrarySearchPort(
            config.base_url,
            timeout_s=config.timeout_s,
            user_agent=config.user_agent,
            profiler=profiler,
        )
        return cls(port, max_workers=config.max_workers)

    def find_closest_match(self, title: Optional[str] = None, author: Optional[str] = None) -> SearchOutcome:
        """Single request with limit=1. Success carries one BookRecord. "" counts as absent."""
        query = SearchQuery(title=title or None, author=author or None, limit=1)
        if not query.has_terms:
            return Failure(ErrorKind.INVALID_QUERY, "title or author is required")

        outcome = self.port.search(query)
        if not outcome.ok:
            return outcome
        if not outcome.value:
            # zero docs is reported the way a body without a usable book is
            logger.info("closest match: no docs | title=%r | author=%r", title, author)
            return Failure(ErrorKind.SERIALIZATION_FAILED, "no matching book")
        return Success(outcome.value[0])

    def find_matches(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> SearchOutcome:
        """Single request. Success carries up to `limit` records, possibly none. "" counts as absent."""
        query = SearchQuery(title=title or None, author=author or None, limit=limit)
        if not query.has_terms:
            return Failure(ErrorKind.INVALID_QUERY, "title or author is required")
        return self._fetch(query)

    def _fetch(self, query: SearchQuery) -> SearchOutcome:
        outcome = self.port.search(query)
        if not outcome.ok:
            return outcome
        return Success(tuple(outcome.value[: query.limit]))

    def search_by_free_text(self, search_string: str, limit: int = DEFAULT_LIMIT, *, dedupe: bool = False) -> SearchOutcome:
        """
        Run one search per candidate pair concurrently and merge.

        Every pair is sent, including a degenerate ("", "") pair from
        whitespace-only input, which goes out with only `limit`.

        Records from successful sub-queries are concatenated in candidate-pair
        order; duplicates are kept unless dedupe=True (first occurrence of each
        key wins). Partial failures are absorbed when any records came back.
        With no records, the last failure to *complete* is returned, so on total
        failure the reported kind depends on timing. If nothing failed and
        nothing matched, the result is NO_RESULTS_FOUND.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be an integer >= 1 (got {limit!r})")

        pairs = generate_candidate_pairs(search_string)
        if not pairs:
            logger.debug("free text: empty search string, no query issued")
            return Success(())

        collector = OutcomeCollector(len(pairs))
        workers = self.max_workers or len(pairs)
        logger.debug("free text: dispatch | query=%r | pairs=%s | workers=%s", search_string, len(pairs), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ol-search") as ex:
            future_map = {
                ex.submit(self._fetch, SearchQuery(title=pair.title or None, author=pair.author or None, limit=limit)): i
                for i, pair in enumerate(pairs)
            }
            for fut in as_completed(future_map):
                idx = future_map[fut]
                try:
                    outcome = fut.result()
                except Exception as e:
                    # a port that raises instead of returning Failure
                    logger.exception("free text: sub-query %s raised", idx)
                    outcome = Failure(ErrorKind.REQUEST_FAILED, repr(e))
                if not outcome.ok:
                    logger.debug("free text: sub-query failed | pair=%s | error=%s", pairs[idx], outcome.error.value)
                collector.record(idx, outcome)

        result = collector.merged(dedupe=dedupe)
        if result.ok:
            logger.info(
                "free text: query=%r | pairs=%s | failed=%s | records=%s",
                search_string,
                len(pairs),
                collector.failures(),
                len(result.value),
            )
        else:
            logger.info(
                "free text: query=%r | pairs=%s | failed=%s | error=%s",
                search_string,
                len(pairs),
                collector.failures(),
                result.error.value,
            )
        return result


def _default_client() -> SearchClient:
    config = ClientConfig.from_env()
    config.validate()
    return SearchClient.from_config(config)


def find_closest_match(title: Optional[str] = None, author: Optional[str] = None) -> SearchOutcome:
    return _default_client().find_closest_match(title, author)


def find_matches(title: Optional[str] = None, author: Optional[str] = None, limit: int = DEFAULT_LIMIT) -> SearchOutcome:
    return _default_client().find_matches(title, author, limit)


def search_by_free_text(search_string: str, limit: int = DEFAULT_LIMIT, *, dedupe: bool = False) -> SearchOutcome:
    return _default_client().search_by_free_text(search_string, limit, dedupe=dedupe)
