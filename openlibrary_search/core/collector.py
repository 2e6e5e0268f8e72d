from __future__ import annotations

import threading
from typing import Dict, List, Optional

from openlibrary_search.core.models import BookRecord, ErrorKind, Failure, SearchOutcome, Success


class OutcomeCollector:
    """
    Thread-safe join point for concurrently running sub-queries.

    Rule: All mutation is done under one lock.
    Each sub-query owns one slot (its candidate-pair index). record(...) fills
    the slot, remembers the most recent failure and decrements the outstanding
    count. merged() is only valid once done() is True.
    """

    def __init__(self, expected: int) -> None:
        self._lock = threading.Lock()
        self._expected = int(expected)
        self._outstanding = int(expected)
        self._records: Dict[int, List[BookRecord]] = {}
        self._failures = 0
        self._last_failure: Optional[Failure] = None

    def record(self, index: int, outcome: SearchOutcome) -> int:
        """Store one completion and return how many are still outstanding."""
        with self._lock:
            if index in self._records or not 0 <= index < self._expected:
                raise RuntimeError(f"unexpected completion for slot {index}")
            if isinstance(outcome, Success):
                self._records[index] = list(outcome.value or ())
            else:
                self._records[index] = []
                self._failures += 1
                self._last_failure = outcome
            self._outstanding -= 1
            return self._outstanding

    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    def done(self) -> bool:
        with self._lock:
            return self._outstanding == 0

    def failures(self) -> int:
        with self._lock:
            return self._failures

    def merged(self, *, dedupe: bool = False) -> SearchOutcome:
        with self._lock:
            if self._outstanding:
                raise RuntimeError(f"merge requested with {self._outstanding} sub-queries outstanding")
            out: List[BookRecord] = []
            seen = set()
            for idx in range(self._expected):
                for rec in self._records.get(idx, []):
                    if dedupe:
                        if rec.key in seen:
                            continue
                        seen.add(rec.key)
                    out.append(rec)
            if out:
                return Success(tuple(out))
            if self._last_failure is not None:
                return self._last_failure
            return Failure(ErrorKind.NO_RESULTS_FOUND, "no sub-query returned any records")
