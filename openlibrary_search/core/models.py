from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ErrorKind(str, Enum):
    INVALID_QUERY = "invalid_query"
    REQUEST_FAILED = "request_failed"
    INVALID_RESPONSE = "invalid_response"
    SERIALIZATION_FAILED = "serialization_failed"
    NO_RESULTS_FOUND = "no_results_found"


@dataclass(frozen=True)
class SearchQuery:
    title: Optional[str] = None
    author: Optional[str] = None
    limit: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ValueError(f"limit must be an integer >= 1 (got {self.limit!r})")

    @property
    def has_terms(self) -> bool:
        return self.title is not None or self.author is not None

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {"limit": str(self.limit)}
        if self.title is not None:
            params["title"] = self.title
        if self.author is not None:
            params["author"] = self.author
        return params


@dataclass(frozen=True)
class BookRecord:
    key: str
    title: str
    first_publish_year: Optional[int] = None
    isbn: Optional[Tuple[str, ...]] = None
    author_names: Optional[Tuple[str, ...]] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class CandidatePair:
    title: str  # "" = omitted
    author: str  # "" = omitted


@dataclass(frozen=True)
class SearchResponse:
    docs: Tuple[BookRecord, ...]
    num_found: Optional[int] = None


@dataclass(frozen=True)
class Success:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: ErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


SearchOutcome = Union[Success, Failure]
