# openlibrary_search/core/parse.py
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from openlibrary_search.core.models import BookRecord, SearchResponse


class DocParseError(ValueError):
    pass


def _require_str(doc: Dict[str, Any], field: str) -> str:
    val = doc.get(field)
    if not isinstance(val, str):
        raise DocParseError(f"doc field {field!r} must be a string (got {type(val).__name__})")
    return val


def _optional_str(doc: Dict[str, Any], field: str) -> Optional[str]:
    val = doc.get(field)
    if val is None:
        return None
    if not isinstance(val, str):
        raise DocParseError(f"doc field {field!r} must be a string or absent")
    return val


def _optional_int(doc: Dict[str, Any], field: str) -> Optional[int]:
    val = doc.get(field)
    if val is None:
        return None
    # bool is an int subclass; JSON true/false is not a year
    if isinstance(val, bool) or not isinstance(val, int):
        raise DocParseError(f"doc field {field!r} must be an integer or absent")
    return val


def _optional_str_list(doc: Dict[str, Any], field: str) -> Optional[Tuple[str, ...]]:
    val = doc.get(field)
    if val is None:
        return None
    if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
        raise DocParseError(f"doc field {field!r} must be a list of strings or absent")
    return tuple(val)


def parse_doc(doc: Any) -> BookRecord:
    """
    Decode one entry of a search.json `docs` array.

    Only key, title, first_publish_year, isbn, author_name and url are read;
    everything else in the doc is ignored. Missing optional fields become None.
    """
    if not isinstance(doc, dict):
        raise DocParseError("doc must be a JSON object")

    key = _require_str(doc, "key")
    if not key:
        raise DocParseError("doc field 'key' is empty")

    return BookRecord(
        key=key,
        title=_require_str(doc, "title"),
        first_publish_year=_optional_int(doc, "first_publish_year"),
        isbn=_optional_str_list(doc, "isbn"),
        author_names=_optional_str_list(doc, "author_name"),
        url=_optional_str(doc, "url"),
    )


def parse_search_response(payload: Any) -> SearchResponse:
    if not isinstance(payload, dict):
        raise DocParseError("search response must be a JSON object")
    docs = payload.get("docs")
    if not isinstance(docs, list):
        raise DocParseError("search response is missing a 'docs' array")

    num_found = payload.get("numFound", payload.get("num_found"))
    if isinstance(num_found, bool) or not isinstance(num_found, int):
        num_found = None

    return SearchResponse(docs=tuple(parse_doc(d) for d in docs), num_found=num_found)
