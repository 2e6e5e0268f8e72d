from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from typing import Iterable

from openlibrary_search.core.models import BookRecord
from openlibrary_search.io.utils import atomic_write_text

logger = logging.getLogger(__name__)

RECORD_CSV_FIELDS = [
    "query",
    "key",
    "title",
    "first_publish_year",
    "author_names",
    "isbn",
    "url",
]

LIST_SEP = "|"


def record_to_dict(rec: BookRecord) -> dict:
    d = asdict(rec)
    for field in ("isbn", "author_names"):
        if d[field] is not None:
            d[field] = list(d[field])
    return d


def _csv_row(query: str, rec: BookRecord) -> dict:
    return {
        "query": query,
        "key": rec.key,
        "title": rec.title,
        "first_publish_year": "" if rec.first_publish_year is None else rec.first_publish_year,
        "author_names": LIST_SEP.join(rec.author_names or ()),
        "isbn": LIST_SEP.join(rec.isbn or ()),
        "url": rec.url or "",
    }


def write_records_csv(rows: Iterable[tuple[str, BookRecord]], out_path: str) -> None:
    """rows: (query, record) pairs."""
    rows = list(rows)

    def _write(path: str) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=RECORD_CSV_FIELDS)
            w.writeheader()
            for query, rec in rows:
                w.writerow(_csv_row(query, rec))

    atomic_write_text(_write, out_path)
    logger.info("Wrote CSV: %s rows=%s", out_path, len(rows))


def write_records_jsonl(rows: Iterable[tuple[str, BookRecord]], out_path: str) -> None:
    rows = list(rows)

    def _write(path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for query, rec in rows:
                f.write(json.dumps({"query": query, **record_to_dict(rec)}, ensure_ascii=False) + "\n")

    atomic_write_text(_write, out_path)
    logger.info("Wrote JSONL: %s rows=%s", out_path, len(rows))


def write_records(rows: Iterable[tuple[str, BookRecord]], out_path: str) -> None:
    if out_path.lower().endswith(".jsonl"):
        write_records_jsonl(rows, out_path)
    elif out_path.lower().endswith(".csv"):
        write_records_csv(rows, out_path)
    else:
        raise SystemExit(f"--out must end in .csv or .jsonl (got {out_path})")
