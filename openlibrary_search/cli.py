# openlibrary_search/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Tuple

from rich.logging import RichHandler

from openlibrary_search.config import ClientConfig, load_dotenv
from openlibrary_search.core.batches import load_queries
from openlibrary_search.core.models import BookRecord
from openlibrary_search.io.export import record_to_dict, write_records
from openlibrary_search.profiler import RequestProfiler
from openlibrary_search.search import DEFAULT_LIMIT, SearchClient

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _setup_logging(level_name: str) -> None:
    level = LOG_LEVELS.get(level_name.lower(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="openlibrary-search",
        description="Search the Open Library catalog by free text, or by title/author",
    )
    ap.add_argument("query", nargs="*", help="Free-text query words (title words followed by author)")
    ap.add_argument("--queries-file", default=None, help="YAML file with a 'queries' list (batch mode)")
    ap.add_argument(
        "--mode",
        choices=("free", "closest", "matches"),
        default="free",
        help="free: expand free text into title/author guesses; closest/matches: use --title/--author",
    )
    ap.add_argument("--title", default=None, help="Title (closest/matches modes)")
    ap.add_argument("--author", default=None, help="Author (closest/matches modes)")
    ap.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Max records per request")
    ap.add_argument("--dedupe", action="store_true", help="Drop repeated work keys across candidate pairs")

    ap.add_argument("--base-url", default=None, help="Override OPENLIBRARY_BASE_URL")
    ap.add_argument("--timeout", type=float, default=None, help="Override OPENLIBRARY_TIMEOUT (seconds)")
    ap.add_argument("--max-workers", type=int, default=None, help="Override OPENLIBRARY_MAX_WORKERS (0 = one per pair)")

    ap.add_argument("--out", default=None, help="Write records to .csv or .jsonl instead of stdout")
    ap.add_argument("--profile-out", default=None, help="Write per-endpoint request stats JSON")
    ap.add_argument("--log-level", default="info", help="Log level: debug, info, warning, error")
    return ap


def _load_config(args: argparse.Namespace) -> ClientConfig:
    config = ClientConfig.from_env()
    if args.base_url:
        config.base_url = args.base_url
    if args.timeout is not None:
        config.timeout_s = args.timeout
    if args.max_workers is not None:
        config.max_workers = args.max_workers
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    logger = logging.getLogger(__name__)
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.limit < 1:
        ap.error("--limit must be >= 1")
    if args.mode == "free" and not (args.query or args.queries_file):
        ap.error("free mode needs QUERY words or --queries-file")
    if args.mode != "free" and args.title is None and args.author is None:
        ap.error(f"{args.mode} mode needs --title and/or --author")

    _setup_logging(args.log_level)

    used = load_dotenv(".env")
    if used:
        logger.info("loaded .env: %s", used)

    config = _load_config(args)
    profiler = RequestProfiler()
    client = SearchClient.from_config(config, profiler=profiler)

    rows: List[Tuple[str, BookRecord]] = []
    failed = 0

    if args.mode == "free":
        queries = load_queries(args.queries_file) if args.queries_file else []
        if args.query:
            queries.append(" ".join(args.query))
        for q in queries:
            outcome = client.search_by_free_text(q, args.limit, dedupe=args.dedupe)
            if not outcome.ok:
                failed += 1
                logger.warning("no results | query=%r | error=%s | %s", q, outcome.error.value, outcome.detail)
                continue
            rows.extend((q, rec) for rec in outcome.value)
    else:
        label = f"title={args.title or ''} author={args.author or ''}".strip()
        if args.mode == "closest":
            outcome = client.find_closest_match(args.title, args.author)
            found = (outcome.value,) if outcome.ok else ()
        else:
            outcome = client.find_matches(args.title, args.author, args.limit)
            found = outcome.value if outcome.ok else ()
        if outcome.ok:
            rows.extend((label, rec) for rec in found)
        else:
            failed += 1
            logger.warning("no results | %s | error=%s | %s", label, outcome.error.value, outcome.detail)

    if args.out:
        write_records(rows, args.out)
    else:
        for query, rec in rows:
            sys.stdout.write(json.dumps({"query": query, **record_to_dict(rec)}, ensure_ascii=False) + "\n")

    if args.profile_out:
        profiler.write(args.profile_out)
        logger.info("Wrote request profile: %s", args.profile_out)

    logger.info("Done: records=%s failed_queries=%s", len(rows), failed)
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
