from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import yaml

logger = logging.getLogger(__name__)


def _read_queries_file(path: Path) -> Dict[str, List[str]]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except FileNotFoundError as e:
        raise SystemExit(f"Queries file not found: {path}") from e
    except (OSError, yaml.YAMLError) as e:
        raise SystemExit(f"Failed to read queries file: {path} ({e})") from e
    if not isinstance(data, dict):
        raise SystemExit(f"Queries file must be a mapping with a 'queries' list: {path}")
    logger.info("Loaded queries file: %s", path)
    out: Dict[str, List[str]] = {}
    for key, value in data.items():
        if isinstance(value, list):
            out[key] = [str(v) for v in value if v is not None and str(v).strip()]
    return out


def load_queries(path: str) -> List[str]:
    """
    Read free-text queries from YAML:

        queries:
          - The Da Vinci Code Dan Brown
          - Adventures of Tom Swift Victor Appleton
        exclude:
          - some query to skip

    Order is kept; blank, excluded and case-insensitive duplicate entries are
    dropped. Entries are not otherwise trimmed.
    """
    data = _read_queries_file(Path(path))
    exclude = {q.strip().lower() for q in data.get("exclude", [])}

    seen = set()
    out: List[str] = []
    for q in data.get("queries", []):
        k = q.strip().lower()
        if k in seen or k in exclude:
            continue
        seen.add(k)
        out.append(q)
    logger.info("Built queries: %s", len(out))
    return out
