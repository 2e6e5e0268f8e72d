from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from openlibrary_search.integrations.http_client import DEFAULT_USER_AGENT, OPENLIBRARY_BASE_URL

logger = logging.getLogger(__name__)

ENV_KEYS = (
    "OPENLIBRARY_BASE_URL",
    "OPENLIBRARY_TIMEOUT",
    "OPENLIBRARY_USER_AGENT",
    "OPENLIBRARY_MAX_WORKERS",
)


def read_env_file(path: Path) -> Dict[str, str]:
    """
    KEY=value lines; `export`, shell quoting and trailing # comments are
    understood. Lines shlex cannot tokenize are skipped.
    """
    out: Dict[str, str] = {}
    for lineno, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export ") :]
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        try:
            out[key] = " ".join(shlex.split(value, comments=True))
        except ValueError:
            logger.warning("skipping unparsable .env line | path=%s | line=%s", path, lineno)
    return out


def load_dotenv(path: str = ".env") -> Optional[str]:
    """
    Fill unset ENV_KEYS variables from a .env; other keys in the file are ignored.

    Looks at ENV_PATH first, then `path` (relative to the CWD), then the
    project root. Returns the file used, or None.
    """
    candidates: List[Path] = []
    if os.getenv("ENV_PATH"):
        candidates.append(Path(os.environ["ENV_PATH"]).expanduser())
    candidates.append(Path(path).expanduser())
    candidates.append(Path(__file__).resolve().parent.parent / ".env")

    for c in candidates:
        if not c.is_file():
            continue
        for k, v in read_env_file(c).items():
            if k in ENV_KEYS:
                os.environ.setdefault(k, v)
            else:
                logger.debug("ignoring .env key | path=%s | key=%s", c, k)
        return str(c.resolve())
    return None


def _env_number(name: str, default, cast):
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise SystemExit(f"{name} must be a number (got {raw!r}).") from e


@dataclass
class ClientConfig:
    base_url: str = OPENLIBRARY_BASE_URL
    timeout_s: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    max_workers: int = 0  # 0 = one worker per candidate pair

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=(os.getenv("OPENLIBRARY_BASE_URL") or OPENLIBRARY_BASE_URL).strip(),
            timeout_s=_env_number("OPENLIBRARY_TIMEOUT", 30.0, float),
            user_agent=(os.getenv("OPENLIBRARY_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
            max_workers=_env_number("OPENLIBRARY_MAX_WORKERS", 0, int),
        )

    def validate(self) -> None:
        base = self.base_url.strip()
        if not (base.startswith("http://") or base.startswith("https://")):
            raise SystemExit("OPENLIBRARY_BASE_URL must start with http:// or https://.")
        if self.timeout_s <= 0:
            raise SystemExit("OPENLIBRARY_TIMEOUT must be positive.")
        if self.max_workers < 0:
            raise SystemExit("OPENLIBRARY_MAX_WORKERS must be 0 or more.")
