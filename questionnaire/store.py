# questionnaire/store.py
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import PersistenceError


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# same-second submissions get "-1", "-2", ... appended
_MAX_SUFFIX = 10000


def init_store(answers_dir: str) -> None:
    try:
        os.makedirs(answers_dir, exist_ok=True)
    except OSError as e:
        raise PersistenceError(f"Cannot create answers directory {answers_dir!r}: {e}") from e


def record_name(now: datetime, attempt: int = 0) -> str:
    stamp = now.strftime(TIMESTAMP_FORMAT)
    if attempt == 0:
        return f"{stamp}.json"
    return f"{stamp}-{attempt}.json"


def save_answers(
    cleaned_data: Dict[str, Any],
    answers_dir: str,
    now: Optional[datetime] = None,
) -> Path:
    """Write one answer record and return its path.

    Files are created exclusively; an existing record is never overwritten.
    """
    now = now or datetime.now()
    content = json.dumps(cleaned_data, ensure_ascii=False, separators=(",", ":"))

    for attempt in range(_MAX_SUFFIX):
        path = Path(answers_dir) / record_name(now, attempt)
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            continue
        except OSError as e:
            raise PersistenceError(f"Cannot write answers to {str(path)!r}: {e}") from e
        logger.info("[Store] saved answers -> %s", path)
        return path

    raise PersistenceError(f"No free record name for {now.strftime(TIMESTAMP_FORMAT)} in {answers_dir!r}.")


def load_answers(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
