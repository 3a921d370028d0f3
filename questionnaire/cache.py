# questionnaire/cache.py
from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

_Stamp = Tuple[int, int]


class SourceCache:
    """Parsed JSON sources keyed by path.

    An entry is reused only while the file's (mtime_ns, size) is unchanged,
    so a miss always reflects the file as it is on disk now.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[_Stamp, Any]] = {}

    def get(self, path: str, stamp: _Stamp) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(path)
        if entry is None or entry[0] != stamp:
            return None
        return entry[1]

    def put(self, path: str, stamp: _Stamp, value: Any) -> None:
        with self._lock:
            self._entries[path] = (stamp, value)

    def invalidate(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _stamp(path: str) -> _Stamp:
    st = os.stat(path)
    return (st.st_mtime_ns, st.st_size)


def read_json_source(path: str, cache: Optional[SourceCache] = None) -> Any:
    """Read and decode a JSON source file, through ``cache`` when given.

    Raises ConfigurationError when the file is missing, unreadable or not JSON.
    """
    try:
        stamp = _stamp(path)
    except OSError as e:
        raise ConfigurationError(f"Cannot access source file {path!r}: {e}") from e

    if cache is not None:
        hit = cache.get(path, stamp)
        if hit is not None:
            return hit

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read source file {path!r}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed JSON in {path!r}: {e}") from e

    logger.debug("[Source] loaded %s", path)
    if cache is not None:
        cache.put(path, stamp, data)
    return data
