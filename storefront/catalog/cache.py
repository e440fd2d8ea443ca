import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache:
    """
    Cache mémoire clé -> valeur avec durée de vie fixe.
    clock injectable (tests); entrées expirées purgées à la lecture.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def load_precomputed_page(path: Path, page: int) -> Optional[Dict[str, Any]]:
    """
    Page précalculée: {"pages": {"0": {...}, "1": {...}}} dans products-cache.json.
    Fichier absent, illisible ou page manquante: None (repli sur le calcul).
    """
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("catalog.cache unreadable precomputed file %s", path)
        return None
    pages = data.get("pages") if isinstance(data, dict) else None
    if not isinstance(pages, dict):
        return None
    found = pages.get(str(page))
    return found if isinstance(found, dict) else None
