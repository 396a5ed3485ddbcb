"""
Lookup Cache

Caches external lookup results (GIS parcels, geocodes) by normalized key so
re-analyzing the same listings does not hit city services again.
Optionally persisted to a JSON file between runs.
"""

import hashlib
import json
import logging
import re
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

CACHE_CONFIG = {
    "cache_ttl_hours": 24,       # How long to keep lookup results
    "max_cache_entries": 5000,   # Maximum cache size
}


@dataclass
class CacheEntry:
    """A cached lookup result."""
    key: str
    value: Any
    created_at: str = ""
    hit_count: int = 0
    last_hit: Optional[str] = None

    def is_expired(self, ttl_hours: int = 24) -> bool:
        """Check if cache entry has expired."""
        if not self.created_at:
            return True
        created = datetime.fromisoformat(self.created_at)
        return datetime.now() - created > timedelta(hours=ttl_hours)


def normalize_key(text: str) -> str:
    """Case/whitespace/punctuation-insensitive cache key."""
    text = re.sub(r'[^\w\s]', ' ', str(text).lower())
    text = re.sub(r'\s+', ' ', text).strip()
    return hashlib.md5(text.encode()).hexdigest()[:16]


class LookupCache:
    """
    TTL cache for JSON-serializable lookup results.

    Example:
        "1100 Congress Ave, Austin TX 78701"
        "1100 congress ave austin tx 78701"

    Both hit the same entry.
    """

    def __init__(
        self,
        ttl_hours: int = CACHE_CONFIG["cache_ttl_hours"],
        cache_file: Optional[str] = None,
        max_entries: int = CACHE_CONFIG["max_cache_entries"],
    ):
        self.ttl_hours = ttl_hours
        self.max_entries = max_entries
        self.cache_file = Path(cache_file) if cache_file else None
        self.cache: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._load()

    def _load(self):
        """Load cache from disk."""
        if self.cache_file is None or not self.cache_file.exists():
            return
        try:
            with open(self.cache_file, 'r') as f:
                data = json.load(f)
            self.cache = {k: CacheEntry(**v) for k, v in data.items()}
            logger.info(f"Loaded {len(self.cache)} cached lookups from {self.cache_file}")
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.cache_file}: {e}")
            self.cache = {}

    def _save(self):
        """Save cache to disk."""
        if self.cache_file is None:
            return
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        data = {k: asdict(v) for k, v in self.cache.items()}
        with open(self.cache_file, 'w') as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[Any]:
        """
        Get cached value for a key.

        Returns:
            Cached value or None if missing or expired
        """
        cache_key = normalize_key(key)
        with self._lock:
            entry = self.cache.get(cache_key)
            if entry is None:
                logger.debug(f"Cache MISS: {key[:50]}")
                return None
            if entry.is_expired(self.ttl_hours):
                del self.cache[cache_key]
                logger.debug(f"Cache EXPIRED: {key[:50]}")
                return None

            entry.hit_count += 1
            entry.last_hit = datetime.now().isoformat()
            logger.debug(f"Cache HIT: {key[:50]}")
            return entry.value

    def set(self, key: str, value: Any):
        """Cache a value for a key."""
        cache_key = normalize_key(key)
        with self._lock:
            self.cache[cache_key] = CacheEntry(
                key=key,
                value=value,
                created_at=datetime.now().isoformat(),
            )
            if len(self.cache) > self.max_entries:
                self._prune_cache()
            self._save()

    def _prune_cache(self):
        """Remove old/unused cache entries."""
        # Sort by last hit time (oldest first)
        sorted_entries = sorted(
            self.cache.items(),
            key=lambda x: x[1].last_hit or x[1].created_at
        )

        # Remove oldest 20%
        remove_count = max(1, len(sorted_entries) // 5)
        for key, _ in sorted_entries[:remove_count]:
            del self.cache[key]

        logger.info(f"Pruned {remove_count} cache entries")

    def get_cache_stats(self) -> dict:
        """Get cache statistics."""
        total_entries = len(self.cache)
        total_hits = sum(e.hit_count for e in self.cache.values())

        return {
            "total_entries": total_entries,
            "total_hits": total_hits,
            "hit_rate": total_hits / total_entries if total_entries > 0 else 0,
        }
