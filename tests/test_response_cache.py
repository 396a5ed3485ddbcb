"""
Unit tests for the lookup cache.
"""

from datetime import datetime, timedelta

from response_cache import CacheEntry, LookupCache, normalize_key


class TestNormalizeKey:
    def test_formatting_insensitive(self):
        assert normalize_key("1100 Congress Ave, Austin TX 78701") == \
            normalize_key("  1100 congress ave austin tx   78701 ")

    def test_different_addresses(self):
        assert normalize_key("1100 Congress Ave") != normalize_key("1101 Congress Ave")


class TestLookupCache:
    """Tests for get/set, expiry and persistence."""

    def test_miss_then_hit(self):
        cache = LookupCache()
        assert cache.get("1100 Congress Ave") is None

        cache.set("1100 Congress Ave", {"lot_area": 8000})
        assert cache.get("1100 CONGRESS AVE.") == {"lot_area": 8000}
        assert cache.get_cache_stats()["total_hits"] == 1

    def test_expired_entry_removed(self):
        cache = LookupCache(ttl_hours=24)
        cache.set("1100 Congress Ave", {"lot_area": 8000})
        entry = cache.cache[normalize_key("1100 Congress Ave")]
        entry.created_at = (datetime.now() - timedelta(hours=25)).isoformat()

        assert cache.get("1100 Congress Ave") is None
        assert cache.get_cache_stats()["total_entries"] == 0

    def test_entry_without_timestamp_is_expired(self):
        assert CacheEntry(key="k", value=1).is_expired() is True

    def test_prune_when_full(self):
        cache = LookupCache(max_entries=5)
        for n in range(6):
            cache.set(f"{n} Elm St", n)
        assert len(cache.cache) == 5

    def test_persistence(self, tmp_path):
        path = tmp_path / "gis_cache.json"
        LookupCache(cache_file=str(path)).set("1100 Congress Ave", {"zoning_code": "SF-3"})

        reloaded = LookupCache(cache_file=str(path))
        assert reloaded.get("1100 Congress Ave") == {"zoning_code": "SF-3"}

    def test_unreadable_file_ignored(self, tmp_path):
        path = tmp_path / "gis_cache.json"
        path.write_text("{not json")
        cache = LookupCache(cache_file=str(path))
        assert cache.cache == {}
