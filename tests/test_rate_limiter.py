"""
Unit tests for the per-host request throttle.
"""

import pytest

import rate_limiter
from rate_limiter import RequestThrottle, get_throttle, host_of, throttled


class FakeClock:
    """Manual clock; sleeping advances time."""

    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def throttle(clock):
    return RequestThrottle(requests_per_minute=2, clock=clock, sleep=clock.sleep)


class TestRequestThrottle:
    """Tests for the sliding window."""

    def test_under_limit_no_wait(self, throttle, clock):
        assert throttle.acquire("maps.austintexas.gov") == 0
        assert throttle.acquire("maps.austintexas.gov") == 0
        assert clock.sleeps == []

    def test_over_limit_waits_for_window(self, throttle, clock):
        throttle.acquire("maps.austintexas.gov")
        clock.now += 10
        throttle.acquire("maps.austintexas.gov")

        allowed, wait = throttle.check("maps.austintexas.gov")
        assert allowed is False
        assert wait == pytest.approx(50)

        waited = throttle.acquire("maps.austintexas.gov")
        assert waited == pytest.approx(50)
        assert clock.sleeps == [pytest.approx(50)]

    def test_hosts_are_independent(self, throttle, clock):
        throttle.acquire("maps.austintexas.gov")
        throttle.acquire("maps.austintexas.gov")
        assert throttle.check("services.arcgis.com") == (True, 0.0)

    def test_window_expires(self, throttle, clock):
        throttle.acquire("a.example.com")
        throttle.acquire("a.example.com")
        clock.now += 60
        assert throttle.check("a.example.com") == (True, 0.0)

    def test_stats(self, throttle, clock):
        for _ in range(3):
            throttle.acquire("a.example.com")
        stats = throttle.get_stats()
        assert stats["a.example.com"]["requests"] == 3
        assert stats["a.example.com"]["wait_seconds"] == 60

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            RequestThrottle(requests_per_minute=0)


class TestThrottledDecorator:
    def test_decorator_records_host(self, throttle):
        @throttled(throttle=throttle)
        def fetch(url):
            return url.upper()

        assert fetch("https://Maps.AustinTexas.gov/query") == "HTTPS://MAPS.AUSTINTEXAS.GOV/QUERY"
        assert throttle.get_stats()["maps.austintexas.gov"]["requests"] == 1

    def test_bare_decorator_uses_global_throttle(self, monkeypatch, throttle):
        """Test @throttled without arguments falls back to the shared throttle."""
        monkeypatch.setattr(rate_limiter, "_throttle", throttle)

        @throttled
        def fetch(url):
            return url

        fetch("https://services.arcgis.com/query")
        assert get_throttle() is throttle
        assert throttle.get_stats()["services.arcgis.com"]["requests"] == 1

    def test_host_of(self):
        assert host_of("https://services.arcgis.com/abc/query?f=json") == "services.arcgis.com"
        assert host_of("not a url") == "not a url"
