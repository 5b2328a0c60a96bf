"""Rate limiter tests"""

from insight_engine.utils import rate_limiter
from insight_engine.utils.rate_limiter import RateLimiter


def test_window_limit():
    """Requests beyond the limit are refused per client"""
    limiter = RateLimiter(max_requests=2, time_window=60)
    assert limiter.is_allowed("a")
    assert limiter.is_allowed("a")
    assert not limiter.is_allowed("a")
    assert limiter.is_allowed("b")
    assert limiter.get_remaining("a") == 0
    assert limiter.get_remaining("b") == 1


def test_lookups_do_not_add_clients():
    """Checking an unseen client leaves no entry behind"""
    limiter = RateLimiter(max_requests=2, time_window=60)
    assert limiter.get_remaining("ghost") == 2
    assert "ghost" not in limiter.requests


def test_expired_clients_are_dropped(monkeypatch):
    """A client whose window has passed is removed from the map"""
    now = [1000.0]
    monkeypatch.setattr(rate_limiter.time, "monotonic", lambda: now[0])
    limiter = RateLimiter(max_requests=1, time_window=60)
    assert limiter.is_allowed("a")
    assert not limiter.is_allowed("a")

    now[0] += 61
    assert limiter.get_remaining("a") == 1
    assert "a" not in limiter.requests
    assert limiter.is_allowed("a")
    assert len(limiter.requests["a"]) == 1
