"""Tests for the per-client-address rate limiter."""

from types import SimpleNamespace

import pytest
from django.core.exceptions import ImproperlyConfigured
from rest_framework import status
from rest_framework.test import APIRequestFactory

from apps.core.throttling import ClientAddressRateThrottle

factory = APIRequestFactory()


class TwoPerMinute(ClientAddressRateThrottle):
    rate = "2/60s"


def _request(addr):
    return factory.get("/api/tasks", REMOTE_ADDR=addr)


class TestParseRate:

    @pytest.mark.parametrize(
        "rate, expected",
        [
            ("100/900s", (100, 900)),
            ("30/minute", (30, 60)),
            ("5/15m", (5, 900)),
            ("1000/day", (1000, 86400)),
        ],
    )
    def test_formats(self, rate, expected):
        assert TwoPerMinute().parse_rate(rate) == expected

    def test_invalid(self):
        with pytest.raises(ImproperlyConfigured):
            TwoPerMinute().parse_rate("lots")


class TestClientAddressRateThrottle:

    def test_blocks_after_limit(self):
        assert TwoPerMinute().allow_request(_request("10.0.0.1"), None)
        assert TwoPerMinute().allow_request(_request("10.0.0.1"), None)

        throttle = TwoPerMinute()
        assert not throttle.allow_request(_request("10.0.0.1"), None)
        assert 0 < throttle.wait() <= 60

    def test_clients_counted_separately(self):
        TwoPerMinute().allow_request(_request("10.0.0.1"), None)
        TwoPerMinute().allow_request(_request("10.0.0.1"), None)
        assert TwoPerMinute().allow_request(_request("10.0.0.2"), None)


@pytest.mark.django_db
def test_api_returns_429_envelope(api_client, monkeypatch):
    monkeypatch.setitem(ClientAddressRateThrottle.THROTTLE_RATES, "client", "2/60s")
    payload = {"email": "nobody@example.com", "password": "whatever"}

    for _ in range(2):
        api_client.post("/api/auth/login", payload, format="json")
    r = api_client.post("/api/auth/login", payload, format="json")

    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert r.data["success"] is False
    assert r.data["retryAfter"] > 0


class TestRateLimitHeaders:

    def test_headers_count_down(self):
        view = SimpleNamespace(headers={})
        TwoPerMinute().allow_request(_request("10.0.0.3"), view)
        assert view.headers["X-RateLimit-Limit"] == "2"
        assert view.headers["X-RateLimit-Remaining"] == "1"
        assert view.headers["X-RateLimit-Reset"].endswith("Z")

        TwoPerMinute().allow_request(_request("10.0.0.3"), view)
        assert view.headers["X-RateLimit-Remaining"] == "0"

    def test_blocked_request_reports_zero(self):
        for _ in range(2):
            TwoPerMinute().allow_request(_request("10.0.0.4"), None)
        view = SimpleNamespace(headers={})
        assert not TwoPerMinute().allow_request(_request("10.0.0.4"), view)
        assert view.headers["X-RateLimit-Remaining"] == "0"


@pytest.mark.django_db
def test_api_responses_carry_rate_limit_headers(api_client, monkeypatch):
    monkeypatch.setitem(ClientAddressRateThrottle.THROTTLE_RATES, "client", "2/60s")

    payload = {"email": "nobody@example.com", "password": "whatever"}
    r = api_client.post("/api/auth/login", payload, format="json")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.headers["X-RateLimit-Limit"] == "2"
    assert r.headers["X-RateLimit-Remaining"] == "1"
    assert "X-RateLimit-Reset" in r.headers
