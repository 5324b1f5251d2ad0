"""Tests for token expiry helpers (unverified claims only)."""

from datetime import UTC, datetime

import pytest
from jose import jwt

from fleetcache.shared.utils.clock import ManualClock
from fleetcache.shared.utils.tokens import (
    get_token_expiration_time,
    is_token_expiring_soon,
    is_token_valid,
)

NOW_S = 1_736_942_400  # 2025-01-15T12:00:00Z


def _token(**claims) -> str:
    return jwt.encode({"sub": "user-1", **claims}, "any-secret", algorithm="HS256")


@pytest.fixture
def now() -> ManualClock:
    return ManualClock(start_ms=NOW_S * 1000)


class TestIsTokenValid:
    def test_unexpired_token_is_valid(self, now: ManualClock) -> None:
        assert is_token_valid(_token(exp=NOW_S + 60), clock=now) is True

    def test_expired_token_is_invalid(self, now: ManualClock) -> None:
        assert is_token_valid(_token(exp=NOW_S - 1), clock=now) is False

    def test_token_expiring_this_second_is_valid(self, now: ManualClock) -> None:
        assert is_token_valid(_token(exp=NOW_S), clock=now) is True

    def test_token_without_exp_is_valid(self, now: ManualClock) -> None:
        assert is_token_valid(_token(), clock=now) is True

    @pytest.mark.parametrize("bad", [None, "", 123, "only.two", "a.b.c.d", "not.a.jwt"])
    def test_malformed_tokens_are_invalid(self, bad, now: ManualClock) -> None:
        assert is_token_valid(bad, clock=now) is False


class TestExpirationTime:
    def test_returns_utc_datetime(self) -> None:
        assert get_token_expiration_time(_token(exp=NOW_S)) == datetime(2025, 1, 15, 12, 0, tzinfo=UTC)

    def test_none_without_exp(self) -> None:
        assert get_token_expiration_time(_token()) is None

    def test_none_for_malformed(self) -> None:
        assert get_token_expiration_time("garbage") is None


class TestExpiringSoon:
    def test_within_threshold(self, now: ManualClock) -> None:
        assert is_token_expiring_soon(_token(exp=NOW_S + 4 * 60), clock=now) is True

    def test_outside_threshold(self, now: ManualClock) -> None:
        assert is_token_expiring_soon(_token(exp=NOW_S + 10 * 60), clock=now) is False

    def test_custom_threshold(self, now: ManualClock) -> None:
        token = _token(exp=NOW_S + 10 * 60)
        assert is_token_expiring_soon(token, minutes_threshold=15, clock=now) is True

    def test_expired_counts_as_expiring(self, now: ManualClock) -> None:
        assert is_token_expiring_soon(_token(exp=NOW_S - 60), clock=now) is True

    def test_unknown_expiry_is_not_expiring(self, now: ManualClock) -> None:
        assert is_token_expiring_soon(_token(), clock=now) is False
        assert is_token_expiring_soon(None, clock=now) is False


class TestOutOfRangeExp:
    """An exp claim that cannot be turned into a datetime is an unknown expiry."""

    @pytest.mark.parametrize("exp", [10**20, float("nan")])
    def test_expiration_time_is_none(self, exp) -> None:
        assert get_token_expiration_time(_token(exp=exp)) is None

    @pytest.mark.parametrize("exp", [10**20, float("nan")])
    def test_not_expiring_soon(self, exp) -> None:
        assert is_token_expiring_soon(_token(exp=exp), clock=ManualClock(0)) is False

    def test_warning_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="fleetcache.shared.utils.tokens"):
            get_token_expiration_time(_token(exp=10**20))
        assert "out of range" in caplog.text
