"""Tests for crumb.encoder: option normalization into SetCookie."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from crumb.encoder import encode_cookie, resolve_expires, resolve_max_age
from crumb.errors import ValidationError

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def _now() -> datetime:
    return NOW


class TestResolveMaxAge:
    def test_int(self) -> None:
        assert resolve_max_age(3600) == 3600

    def test_zero(self) -> None:
        assert resolve_max_age(0) == 0

    def test_float_truncated(self) -> None:
        assert resolve_max_age(59.9) == 59

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("2 days", 172800), ("1h", 3600), ("1h30m", 5400), ("90s", 90), ("1 week", 604800)],
    )
    def test_duration_string(self, value: str, expected: int) -> None:
        assert resolve_max_age(value) == expected

    def test_invalid_string_raises(self) -> None:
        with pytest.raises(ValidationError, match="max_age duration string is invalid"):
            resolve_max_age("whenever")

    def test_negative_raises(self) -> None:
        with pytest.raises(ValidationError, match="must not be negative"):
            resolve_max_age(-1)

    def test_bool_raises(self) -> None:
        with pytest.raises(ValidationError, match="max_age is invalid"):
            resolve_max_age(True)

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_raises(self, value: float) -> None:
        with pytest.raises(ValidationError, match="max_age must be finite"):
            resolve_max_age(value)


class TestResolveExpires:
    def test_aware_datetime(self) -> None:
        moment = datetime(2030, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=9)))
        assert resolve_expires(moment) == datetime(2030, 1, 1, 0, 0, tzinfo=UTC)

    def test_naive_datetime_is_utc(self) -> None:
        assert resolve_expires(datetime(2030, 1, 1)) == datetime(2030, 1, 1, tzinfo=UTC)

    def test_epoch_seconds(self) -> None:
        assert resolve_expires(0) == datetime(1970, 1, 1, tzinfo=UTC)
        assert resolve_expires(86400.0) == datetime(1970, 1, 2, tzinfo=UTC)

    def test_duration_relative_to_now(self) -> None:
        assert resolve_expires("2 days", _now) == NOW + timedelta(days=2)

    def test_iso_timestamp(self) -> None:
        assert resolve_expires("2030-01-01T00:00:00+00:00") == datetime(2030, 1, 1, tzinfo=UTC)

    def test_http_date(self) -> None:
        expected = datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert resolve_expires("Wed, 02 Jan 2030 03:04:05 GMT") == expected

    def test_invalid_string_raises(self) -> None:
        with pytest.raises(ValidationError, match="expires is invalid"):
            resolve_expires("the day after tomorrow")

    def test_bool_raises(self) -> None:
        with pytest.raises(ValidationError, match="expires is invalid"):
            resolve_expires(False)

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), 10**20])
    def test_epoch_out_of_range_raises(self, value: float) -> None:
        with pytest.raises(ValidationError, match="expires is out of range"):
            resolve_expires(value)

    def test_duration_overflow_raises(self) -> None:
        with pytest.raises(ValidationError, match="expires is out of range"):
            resolve_expires("99999999999 weeks", _now)


class TestEncodeCookie:
    def test_defaults(self) -> None:
        cookie = encode_cookie("theme", "dark")

        assert cookie.name == "theme"
        assert cookie.value == "dark"
        assert cookie.path == "/"
        assert cookie.httponly is True
        assert cookie.secure is False
        assert cookie.domain is None
        assert cookie.samesite is None
        assert cookie.max_age is None
        assert cookie.expires is None

    def test_resolves_options(self) -> None:
        cookie = encode_cookie(
            "theme",
            "dark",
            max_age="1 day",
            expires="1 day",
            path="/app",
            domain="example.com",
            secure=True,
            httponly=False,
            samesite="lax",
            now=_now,
        )

        assert cookie.max_age == 86400
        assert cookie.expires == NOW + timedelta(days=1)
        assert cookie.path == "/app"
        assert cookie.domain == "example.com"
        assert cookie.secure is True
        assert cookie.httponly is False
        assert cookie.samesite == "Lax"

    def test_samesite_true_is_strict(self) -> None:
        assert encode_cookie("a", "b", samesite=True).samesite == "Strict"

    def test_invalid_samesite_raises(self) -> None:
        with pytest.raises(ValidationError, match="samesite"):
            encode_cookie("a", "b", samesite="sometimes")
