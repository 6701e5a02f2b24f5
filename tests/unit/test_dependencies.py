"""Unit tests for dependencies module."""

from datetime import UTC, datetime

import pytest

from risk_monitor.core.config import PaginationConfig, Settings
from risk_monitor.core.dependencies import (
    Pagination,
    get_pagination,
    is_true,
    parse_iso_datetime,
)
from risk_monitor.core.errors import ValidationError


@pytest.fixture
def settings() -> Settings:
    return Settings(pagination=PaginationConfig(default_limit=100, max_limit=1000))


class TestIsTrue:
    def test_only_literal_true(self):
        assert is_true("true") is True

    @pytest.mark.parametrize("value", ["TRUE", "True", "1", "yes", "", None])
    def test_everything_else_is_false(self, value):
        assert is_true(value) is False


class TestParseIsoDatetime:
    def test_parses_zulu_suffix(self):
        assert parse_iso_datetime("2024-01-31T23:59:59Z", "endDate") == datetime(
            2024, 1, 31, 23, 59, 59, tzinfo=UTC
        )

    def test_parses_date_only(self):
        assert parse_iso_datetime("2024-01-01", "startDate") == datetime(2024, 1, 1)

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_is_none(self, value):
        assert parse_iso_datetime(value, "startDate") is None

    def test_unparseable_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_iso_datetime("last tuesday", "startDate")
        assert exc_info.value.message == "Invalid date for startDate, expected ISO-8601"
        assert exc_info.value.details == {"startDate": "last tuesday"}


class TestGetPagination:
    def test_defaults(self, settings):
        assert get_pagination(settings, None, None) == Pagination(limit=100, skip=0)

    def test_bounds_are_inclusive(self, settings):
        assert get_pagination(settings, "1", "0") == Pagination(limit=1, skip=0)
        assert get_pagination(settings, "1000", "25") == Pagination(limit=1000, skip=25)

    @pytest.mark.parametrize("limit", ["0", "1001", "-5", "abc", "2.5"])
    def test_invalid_limit(self, settings, limit):
        with pytest.raises(ValidationError) as exc_info:
            get_pagination(settings, limit, None)
        assert exc_info.value.message == "Limit must be between 1 and 1000"

    @pytest.mark.parametrize("skip", ["-1", "x"])
    def test_invalid_skip(self, settings, skip):
        with pytest.raises(ValidationError) as exc_info:
            get_pagination(settings, None, skip)
        assert exc_info.value.message == "Skip must be a non-negative number"

    def test_both_invalid_reports_both(self, settings):
        with pytest.raises(ValidationError) as exc_info:
            get_pagination(settings, "0", "-1")
        assert exc_info.value.message == (
            "Limit must be between 1 and 1000, Skip must be a non-negative number"
        )
        assert exc_info.value.details == {"limit": "0", "skip": "-1"}
