"""Tests for influencer_tracker.scrapers.base -- parsing helpers."""
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from influencer_tracker.scrapers.base import (
    EPOCH_MS_THRESHOLD,
    MAX_TIMESTAMP_MS,
    first_of,
    first_present,
    parse_number,
    parse_optional_number,
    parse_timestamp_ms,
)


class TestParseNumber:

    @pytest.mark.parametrize('value, expected', [
        (42, 42),
        (12.6, 13),
        ('1,234', 1234),
        ('1.2K', 1200),
        ('5.3m', 5300000),
        ('2B', 2000000000),
        ('  17  ', 17),
    ])
    def test_parses_counts(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize('value', [None, '', 'n/a', 'K', '1.2.3K', [], {}])
    def test_unparseable_returns_zero(self, value):
        assert parse_number(value) == 0

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf'), '9' * 400])
    def test_non_finite_returns_zero(self, value):
        assert parse_number(value) == 0

    def test_optional_keeps_missing_as_none(self):
        assert parse_optional_number(None) is None
        assert parse_optional_number('') is None

    def test_optional_parses_present_value(self):
        assert parse_optional_number('3K') == 3000
        assert parse_optional_number(0) == 0


class TestParseTimestampMs:

    def test_milliseconds_pass_through(self):
        assert parse_timestamp_ms(1709294400000) == 1709294400000

    def test_seconds_are_scaled(self):
        assert parse_timestamp_ms(1709294400) == 1709294400000

    def test_threshold_value_is_treated_as_seconds(self):
        # Only values strictly above the threshold are already milliseconds
        assert parse_timestamp_ms(EPOCH_MS_THRESHOLD) == EPOCH_MS_THRESHOLD * 1000

    def test_digit_string(self):
        assert parse_timestamp_ms('1709294400') == 1709294400000

    def test_iso_string_with_z(self):
        assert parse_timestamp_ms('2024-03-01T12:00:00.000Z') == 1709294400000

    def test_naive_iso_string_is_utc(self):
        assert parse_timestamp_ms('2024-03-01T12:00:00') == 1709294400000

    def test_datetime(self):
        dt = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert parse_timestamp_ms(dt) == 1709294400000

    @pytest.mark.parametrize('value', [10 ** 17, '10' * 10, -5, float('nan'), float('inf')])
    def test_out_of_range_returns_now(self, value):
        with patch('influencer_tracker.scrapers.base.now_ms', return_value=123):
            assert parse_timestamp_ms(value) == 123

    def test_last_representable_instant(self):
        assert parse_timestamp_ms(MAX_TIMESTAMP_MS) == MAX_TIMESTAMP_MS

    @pytest.mark.parametrize('value', [None, '', 'yesterday'])
    def test_missing_or_invalid_returns_now(self, value):
        with patch('influencer_tracker.scrapers.base.now_ms', return_value=123):
            assert parse_timestamp_ms(value) == 123


class TestFirstOf:

    def test_returns_first_truthy(self):
        assert first_of({'a': '', 'b': None, 'c': 'x'}, 'a', 'b', 'c') == 'x'

    def test_default_when_nothing_matches(self):
        assert first_of({'a': 0}, 'a', 'b', default='d') == 'd'


class TestFirstPresent:

    def test_zero_counts_as_present(self):
        assert first_present({'a': None, 'b': 0, 'c': 5}, 'a', 'b', 'c') == 0

    def test_skips_missing_and_empty(self):
        assert first_present({'a': '', 'c': 5}, 'a', 'b', 'c') == 5
        assert first_present({}, 'a', default='d') == 'd'
