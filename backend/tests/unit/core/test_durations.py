"""Unit tests for duration parsing."""

from __future__ import annotations

import logging

import pytest

from authkit.core.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("3600s", 3600),
        ("15m", 900),
        ("1h", 3600),
        ("7d", 604800),
        ("3600", 3600),
        (" 2H ", 7200),
        (42, 42),
    ],
)
def test_parse_duration_known_units(raw, expected):
    assert parse_duration(raw) == expected


def test_unknown_unit_reads_as_seconds_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="authkit.core.durations"):
        assert parse_duration("10w") == 10
    assert "Unknown duration unit" in caplog.text


@pytest.mark.parametrize("raw", ["", "abc", "h1", "-5s", True])
def test_invalid_durations_raise(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_format_duration_uses_largest_exact_unit():
    assert format_duration(604800) == "7d"
    assert format_duration(3600) == "1h"
    assert format_duration(900) == "15m"
    assert format_duration(61) == "61s"
