"""Unit tests for :class:`Role` parsing."""

from __future__ import annotations

import pytest

from authkit.services._shared.roles import Role


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (Role.ADMIN, Role.ADMIN),
        (1, Role.ADMIN),
        ("2", Role.MANAGER),
        ("user", Role.USER),
        (" Manager ", Role.MANAGER),
    ],
)
def test_parse_accepts_values_and_names(raw, expected):
    assert Role.parse(raw) is expected


@pytest.mark.parametrize("raw", [0, 4, "owner", "99"])
def test_parse_rejects_unknown_roles(raw):
    with pytest.raises(ValueError):
        Role.parse(raw)


def test_lower_value_is_more_privileged():
    assert Role.ADMIN < Role.MANAGER < Role.USER
