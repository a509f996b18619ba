"""Parsing helpers for ``<integer><unit>`` duration strings.

Supported units
---------------
- ``s``: seconds
- ``m``: minutes
- ``h``: hours
- ``d``: days

A bare integer (``"3600"``) is read as seconds. An unknown unit suffix
(``"10w"``) falls back to the numeric prefix in seconds and logs a warning.
Anything without a leading integer is rejected with :class:`ValueError`.
"""

from __future__ import annotations

import logging
import re
from typing import Final

log = logging.getLogger(__name__)

UNIT_SECONDS: Final[dict[str, int]] = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([A-Za-z]*)\s*$")


def parse_duration(value: str | int) -> int:
    """
    Convert a duration expression into whole seconds.

    :param value: Duration such as ``"3600s"``, ``"15m"``, ``"1h"``, ``"7d"``,
        a bare integer string, or an ``int`` already expressed in seconds.
    :type value: str | int
    :returns: Number of seconds.
    :rtype: int
    :raises ValueError: If ``value`` does not start with an integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        return value

    match = _DURATION_RE.match(str(value))
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")

    amount = int(match.group(1))
    unit = match.group(2).lower()
    if not unit:
        return amount

    factor = UNIT_SECONDS.get(unit)
    if factor is None:
        log.warning("Unknown duration unit %r in %r; reading it as seconds.", unit, value)
        return amount
    return amount * factor


def format_duration(seconds: int) -> str:
    """Render ``seconds`` with the largest unit that divides it exactly."""
    for unit in ("d", "h", "m"):
        factor = UNIT_SECONDS[unit]
        if seconds and seconds % factor == 0:
            return f"{seconds // factor}{unit}"
    return f"{seconds}s"


__all__ = ["UNIT_SECONDS", "parse_duration", "format_duration"]
