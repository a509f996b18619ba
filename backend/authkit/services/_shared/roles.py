from __future__ import annotations

from enum import IntEnum


class Role(IntEnum):
    """
    Authorization role carried by users and embedded in access tokens.

    Lower values are more privileged. The integer value is what travels in
    the ``role`` claim and what the ``users.role`` column stores.
    """

    ADMIN = 1
    MANAGER = 2
    USER = 3

    @classmethod
    def parse(cls, value: int | str | Role) -> Role:
        """
        Coerce a claim or column value into a :class:`Role`.

        :param value: Integer value, numeric string or role name.
        :raises ValueError: If the value does not name a role.
        """
        if isinstance(value, Role):
            return value
        if isinstance(value, str) and not value.isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError as exc:
                raise ValueError(f"Unknown role: {value!r}") from exc
        return cls(int(value))
