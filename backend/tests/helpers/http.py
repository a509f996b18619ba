"""HTTP helper utilities for tests."""

from __future__ import annotations


def json_headers(auth_token: str | None = None, *, language: str | None = None) -> dict[str, str]:
    """Return standard JSON headers.

    Parameters
    ----------
    auth_token:
        Optional bearer token to include.
    language:
        Optional ``Accept-Language`` value.

    Returns
    -------
    dict[str, str]
        HTTP headers dictionary.
    """

    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    if language:
        headers["Accept-Language"] = language
    return headers


def bearer(token: str) -> dict[str, str]:
    """Return an ``Authorization`` header carrying ``token``."""

    return {"Authorization": f"Bearer {token}"}
