"""Unit tests for message catalogs and locale negotiation."""

from __future__ import annotations

from authkit.core.i18n import MESSAGES, negotiate_locale, translate


def test_catalogs_share_the_same_keys():
    assert set(MESSAGES["en"]) == set(MESSAGES["es"])


def test_translate_with_explicit_locale():
    assert translate("auth.token_revoked", "es") == "El token ha sido revocado."
    assert translate("errors.not_found_with_id", "en", entity="User", key=5) == (
        "User with id 5 not found."
    )


def test_unknown_key_is_returned_verbatim():
    assert translate("no.such.key", "en") == "no.such.key"


def test_outside_request_uses_fallback():
    assert negotiate_locale() == "en"


def test_negotiates_region_variants(app):
    with app.test_request_context(headers={"Accept-Language": "es-MX,es;q=0.9,en;q=0.5"}):
        assert negotiate_locale() == "es"
    with app.test_request_context(headers={"Accept-Language": "fr-FR"}):
        assert negotiate_locale() == "en"
