"""Message catalogs and locale negotiation for client-facing error text.

Errors travel through the service layer as stable dotted keys
(``auth.invalid_credentials``); this module turns a key into a sentence in
the caller's language. Unknown keys are returned unchanged so plain
messages pass through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Final

from flask import current_app, has_request_context, request

log = logging.getLogger(__name__)

FALLBACK_LOCALE: Final[str] = "en"

MESSAGES: Final[Mapping[str, Mapping[str, str]]] = {
    "en": {
        "auth.email_taken": "Email is already registered.",
        "auth.invalid_credentials": "Invalid email or password.",
        "auth.invalid_refresh_token": "Invalid or expired refresh token.",
        "auth.user_not_found": "User not found.",
        "auth.token_missing": "Authentication token is missing.",
        "auth.token_revoked": "Token has been revoked.",
        "auth.token_invalid": "Authentication token is invalid.",
        "auth.token_expired": "Authentication token has expired.",
        "auth.bearer_token_required": "A bearer token is required.",
        "auth.unauthorized": "Authentication required.",
        "errors.bad_request": "The request could not be processed.",
        "errors.not_found": "Resource not found.",
        "errors.not_found_with_id": "{entity} with id {key} not found.",
        "errors.route_not_found": "Route '{path}' not found.",
        "errors.conflict": "Resource conflict.",
        "errors.forbidden": "You do not have permission to perform this action.",
        "errors.validation": "Validation failed.",
        "errors.service_unavailable": "Service temporarily unavailable.",
        "errors.internal": "Unexpected error.",
    },
    "es": {
        "auth.email_taken": "El correo electrónico ya está registrado.",
        "auth.invalid_credentials": "Correo electrónico o contraseña no válidos.",
        "auth.invalid_refresh_token": "Token de actualización no válido o caducado.",
        "auth.user_not_found": "Usuario no encontrado.",
        "auth.token_missing": "Falta el token de autenticación.",
        "auth.token_revoked": "El token ha sido revocado.",
        "auth.token_invalid": "El token de autenticación no es válido.",
        "auth.token_expired": "El token de autenticación ha caducado.",
        "auth.bearer_token_required": "Se requiere un token bearer.",
        "auth.unauthorized": "Se requiere autenticación.",
        "errors.bad_request": "No se pudo procesar la solicitud.",
        "errors.not_found": "Recurso no encontrado.",
        "errors.not_found_with_id": "No se encontró {entity} con id {key}.",
        "errors.route_not_found": "Ruta '{path}' no encontrada.",
        "errors.conflict": "Conflicto con el recurso.",
        "errors.forbidden": "No tienes permiso para realizar esta acción.",
        "errors.validation": "La validación ha fallado.",
        "errors.service_unavailable": "Servicio temporalmente no disponible.",
        "errors.internal": "Error inesperado.",
    },
}


def negotiate_locale() -> str:
    """
    Pick the best supported locale for the current request.

    Uses ``Accept-Language`` quality values against ``SUPPORTED_LOCALES``,
    matching region variants (``es-MX``) to their base language. Falls back
    to ``DEFAULT_LOCALE`` outside a request or when nothing matches.
    """
    default = FALLBACK_LOCALE
    supported: tuple[str, ...] = tuple(MESSAGES)
    if has_request_context():
        default = current_app.config.get("DEFAULT_LOCALE", FALLBACK_LOCALE)
        supported = tuple(current_app.config.get("SUPPORTED_LOCALES", supported))
        for value, _quality in request.accept_languages:
            base = value.split("-", 1)[0].split("_", 1)[0].lower()
            if base in supported:
                return base
    return default


def translate(key: str, locale: str | None = None, /, **params: Any) -> str:
    """
    Resolve ``key`` in ``locale`` (negotiated when omitted).

    :param key: Dotted message key.
    :param locale: Target locale; falls back to English, then to the key.
        Positional only, like ``key``, so both names stay free for
        interpolation.
    :param params: Values interpolated with :meth:`str.format`.
    """
    lang = locale or negotiate_locale()
    catalog = MESSAGES.get(lang) or MESSAGES[FALLBACK_LOCALE]
    template = catalog.get(key) or MESSAGES[FALLBACK_LOCALE].get(key)
    if template is None:
        return key
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        log.warning("Missing parameters for message key %s", key)
        return template


__all__ = ["MESSAGES", "negotiate_locale", "translate"]
