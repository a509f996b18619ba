# authkit/services/_shared/base.py
from __future__ import annotations

from http import HTTPStatus

from authkit.core import errors as api_errors
from authkit.services._shared.errors import (
    AuthenticationError,
    EmailTakenError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
)
from authkit.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize translation of service errors into API errors.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services never import Flask request state; callers pass what they need.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        The error's ``code`` becomes the message key of the response, so the
        client sees a translated, stable message.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthenticationError):
            # → 401, one response shape for every credential/token failure
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc), entity=exc.entity, key=exc.key)

        if isinstance(exc, EmailTakenError):
            # → 409 Conflict
            return api_errors.Conflict(str(exc), code=exc.code)

        if isinstance(exc, ForbiddenError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, StoreUnavailableError):
            # → 503; internal detail stays in the logs
            return api_errors.ServiceUnavailable()

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.BAD_REQUEST,
                code=exc.code,
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
