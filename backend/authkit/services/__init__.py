"""Service layer.

Import services from their subpackages, for example::

    from authkit.services.tokens import TokenLifecycleService
    from authkit.services.auth.service import AuthService

Nothing is re-exported here; models import
:mod:`authkit.services._shared.roles` while this package initializes.
"""
