"""
Authorization Gate - admin role check for the news admin surface

Resolves the caller and insists on the ADMIN role before any privileged
read or mutation runs. Both failures are terminal: the guarded operation
does not start.

By default the caller is the ``User`` whose id sits under ``user_id`` in the
Flask session. Deployments with their own sign-in point the
``NEWS_IDENTITY_RESOLVER`` setting at a zero-argument callable (or its
import path, e.g. ``myauth.hooks:current_user``) that returns an object
with ``id`` and ``role``, or None when nobody is signed in.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from flask import has_request_context, session
from werkzeug.utils import import_string

from extensions import db
from models.constants import UserRole
from models.user import User
from utils.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'user_id'

IdentityResolver = Callable[[], Optional[object]]


@dataclass(frozen=True)
class AdminIdentity:
    user_id: str


def session_identity() -> Optional[User]:
    """Load the signed-in user from the Flask session, if any."""
    if not has_request_context():
        return None
    user_id = session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    return db.session.get(User, user_id)


def resolver_from_config(value: Union[str, IdentityResolver, None]) -> IdentityResolver:
    """
    Turn the ``NEWS_IDENTITY_RESOLVER`` setting into a callable.

    Args:
        value: None for the session lookup, an import path, or the callable itself

    Raises:
        werkzeug.utils.ImportStringError: the import path does not resolve
        TypeError: the resolved object is not callable
    """
    if value is None or value == '':
        return session_identity
    resolver = import_string(value) if isinstance(value, str) else value
    if not callable(resolver):
        raise TypeError(f"NEWS_IDENTITY_RESOLVER must be callable, got {resolver!r}")
    return resolver


class AuthorizationGate:
    """Checks that the current caller is an administrator."""

    def __init__(self, identity_resolver: IdentityResolver = session_identity):
        """
        Args:
            identity_resolver: Returns the caller (with ``id`` and ``role``)
                               or None when nobody is signed in
        """
        self.identity_resolver = identity_resolver

    def require_admin(self) -> AdminIdentity:
        """
        Returns:
            AdminIdentity of the caller

        Raises:
            UnauthenticatedError: no caller could be resolved
            ForbiddenError: caller lacks the ADMIN role
        """
        user = self.identity_resolver()
        if user is None:
            logger.warning("News admin access without authentication")
            raise UnauthenticatedError()

        role = getattr(user, 'role', None)
        if isinstance(role, UserRole):
            role = role.value
        if role != UserRole.ADMIN.value:
            logger.warning("News admin access denied for user %s (role=%s)", user.id, role)
            raise ForbiddenError()

        return AdminIdentity(user_id=user.id)
