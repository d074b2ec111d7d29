"""Actor context threaded through every service call.

Authentication happens upstream: the gateway in front of the service sets
``X-Actor-Id``, ``X-Actor-Role`` and optionally ``X-Consultant-Id``. Blueprints
build an :class:`AuthContext` from those headers and pass it explicitly, so
the services can be exercised without any request or session machinery.
"""
from collections import namedtuple

from flask import request

from utiltrack.errors import AuthorizationError
from utiltrack.models import UserRole

ELEVATED_ROLES = (UserRole.ADMIN, UserRole.MANAGER)


class AuthContext(namedtuple('AuthContext', ['actor_id', 'role', 'consultant_id'])):
    __slots__ = ()

    @property
    def is_elevated(self):
        return self.role in ELEVATED_ROLES

    def owns(self, consultant_id):
        return self.consultant_id is not None and self.consultant_id == consultant_id


def context_from_headers(headers):
    """Build an AuthContext from gateway headers, or None when absent"""
    actor_id = headers.get('X-Actor-Id')
    role = headers.get('X-Actor-Role')
    if not actor_id or not role:
        return None
    try:
        role = UserRole(role.upper())
        actor_id = int(actor_id)
        consultant_id = headers.get('X-Consultant-Id')
        consultant_id = int(consultant_id) if consultant_id else None
    except ValueError:
        return None
    return AuthContext(actor_id, role, consultant_id)


def require_actor(ctx):
    if ctx is None or ctx.actor_id is None:
        raise AuthorizationError('Unauthorized', status_code=401)
    return ctx


def require_elevated(ctx):
    require_actor(ctx)
    if not ctx.is_elevated:
        raise AuthorizationError('Unauthorized')
    return ctx


def require_role(ctx, *roles):
    require_actor(ctx)
    if ctx.role not in roles:
        raise AuthorizationError('Unauthorized')
    return ctx


def require_consultant_access(ctx, consultant_id, message='You can only edit your own allocations'):
    """Elevated roles reach every consultant; employees only their own"""
    require_actor(ctx)
    if not ctx.is_elevated and not ctx.owns(consultant_id):
        raise AuthorizationError(message)
    return ctx


def current_context():
    """AuthContext of the request being handled"""
    return context_from_headers(request.headers)
