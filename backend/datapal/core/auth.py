"""
Request-scoped auth state.

Routes never read identity from ambient globals: they depend on
``get_auth_state`` (or ``require_user``), which asks the provider stored on
``app.state.auth_provider`` to resolve the current request. Swapping the
provider (Firebase session cookies, a JWT verifier, a test double) does not
touch any route.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Depends, Request

from datapal.core.errors import UnauthenticatedError
from datapal.models.user_model import User


@dataclass(frozen=True)
class AuthState:
    user: Optional[User] = None
    loading: bool = False


class AuthProvider(Protocol):
    def resolve(self, request: Request) -> AuthState:
        ...


class HeaderAuthProvider:
    """Trusts identity headers set by the auth proxy in front of the API."""

    user_id_header = "X-User-ID"
    email_header = "X-User-Email"
    name_header = "X-User-Name"

    def resolve(self, request: Request) -> AuthState:
        user_id = (request.headers.get(self.user_id_header) or "").strip()
        if not user_id:
            return AuthState(user=None, loading=False)
        user = User(
            id=user_id,
            email=request.headers.get(self.email_header) or None,
            display_name=request.headers.get(self.name_header) or None,
        )
        return AuthState(user=user, loading=False)


def get_auth_state(request: Request) -> AuthState:
    provider: AuthProvider = request.app.state.auth_provider
    return provider.resolve(request)


def require_user(state: AuthState = Depends(get_auth_state)) -> User:
    if state.user is None:
        raise UnauthenticatedError("Authentication required")
    return state.user
