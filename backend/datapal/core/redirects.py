"""
Redirect policy.

Both the server-side middleware and the landing-page redirect resolve their
targets here, so the rule "signed-in traffic belongs on the dashboard" is
written once.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from fastapi import Request
from fastapi.responses import RedirectResponse

if TYPE_CHECKING:
    from datapal.core.auth import AuthState

DASHBOARD_PATH = "/dashboard"

# Everything except API routes, build assets and the favicon goes through the policy.
_MATCHER = re.compile(r"^/(?!api|_next/static|_next/image|favicon\.ico)")

ENTRY_PATHS = frozenset({"/", "/login", "/register"})


def is_matched(path: str) -> bool:
    return bool(_MATCHER.match(path or "/"))


def server_redirect(path: str) -> Optional[str]:
    """Target for a request to ``path``, or None to pass it through."""
    if not is_matched(path):
        return None
    if path in ENTRY_PATHS:
        return DASHBOARD_PATH
    return None


def landing_redirect(state: "AuthState") -> Optional[str]:
    """Where the landing page sends a visitor once auth has resolved."""
    if not state.loading and state.user is not None:
        return DASHBOARD_PATH
    return None


async def redirect_middleware(request: Request, call_next):
    target = server_redirect(request.url.path)
    if target is not None:
        return RedirectResponse(url=str(request.url.replace(path=target, query="")), status_code=307)
    return await call_next(request)
