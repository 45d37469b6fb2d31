"""Per-request routing gate: decides whether a request may reach a handler.

The gate only looks at whether an auth cookie is present. Verifying it is
left to the handlers (see ``dependencies.auth.get_current_user``).
"""

import enum

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse

PUBLIC_PATHS = ("/login", "/api/auth/login", "/api/auth/logout", "/favicon.ico")
LOGIN_PATH = "/login"
APP_PATH = "/dashboard"
API_PREFIX = "/api/"


class GateDecision(enum.Enum):
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_APP = "redirect_to_app"


def is_public_path(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in PUBLIC_PATHS)


def decide(path: str, has_token: bool) -> GateDecision:
    if not has_token and not is_public_path(path) and path != "/":
        return GateDecision.REDIRECT_TO_LOGIN
    if has_token and path == LOGIN_PATH:
        return GateDecision.REDIRECT_TO_APP
    return GateDecision.ALLOW


async def access_gate(request: Request, call_next):
    cookie_name = request.app.state.settings.COOKIE_NAME
    has_token = bool(request.cookies.get(cookie_name) or request.headers.get("authorization"))
    path = request.url.path
    decision = decide(path, has_token)

    if decision is GateDecision.REDIRECT_TO_LOGIN:
        if path.startswith(API_PREFIX):
            # API clients get a status code instead of an HTML login page
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Not authenticated"},
            )
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    if decision is GateDecision.REDIRECT_TO_APP:
        return RedirectResponse(APP_PATH, status_code=status.HTTP_303_SEE_OTHER)

    return await call_next(request)
