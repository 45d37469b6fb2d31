from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hobby_tracker.app.config import Settings
from hobby_tracker.app.errors import UnauthenticatedError
from hobby_tracker.app.schemas.auth import TokenPayload
from hobby_tracker.app.utils.security import TokenService

# Browsers send the cookie; the header is for scripts and API clients
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """Verify the auth token on every call, whatever the access gate decided."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials

    if not token:
        raise UnauthenticatedError()

    payload = tokens.verify(token)
    if payload is None:
        raise UnauthenticatedError("Invalid or expired token")
    return payload
