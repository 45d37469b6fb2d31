import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from hobby_tracker.app.config import Settings
from hobby_tracker.app.dependencies.auth import get_app_settings, get_current_user, get_token_service
from hobby_tracker.app.dependencies.repositories import get_user_repository
from hobby_tracker.app.repositories.users import UserRepository
from hobby_tracker.app.schemas.auth import LoginRequest, SuccessResponse, TokenPayload, UserOut, UserResponse
from hobby_tracker.app.utils.security import TokenService, clear_auth_cookie, set_auth_cookie

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
):
    user = users.authenticate(body.username, body.password)
    if user is None:
        logger.info("Failed login for %r", body.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    set_auth_cookie(response, tokens.issue(user.id, user.username), settings)
    logger.info("User %r logged in", user.username)
    return UserResponse(user=UserOut(id=user.id, username=user.username))


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    clear_auth_cookie(response, settings)
    return SuccessResponse()


@router.get("/me", response_model=UserResponse)
def me(current_user: TokenPayload = Depends(get_current_user)):
    return UserResponse(user=UserOut(id=current_user.user_id, username=current_user.username))
