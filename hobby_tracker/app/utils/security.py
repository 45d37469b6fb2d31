from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Response
from passlib.context import CryptContext

from hobby_tracker.app.config import Settings
from hobby_tracker.app.schemas.auth import TokenPayload

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class TokenService:
    """Issues and verifies the signed identity token kept in the auth cookie.

    Tokens are stateless: nothing is stored server side, so a token stays
    valid until it expires.
    """

    def __init__(self, secret_key: str, expire_days: int = 7):
        self.secret_key = secret_key
        self.expire_days = expire_days

    def issue(self, user_id: int, username: str, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenPayload | None:
        """Decode the token, or None if it is malformed, tampered with or expired."""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
            return TokenPayload(user_id=int(payload["sub"]), username=payload["username"])
        except (jwt.PyJWTError, KeyError, TypeError, ValueError):
            return None


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
    )
