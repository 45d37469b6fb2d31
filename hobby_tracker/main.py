import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from hobby_tracker.app.config import Settings, get_settings
from hobby_tracker.app.database import Database
from hobby_tracker.app.errors import AppError, UnauthenticatedError
from hobby_tracker.app.middleware.access_gate import API_PREFIX, LOGIN_PATH, access_gate
from hobby_tracker.app.repositories.users import UserRepository
from hobby_tracker.app.routers import auth as auth_router
from hobby_tracker.app.routers import hobbies as hobbies_router
from hobby_tracker.app.routers import pages as pages_router
from hobby_tracker.app.routers import sessions as sessions_router
from hobby_tracker.app.utils.security import TokenService, clear_auth_cookie, hash_password

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    if settings.uses_insecure_secret:
        logger.warning("SECRET_KEY is not set, tokens are signed with the built-in default key")

    database.migrate()
    db = database.session()
    try:
        UserRepository(db).ensure_user(
            settings.DEFAULT_USERNAME,
            hash_password(settings.DEFAULT_PASSWORD),
        )
    finally:
        db.close()

    logger.info("Hobby Tracker started")
    yield
    database.dispose()


async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
    if request.url.path.startswith(API_PREFIX):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    # Drop the stale cookie, otherwise the gate sends /login straight back to the app
    response = RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    clear_auth_cookie(response, request.app.state.settings)
    return response


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Hobby Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL)
    app.state.tokens = TokenService(settings.SECRET_KEY, settings.ACCESS_TOKEN_EXPIRE_DAYS)

    app.middleware("http")(access_gate)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(UnauthenticatedError, unauthenticated_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
    app.include_router(hobbies_router.router, prefix="/api", tags=["hobbies"])
    app.include_router(sessions_router.router, prefix="/api", tags=["sessions"])
    app.include_router(pages_router.router)

    return app


logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s  %(message)s",
    datefmt="%H:%M:%S",
)

app = create_app()
