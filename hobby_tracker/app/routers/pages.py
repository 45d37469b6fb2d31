import datetime
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from hobby_tracker.app.config import Settings
from hobby_tracker.app.dependencies.auth import get_app_settings, get_current_user, get_token_service
from hobby_tracker.app.dependencies.repositories import (
    get_hobby_repository,
    get_session_repository,
    get_user_repository,
)
from hobby_tracker.app.errors import NotFoundError, ValidationError
from hobby_tracker.app.repositories.hobbies import HobbyRepository
from hobby_tracker.app.repositories.sessions import SessionRepository
from hobby_tracker.app.repositories.users import UserRepository
from hobby_tracker.app.schemas.auth import TokenPayload
from hobby_tracker.app.utils.formatting import format_minutes
from hobby_tracker.app.utils.security import TokenService, clear_auth_cookie, set_auth_cookie

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["minutes"] = format_minutes

router = APIRouter(include_in_schema=False)


def _redirect(path: str, error: str | None = None) -> RedirectResponse:
    if error:
        path = f"{path}?{urlencode({'error': error})}"
    return RedirectResponse(path, status_code=status.HTTP_303_SEE_OTHER)


def _parse_duration(value: str) -> int | None:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Duration must be a positive number of minutes")


def _parse_date(value: str) -> datetime.date | None:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

@router.get("/")
def index():
    return _redirect("/dashboard")


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, error: str | None = None):
    return templates.TemplateResponse(request, "login.html", {"error": error})


@router.post("/login")
def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
):
    user = users.authenticate(username.strip(), password)
    if user is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid username or password", "username": username},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    response = _redirect("/dashboard")
    set_auth_cookie(response, tokens.issue(user.id, user.username), settings)
    return response


@router.post("/logout")
def logout_submit(settings: Settings = Depends(get_app_settings)):
    response = _redirect("/login")
    clear_auth_cookie(response, settings)
    return response


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    error: str | None = None,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    summaries = hobbies.list_for_user(current_user.user_id)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "user": current_user,
            "summaries": summaries,
            "total_minutes": sum(s.total_time_spent for s in summaries),
            "error": error,
        },
    )


@router.post("/dashboard/hobbies")
def dashboard_create_hobby(
    name: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    try:
        hobbies.create(current_user.user_id, name, description, category)
    except ValidationError as e:
        return _redirect("/dashboard", e.message)
    return _redirect("/dashboard")


@router.get("/dashboard/hobbies/{hobby_id}", response_class=HTMLResponse)
def hobby_detail(
    request: Request,
    hobby_id: int,
    error: str | None = None,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
    sessions: SessionRepository = Depends(get_session_repository),
):
    try:
        hobby = hobbies.get(current_user.user_id, hobby_id)
        hobby_sessions = sessions.list_for_hobby(current_user.user_id, hobby_id)
    except NotFoundError as e:
        return _redirect("/dashboard", e.message)

    return templates.TemplateResponse(
        request,
        "hobby.html",
        {
            "user": current_user,
            "hobby": hobby,
            "sessions": hobby_sessions,
            "total_minutes": sum(s.duration for s in hobby_sessions),
            "today": datetime.date.today().isoformat(),
            "error": error,
        },
    )


@router.post("/dashboard/hobbies/{hobby_id}/edit")
def hobby_edit(
    hobby_id: int,
    name: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    detail_path = f"/dashboard/hobbies/{hobby_id}"
    try:
        hobbies.update(current_user.user_id, hobby_id, name, description, category)
    except ValidationError as e:
        return _redirect(detail_path, e.message)
    except NotFoundError as e:
        return _redirect("/dashboard", e.message)
    return _redirect(detail_path)


@router.post("/dashboard/hobbies/{hobby_id}/delete")
def hobby_delete(
    hobby_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    try:
        hobbies.delete(current_user.user_id, hobby_id)
    except NotFoundError as e:
        return _redirect("/dashboard", e.message)
    return _redirect("/dashboard")


@router.post("/dashboard/hobbies/{hobby_id}/sessions")
def hobby_log_session(
    hobby_id: int,
    duration: str = Form(""),
    date: str = Form(""),
    notes: str = Form(""),
    current_user: TokenPayload = Depends(get_current_user),
    sessions: SessionRepository = Depends(get_session_repository),
):
    detail_path = f"/dashboard/hobbies/{hobby_id}"
    try:
        sessions.create(
            current_user.user_id,
            hobby_id,
            duration=_parse_duration(duration),
            date=_parse_date(date),
            notes=notes,
        )
    except ValidationError as e:
        return _redirect(detail_path, e.message)
    except NotFoundError as e:
        return _redirect("/dashboard", e.message)
    return _redirect(detail_path)
