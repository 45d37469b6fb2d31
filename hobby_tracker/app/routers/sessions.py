from fastapi import APIRouter, Depends, status

from hobby_tracker.app.dependencies.auth import get_current_user
from hobby_tracker.app.dependencies.repositories import get_session_repository
from hobby_tracker.app.repositories.sessions import SessionRepository
from hobby_tracker.app.schemas.auth import TokenPayload
from hobby_tracker.app.schemas.sessions import SessionIn, SessionListResponse, SessionOut, SessionResponse

router = APIRouter()


@router.get("/hobbies/{hobby_id}/sessions", response_model=SessionListResponse)
def list_sessions(
    hobby_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    sessions: SessionRepository = Depends(get_session_repository),
):
    items = sessions.list_for_hobby(current_user.user_id, hobby_id)
    return SessionListResponse(sessions=[SessionOut.model_validate(s) for s in items])


@router.post(
    "/hobbies/{hobby_id}/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    hobby_id: int,
    body: SessionIn,
    current_user: TokenPayload = Depends(get_current_user),
    sessions: SessionRepository = Depends(get_session_repository),
):
    session = sessions.create(
        current_user.user_id,
        hobby_id,
        duration=body.duration,
        date=body.date,
        notes=body.notes,
    )
    return SessionResponse(session=SessionOut.model_validate(session))
