from fastapi import APIRouter, Depends, status

from hobby_tracker.app.dependencies.auth import get_current_user
from hobby_tracker.app.dependencies.repositories import get_hobby_repository
from hobby_tracker.app.repositories.hobbies import HobbyRepository, HobbySummary
from hobby_tracker.app.schemas.auth import SuccessResponse, TokenPayload
from hobby_tracker.app.schemas.hobbies import (
    HobbyIn,
    HobbyListResponse,
    HobbyOut,
    HobbyResponse,
    HobbyWithStats,
)

router = APIRouter()


def to_hobby_with_stats(summary: HobbySummary) -> HobbyWithStats:
    return HobbyWithStats(
        **HobbyOut.model_validate(summary.hobby).model_dump(),
        total_time_spent=summary.total_time_spent,
        session_count=summary.session_count,
    )


@router.get("/hobbies", response_model=HobbyListResponse)
def list_hobbies(
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    summaries = hobbies.list_for_user(current_user.user_id)
    return HobbyListResponse(hobbies=[to_hobby_with_stats(s) for s in summaries])


@router.post("/hobbies", response_model=HobbyResponse, status_code=status.HTTP_201_CREATED)
def create_hobby(
    body: HobbyIn,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    hobby = hobbies.create(
        current_user.user_id,
        name=body.name,
        description=body.description,
        category=body.category,
    )
    return HobbyResponse(hobby=HobbyOut.model_validate(hobby))


@router.get("/hobbies/{hobby_id}", response_model=HobbyResponse)
def get_hobby(
    hobby_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    hobby = hobbies.get(current_user.user_id, hobby_id)
    return HobbyResponse(hobby=HobbyOut.model_validate(hobby))


@router.put("/hobbies/{hobby_id}", response_model=HobbyResponse)
def update_hobby(
    hobby_id: int,
    body: HobbyIn,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    hobby = hobbies.update(
        current_user.user_id,
        hobby_id,
        name=body.name,
        description=body.description,
        category=body.category,
    )
    return HobbyResponse(hobby=HobbyOut.model_validate(hobby))


@router.delete("/hobbies/{hobby_id}", response_model=SuccessResponse)
def delete_hobby(
    hobby_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    hobbies: HobbyRepository = Depends(get_hobby_repository),
):
    hobbies.delete(current_user.user_id, hobby_id)
    return SuccessResponse()
