from pydantic import BaseModel, ConfigDict

from hobby_tracker.app.schemas.common import UtcDatetime


class HobbyIn(BaseModel):
    # Optional here so a missing name surfaces as a 400 from the repository
    name: str | None = None
    description: str | None = None
    category: str | None = None


class HobbyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str | None
    category: str | None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class HobbyWithStats(HobbyOut):
    total_time_spent: int
    session_count: int


class HobbyResponse(BaseModel):
    hobby: HobbyOut


class HobbyListResponse(BaseModel):
    hobbies: list[HobbyWithStats]
