import datetime

from pydantic import BaseModel, ConfigDict, StrictInt

from hobby_tracker.app.schemas.common import UtcDatetime


class SessionIn(BaseModel):
    # Strict so JSON booleans and numeric strings are not coerced to minutes
    duration: StrictInt | None = None
    date: datetime.date | None = None
    notes: str | None = None


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hobby_id: int
    duration: int
    notes: str | None
    date: datetime.date
    created_at: UtcDatetime


class SessionResponse(BaseModel):
    session: SessionOut


class SessionListResponse(BaseModel):
    sessions: list[SessionOut]
