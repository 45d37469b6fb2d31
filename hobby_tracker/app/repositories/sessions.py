import datetime

from sqlalchemy import select

from hobby_tracker.app.errors import ValidationError
from hobby_tracker.app.models.session import Session
from hobby_tracker.app.repositories.base import Repository
from hobby_tracker.app.repositories.hobbies import get_owned_hobby


class SessionRepository(Repository):
    """Sessions are reached only through a hobby the caller owns."""

    def list_for_hobby(self, user_id: int, hobby_id: int) -> list[Session]:
        stmt = (
            select(Session)
            .where(Session.hobby_id == hobby_id)
            .order_by(Session.date.desc(), Session.created_at.desc(), Session.id.desc())
        )
        with self.transaction("listing sessions") as db:
            get_owned_hobby(db, user_id, hobby_id)
            return list(db.scalars(stmt))

    def create(
        self,
        user_id: int,
        hobby_id: int,
        duration: int | None,
        date: datetime.date | None,
        notes: str | None = None,
    ) -> Session:
        if duration is None or date is None:
            raise ValidationError("Duration and date are required")
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        session = Session(
            hobby_id=hobby_id,
            duration=duration,
            date=date,
            notes=notes or None,
        )
        with self.transaction("logging session") as db:
            get_owned_hobby(db, user_id, hobby_id)
            db.add(session)
        return session
