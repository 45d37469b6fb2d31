from datetime import datetime, timezone
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession

from hobby_tracker.app.errors import NotFoundError, ValidationError
from hobby_tracker.app.models.hobby import Hobby
from hobby_tracker.app.models.session import Session
from hobby_tracker.app.repositories.base import Repository


class HobbySummary(NamedTuple):
    hobby: Hobby
    total_time_spent: int
    session_count: int


def get_owned_hobby(db: DBSession, user_id: int, hobby_id: int) -> Hobby:
    """Get a hobby owned by the user, or raise NotFoundError.

    A hobby that exists but belongs to someone else is reported exactly like
    a missing one.
    """
    hobby = db.scalar(
        select(Hobby).where(Hobby.id == hobby_id, Hobby.user_id == user_id)
    )
    if hobby is None:
        raise NotFoundError("Hobby not found")
    return hobby


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


class HobbyRepository(Repository):
    def list_for_user(self, user_id: int) -> list[HobbySummary]:
        """All hobbies of the user, newest first, with totals over their sessions."""
        total_time_spent = func.coalesce(func.sum(Session.duration), 0)
        session_count = func.count(Session.id)
        stmt = (
            select(Hobby, total_time_spent, session_count)
            .outerjoin(Session, Session.hobby_id == Hobby.id)
            .where(Hobby.user_id == user_id)
            .group_by(Hobby.id)
            .order_by(Hobby.created_at.desc(), Hobby.id.desc())
        )
        with self.transaction("listing hobbies") as db:
            rows = db.execute(stmt).all()
        return [
            HobbySummary(hobby, int(total), int(count))
            for hobby, total, count in rows
        ]

    def create(
        self,
        user_id: int,
        name: str | None,
        description: str | None = None,
        category: str | None = None,
    ) -> Hobby:
        hobby = Hobby(
            user_id=user_id,
            name=_clean_name(name),
            description=description or None,
            category=category or None,
        )
        with self.transaction("creating hobby") as db:
            db.add(hobby)
        return hobby

    def get(self, user_id: int, hobby_id: int) -> Hobby:
        with self.transaction("fetching hobby") as db:
            return get_owned_hobby(db, user_id, hobby_id)

    def update(
        self,
        user_id: int,
        hobby_id: int,
        name: str | None,
        description: str | None = None,
        category: str | None = None,
    ) -> Hobby:
        name = _clean_name(name)
        with self.transaction("updating hobby") as db:
            hobby = get_owned_hobby(db, user_id, hobby_id)
            hobby.name = name
            hobby.description = description or None
            hobby.category = category or None
            hobby.updated_at = datetime.now(timezone.utc)
        return hobby

    def delete(self, user_id: int, hobby_id: int) -> None:
        with self.transaction("deleting hobby") as db:
            hobby = get_owned_hobby(db, user_id, hobby_id)
            db.delete(hobby)
