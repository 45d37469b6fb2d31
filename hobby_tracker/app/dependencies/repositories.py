from fastapi import Depends
from sqlalchemy.orm import Session as DBSession

from hobby_tracker.app.database import get_db
from hobby_tracker.app.repositories.hobbies import HobbyRepository
from hobby_tracker.app.repositories.sessions import SessionRepository
from hobby_tracker.app.repositories.users import UserRepository


def get_user_repository(db: DBSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_hobby_repository(db: DBSession = Depends(get_db)) -> HobbyRepository:
    return HobbyRepository(db)


def get_session_repository(db: DBSession = Depends(get_db)) -> SessionRepository:
    return SessionRepository(db)
