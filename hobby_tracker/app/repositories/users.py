import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from hobby_tracker.app.models.user import User
from hobby_tracker.app.repositories.base import Repository
from hobby_tracker.app.utils.security import verify_password

logger = logging.getLogger(__name__)


class UserRepository(Repository):
    def find_by_username(self, username: str) -> User | None:
        with self.transaction("looking up user") as db:
            return db.scalar(select(User).where(User.username == username))

    def ensure_user(self, username: str, password_hash: str) -> None:
        """Create the account unless it already exists.

        Two workers starting at once may both try the insert; the loser's
        unique-constraint violation is expected and ignored.
        """
        if self.find_by_username(username) is not None:
            return
        self.db.add(User(username=username, password_hash=password_hash))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("User %r was created concurrently, skipping seed", username)
            return
        logger.info("Default user created: %s", username)

    def authenticate(self, username: str, password: str) -> User | None:
        user = self.find_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user
