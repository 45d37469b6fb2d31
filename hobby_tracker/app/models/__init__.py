from hobby_tracker.app.models.user import User
from hobby_tracker.app.models.hobby import Hobby
from hobby_tracker.app.models.session import Session

__all__ = ["User", "Hobby", "Session"]
