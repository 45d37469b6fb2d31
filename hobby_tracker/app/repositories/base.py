import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from hobby_tracker.app.errors import InternalError

logger = logging.getLogger(__name__)


class Repository:
    def __init__(self, db: DBSession):
        self.db = db

    @contextmanager
    def transaction(self, action: str) -> Iterator[DBSession]:
        """Run one unit of work: commit on success, roll back on any error.

        Storage errors are logged here and re-raised as InternalError so raw
        driver messages never reach a response.
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure while %s", action)
            raise InternalError() from e
        except Exception:
            self.db.rollback()
            raise
