import logging
from pathlib import Path
from typing import Iterator

from alembic import command
from alembic.config import Config
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session as DBSession, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "alembic"


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one relational store.

    Built once by the application factory and disposed on shutdown; request
    handlers get sessions from it through ``get_db``.
    """

    def __init__(self, url: str):
        self.url = make_url(url)
        engine_kwargs: dict = {}
        if self.url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if self.is_memory:
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **engine_kwargs)
        if self.url.get_backend_name() == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def is_memory(self) -> bool:
        return self.url.get_backend_name() == "sqlite" and self.url.database in (None, "", ":memory:")

    def migrate(self) -> None:
        """Bring the schema up to date by running alembic ``upgrade head``."""
        if self.url.get_backend_name() == "sqlite" and not self.is_memory:
            Path(self.url.database).parent.mkdir(parents=True, exist_ok=True)

        cfg = Config()
        cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
        # configparser interpolation treats "%" as special
        url = self.url.render_as_string(hide_password=False).replace("%", "%%")
        cfg.set_main_option("sqlalchemy.url", url)
        with self.engine.begin() as connection:
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, "head")
        logger.info("Database schema is up to date (%s)", self.url.render_as_string())

    def session(self) -> DBSession:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[DBSession]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
