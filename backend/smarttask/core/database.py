import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Storage:
    """Owns the engine. Built once per app and passed to whoever needs sessions."""

    def __init__(self, database_url: str, echo: bool = False):
        kwargs = {"echo": echo}
        is_sqlite = database_url.startswith("sqlite")
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
                # in-memory databases vanish with their connection
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        self.url = database_url
        self.engine = create_engine(database_url, **kwargs)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    def init_db(self) -> None:
        # IMPORTANT: Import models so metadata contains tables
        import smarttask.models  # noqa: F401
        SQLModel.metadata.create_all(self.engine)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_session(request: Request):
    with get_storage(request).session() as session:
        yield session
