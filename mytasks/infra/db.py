from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from mytasks.config import SETTINGS
from mytasks.domain.errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    new_engine = create_engine(database_url, connect_args={"timeout": 5})

    # The widget process reads the same file while the app writes to it.
    @event.listens_for(new_engine, "connect")
    def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    return new_engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = make_engine(SETTINGS.database_url)
SessionLocal = make_session_factory(engine)


def init_db(bind: Engine = engine) -> None:
    from . import models  # noqa: F401

    try:
        with bind.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind)
    except SQLAlchemyError as exc:
        raise StoreUnavailable(f"Cannot open task store: {exc}") from exc
    logger.info("Task store ready at %s", bind.url.render_as_string(hide_password=True))
