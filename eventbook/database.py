import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from eventbook.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Storage handle built once per process and passed to the request layer"""

    def __init__(self, settings: Settings):
        url = settings.database_url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False, "timeout": 30},
            )
            self._use_immediate_transactions()
        else:
            # Bounded pool, callers queue for a free connection
            self.engine = create_engine(
                url,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=0,
                pool_timeout=30,
                pool_pre_ping=True,
                pool_recycle=300,
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("Database engine initialised (%s)", self.engine.url.render_as_string(hide_password=True))

    def _use_immediate_transactions(self):
        # pysqlite defers BEGIN; take the write lock up front so concurrent
        # bookings serialise instead of failing on lock upgrade.
        @event.listens_for(self.engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            dbapi_connection.execute("PRAGMA foreign_keys = ON")

        @event.listens_for(self.engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        from eventbook import models  # noqa: F401  registers tables on Base

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables initialised")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database connection failed: %s", e)
            return False

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's storage handle"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
