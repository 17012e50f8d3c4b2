import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase
from .config import settings

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Indexes for the overlap query (room + date range) and guest email lookups.
_BOOKING_INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_bookings_guest_email ON bookings(guest_email);",
    "CREATE INDEX IF NOT EXISTS ix_bookings_room_dates ON bookings(room_id, check_in_date, check_out_date);",
]


def ensure_schema():
    """
    Create missing tables and the indexes used by availability lookups.

    Intended for environments that are not managed by Alembic (local SQLite,
    demo deployments). Index creation is best-effort: a failure is logged and
    never blocks application startup.
    """
    # Import for side effects: registers the tables on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    for ddl in _BOOKING_INDEXES:
        try:
            with engine.begin() as conn:
                conn.exec_driver_sql(ddl)
        except SQLAlchemyError as exc:
            logger.warning("Could not ensure index (%s): %s", ddl, exc)


def begin_write(db: Session) -> None:
    """
    Take the database write lock now rather than at the first INSERT.

    Only SQLite needs this: it ignores ``FOR UPDATE`` and runs plain SELECTs
    outside any transaction. Other backends rely on row locks.
    """
    if db.get_bind().dialect.name == "sqlite":
        db.execute(text("BEGIN IMMEDIATE"))
