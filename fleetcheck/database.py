# fleetcheck/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL when the platform is configured, or a
shared in-memory SQLite database in demo mode. All models are imported in
create_tables() so every table is created in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fleetcheck.config import settings

DEMO_DATABASE_URL = "sqlite://"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str = None):
    """Engine for `url`; falls back to the demo SQLite database when no URL is given."""
    if not url or url.startswith("sqlite"):
        if not url:
            # One connection shared by every thread so the in-memory data survives
            sqlite_engine = create_engine(
                DEMO_DATABASE_URL,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=False,
            )
        else:
            sqlite_engine = create_engine(url, connect_args={"check_same_thread": False}, echo=False)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL if settings.IS_CONFIGURED else None)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from fleetcheck.models.auth_user import AuthUser, AuthSession   # noqa
    from fleetcheck.models.profile import Profile                    # noqa
    from fleetcheck.models.vehicle import Vehicle                    # noqa
    from fleetcheck.models.checklist import Checklist, ChecklistItem # noqa
    from fleetcheck.models.damage import Damage                      # noqa
    from fleetcheck.models.fuel_log import FuelLog                   # noqa
    from fleetcheck.models.notification import Notification          # noqa

    Base.metadata.create_all(bind=bind or engine)
