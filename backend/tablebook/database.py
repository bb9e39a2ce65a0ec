# backend/tablebook/database.py

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .models import KeyValue, Reservations, metadata
from .schemas.settings import ClosedDays, RestaurantSettings

logger = logging.getLogger(__name__)


def make_engine(url: str, **kwargs) -> Engine:
    if make_url(url).get_backend_name() != "sqlite":
        return create_engine(url, **kwargs)

    # check_same_thread=False: FastAPI runs sync endpoints in a thread pool
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        **kwargs,
    )

    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = make_engine(settings.resolved_database_url)

# expire_on_commit=False keeps a deleted row readable for the response body
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DEMO_RESERVATIONS = [
    ("Anwar Charles", "+44 7700 900111", "2024-12-09", "15:00", 3, "waiting", ""),
    ("Jai Schwartz", "+44 7700 900222", "2024-12-11", "15:00", 4, "confirmed", ""),
    ("Woody Mason", "+44 7700 900333", "2024-12-12", "15:00", 5, "confirmed", ""),
    ("Jayne Peters", "+44 7700 900444", "2024-12-09", "19:30", 4, "waiting", ""),
    ("Mathilde Castro", "+44 7700 900555", "2024-12-09", "20:00", 2, "confirmed", ""),
    ("Sianna Bonilla", "+44 7700 900666", "2024-12-11", "20:30", 2, "cancelled", "Customer cancelled"),
]


def init_db(bind: Engine, seed_demo: bool = False) -> None:
    """
    Create tables and seed the singleton documents.

    Existing documents are left untouched. Demo reservations are only
    written into an empty table.
    """
    metadata.create_all(bind)

    with Session(bind) as db:
        if db.get(KeyValue, "settings") is None:
            db.add(KeyValue(key="settings", json=RestaurantSettings().model_dump_json()))
            logger.info("Seeded default restaurant settings")
        if db.get(KeyValue, "closed") is None:
            db.add(KeyValue(key="closed", json=ClosedDays().model_dump_json()))
            logger.info("Seeded default closure calendar")

        if seed_demo:
            count = db.scalar(select(func.count()).select_from(Reservations))
            if not count:
                now = datetime.now(timezone.utc).isoformat()
                for name, phone, day, time, guests, status, notes in DEMO_RESERVATIONS:
                    db.add(Reservations(
                        id=str(uuid.uuid4()),
                        name=name,
                        phone=phone,
                        date=day,
                        time=time,
                        end_time=None,
                        guests=guests,
                        status=status,
                        notes=notes,
                        created_at=now,
                        updated_at=now,
                    ))
                logger.info(f"Seeded {len(DEMO_RESERVATIONS)} demo reservations")

        db.commit()
