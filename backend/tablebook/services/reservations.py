# backend/tablebook/services/reservations.py
"""
Reservation repository.

Thin query layer over the reservations table. Every mutation commits
once; database failures are rolled back and surface as StorageError.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Reservations as DBReservations
from .errors import NotFound, ValidationError, storage_guard

CANCELLED = "cancelled"


class ReservationRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_range(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[DBReservations]:
        """Reservations ordered by (date, time); "all" or None skips the status filter."""
        query = select(DBReservations)
        if date_from:
            query = query.where(DBReservations.date >= date_from)
        if date_to:
            query = query.where(DBReservations.date <= date_to)
        if status and status != "all":
            query = query.where(DBReservations.status == status)
        query = query.order_by(DBReservations.date.asc(), DBReservations.time.asc())

        with storage_guard(self.db, "list reservations"):
            return list(self.db.scalars(query))

    def exists(self, id: str) -> bool:
        with storage_guard(self.db, "load reservation"):
            return self.db.get(DBReservations, id) is not None

    def get_by_id(self, id: str) -> DBReservations:
        with storage_guard(self.db, "load reservation"):
            obj = self.db.get(DBReservations, id)
        if obj is None:
            raise NotFound("reservation", id)
        return obj

    def insert(self, fields: dict) -> DBReservations:
        obj = DBReservations(**fields)
        with storage_guard(self.db, "create reservation"):
            self.db.add(obj)
            try:
                self.db.commit()
            except IntegrityError as exc:
                # The primary key is the only unique constraint
                self.db.rollback()
                raise ValidationError(["id already exists"]) from exc
        return obj

    def update(self, id: str, fields: dict) -> DBReservations:
        obj = self.get_by_id(id)
        with storage_guard(self.db, "update reservation"):
            for key, value in fields.items():
                if key == "id":
                    continue
                setattr(obj, key, value)
            self.db.commit()
        return obj

    def delete(self, id: str) -> DBReservations:
        obj = self.get_by_id(id)
        with storage_guard(self.db, "delete reservation"):
            self.db.delete(obj)
            self.db.commit()
        return obj

    def count_active_at(self, date: str, time: str, excluding_id: Optional[str] = None) -> int:
        """Non-cancelled reservations at exactly (date, time)."""
        query = (
            select(func.count())
            .select_from(DBReservations)
            .where(
                DBReservations.date == date,
                DBReservations.time == time,
                DBReservations.status != CANCELLED,
            )
        )
        if excluding_id is not None:
            query = query.where(DBReservations.id != excluding_id)

        with storage_guard(self.db, "count reservations"):
            return self.db.scalar(query) or 0

    def count_active_by_time(self, date: str) -> dict[str, int]:
        """{"HH:MM": active count} for one day."""
        query = (
            select(DBReservations.time, func.count())
            .where(
                DBReservations.date == date,
                DBReservations.status != CANCELLED,
            )
            .group_by(DBReservations.time)
        )
        with storage_guard(self.db, "count reservations"):
            return {time: count for time, count in self.db.execute(query)}
