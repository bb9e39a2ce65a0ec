# backend/tablebook/services/settings_store.py
"""
Singleton documents kept in the kv table.

"settings" -> RestaurantSettings (opening hours, slot size, capacity)
"closed"   -> ClosedDays (one-off closed dates, weekly closures)

patch() shallow-merges the supplied fields over the stored document and
writes the merged result back in one commit. Omitted fields keep their
stored value.
"""

import json
import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..models import KeyValue
from ..schemas.settings import (
    ClosedDays,
    ClosedDaysUpdate,
    RestaurantSettings,
    RestaurantSettingsUpdate,
)
from .errors import ValidationError, storage_guard

logger = logging.getLogger(__name__)


def _pydantic_errors(exc: PydanticValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages


class _DocumentStore:
    key: str
    model: type[BaseModel]
    update_model: type[BaseModel]

    def __init__(self, db: Session):
        self.db = db

    def _load(self) -> dict:
        """Stored document; a missing or unreadable row reads as empty."""
        with storage_guard(self.db, f"load {self.key}"):
            row = self.db.get(KeyValue, self.key)
        if row is None:
            return {}
        try:
            data = json.loads(row.json)
        except json.JSONDecodeError:
            logger.warning(f"Stored document {self.key!r} is not valid JSON, using defaults")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self):
        data = self._load()
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning(
                f"Stored document {self.key!r} is invalid, using defaults: "
                f"{_pydantic_errors(exc)}"
            )
            return self.model()

    def patch(self, changes: dict):
        try:
            update = self.update_model.model_validate(changes or {})
        except PydanticValidationError as exc:
            raise ValidationError(_pydantic_errors(exc)) from exc

        supplied = update.model_dump(exclude_unset=True, exclude_none=True)
        merged = self.model.model_validate({**self.get().model_dump(), **supplied})

        with storage_guard(self.db, f"save {self.key}"):
            row = self.db.get(KeyValue, self.key)
            if row is None:
                self.db.add(KeyValue(key=self.key, json=merged.model_dump_json()))
            else:
                row.json = merged.model_dump_json()
            self.db.commit()

        logger.info(f"Document {self.key!r} updated: fields={sorted(supplied)}")
        return merged


class SettingsStore(_DocumentStore):
    key = "settings"
    model = RestaurantSettings
    update_model = RestaurantSettingsUpdate

    def get(self) -> RestaurantSettings:
        return super().get()

    def patch(self, changes: dict) -> RestaurantSettings:
        return super().patch(changes)


class ClosureStore(_DocumentStore):
    key = "closed"
    model = ClosedDays
    update_model = ClosedDaysUpdate

    def get(self) -> ClosedDays:
        return super().get()

    def patch(self, changes: dict) -> ClosedDays:
        return super().patch(changes)

    def is_date_closed(self, value: str) -> bool:
        return self.get().is_date_closed(value)
