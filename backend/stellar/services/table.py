"""Generic table accessor used by the resource routers."""

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from stellar.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordNotFoundError(LookupError):
    """No row exists for the requested primary key."""

    def __init__(self, resource: str, record_id: int):
        super().__init__(f"{resource} {record_id} not found")
        self.resource = resource
        self.record_id = record_id


class ResourceTable(Generic[ModelT]):
    """Create/read/update/delete access to one table.

    Each mutating call commits its own unit of work on the given session.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    @property
    def resource_name(self) -> str:
        return self.model.__name__

    def create(self, data: dict[str, Any]) -> ModelT:
        record = self.model(**data)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.debug(f"Created {self.resource_name} {record.id}")
        return record

    def get(self, record_id: int) -> Optional[ModelT]:
        return self.db.get(self.model, record_id)

    def get_all(self) -> list[ModelT]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def update(self, record_id: int, data: dict[str, Any]) -> ModelT:
        """Apply ``data`` to the row. Raises RecordNotFoundError."""
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.resource_name, record_id)
        for field, value in data.items():
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: int) -> None:
        """Remove the row. Raises RecordNotFoundError."""
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.resource_name, record_id)
        self.db.delete(record)
        self.db.commit()
        logger.debug(f"Deleted {self.resource_name} {record_id}")
