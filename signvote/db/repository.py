"""
Storage access for signature records

Every SQLAlchemy failure leaves this module as StorageFailure so callers
never see driver-level detail.
"""
import logging
from typing import Any, Optional, Sequence
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Signature
from ..core.errors import StorageConflict, StorageFailure

logger = logging.getLogger(__name__)

COLUMNS = tuple(column.name for column in Signature.__table__.columns)
MIN_ID, MAX_ID = -(2 ** 63), 2 ** 63 - 1


def _column(name: str):
    if name not in COLUMNS:
        raise ValueError(f"Unknown signature column: {name}")
    return getattr(Signature, name)


class SignatureRepository:
    """Insert-only repository over the signatures table"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, **fields: Any) -> int:
        """
        Insert a new signature row

        Returns:
            The auto-assigned id

        Raises:
            StorageConflict: device_uuid or device_fingerprint already stored
            StorageFailure: any other storage error
        """
        for name in fields:
            _column(name)

        record = Signature(**fields)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Signature insert hit a uniqueness constraint", extra={"error": str(e.orig)})
            raise StorageConflict(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Signature insert failed: {e}")
            raise StorageFailure(str(e)) from e
        return record.id

    def find_by(self, column: str, value: Any) -> Optional[Signature]:
        """First record whose column equals value, or None"""
        attr = _column(column)
        try:
            return self.db.query(Signature).filter(attr == value).order_by(Signature.id).first()
        except SQLAlchemyError as e:
            logger.error(f"Signature lookup by {column} failed: {e}")
            raise StorageFailure(str(e)) from e

    def find_by_or(self, column_a: str, value_a: Any, column_b: str, value_b: Any) -> list[Signature]:
        """All records matching either column_a == value_a or column_b == value_b"""
        attr_a, attr_b = _column(column_a), _column(column_b)
        try:
            return (
                self.db.query(Signature)
                .filter(or_(attr_a == value_a, attr_b == value_b))
                .order_by(Signature.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Signature lookup by {column_a}/{column_b} failed: {e}")
            raise StorageFailure(str(e)) from e

    def count(self) -> int:
        try:
            return self.db.query(func.count(Signature.id)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"Signature count failed: {e}")
            raise StorageFailure(str(e)) from e

    def list_all(
        self,
        columns: Optional[Sequence[str]] = None,
        order_by: str = "id",
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Project every record onto a subset of columns

        Args:
            columns: Column names to select (all columns when omitted)
            order_by: Column to sort by
            descending: Sort direction
        """
        names = list(columns) if columns else list(COLUMNS)
        attrs = [_column(name) for name in names]
        # id breaks ties in the same direction
        sort_keys = [_column(order_by), Signature.id]
        sort_keys = [key.desc() if descending else key.asc() for key in sort_keys]

        try:
            rows = self.db.query(*attrs).order_by(*sort_keys).all()
        except SQLAlchemyError as e:
            logger.error(f"Signature listing failed: {e}")
            raise StorageFailure(str(e)) from e
        return [dict(zip(names, row)) for row in rows]

    def find_by_id(self, signature_id: int) -> Optional[Signature]:
        # No row can carry an id outside the 64-bit INTEGER range
        if not MIN_ID <= signature_id <= MAX_ID:
            return None
        try:
            return self.db.get(Signature, signature_id)
        except SQLAlchemyError as e:
            logger.error(f"Signature lookup by id failed: {e}")
            raise StorageFailure(str(e)) from e
