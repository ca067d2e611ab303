from typing import Any, Dict, List
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from payments_service.domain.exceptions import StoreError
from payments_service.domain.models import build_payment_table
from payments_service.infrastructure.db import metadata
from shared.core import get_logger

logger = get_logger(__name__)

Document = Dict[str, Any]

class PaymentStore:
    """
    Document store for payment records, keyed by the payment identifier.

    Documents are opaque to the store apart from the ``id``, ``type``,
    ``version`` and ``organisation_id`` keys which are copied into their own
    columns. Every driver failure is re-raised as StoreError.
    """

    def __init__(self, db: Session, collection: str):
        self.db = db
        self.collection = collection
        self.table = build_payment_table(collection, metadata)

    def _row_values(self, document: Document) -> Dict[str, Any]:
        return {
            "type": document.get("type", ""),
            "version": document.get("version", 0),
            "organisation_id": document.get("organisation_id", ""),
            "document": document,
        }

    def _write(self, statement, action: str):
        try:
            self.db.execute(statement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store {action} failed on {self.collection}: {e}")
            raise StoreError(f"Store {action} failed") from e

    def _read(self, statement, action: str):
        try:
            return self.db.execute(statement)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store {action} failed on {self.collection}: {e}")
            raise StoreError(f"Store {action} failed") from e

    def insert(self, document: Document) -> None:
        statement = insert(self.table).values(id=document["id"], **self._row_values(document))
        self._write(statement, "insert")

    def find_by_id(self, payment_id: str) -> List[Document]:
        statement = select(self.table.c.document).where(self.table.c.id == payment_id)
        return [row.document for row in self._read(statement, "find")]

    def count_by_id(self, payment_id: str) -> int:
        statement = select(func.count()).select_from(self.table).where(self.table.c.id == payment_id)
        return self._read(statement, "count").scalar_one()

    def update_by_id(self, payment_id: str, document: Document) -> None:
        statement = (
            update(self.table)
            .where(self.table.c.id == payment_id)
            .values(**self._row_values(document))
        )
        self._write(statement, "update")

    def remove_by_id(self, payment_id: str) -> None:
        statement = delete(self.table).where(self.table.c.id == payment_id)
        self._write(statement, "remove")

    def find_all(self) -> List[Document]:
        statement = select(self.table.c.document)
        return [row.document for row in self._read(statement, "find_all")]
