"""Document store - collections de documents sans schéma au-dessus de SQLAlchemy"""

import logging
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.orm import Session

from todo_app.core.errors import DocumentNotFound, StoreError
from todo_app.models.document import Document

logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "$timestamp"


# ============ ENCODAGE DES TIMESTAMPS ============

def encode_value(value: Any) -> Any:
    """Les dates deviennent {"$timestamp": iso}, le reste passe tel quel"""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return {TIMESTAMP_KEY: value.isoformat()}
    if isinstance(value, date):
        # date seule -> minuit UTC
        return {TIMESTAMP_KEY: datetime.combine(value, time.min, tzinfo=timezone.utc).isoformat()}
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {TIMESTAMP_KEY}:
        return datetime.fromisoformat(value[TIMESTAMP_KEY])
    return value


def encode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: encode_value(value) for key, value in fields.items()}


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


# ============ STORE ============

class DocumentStore:
    """
    Insert, lecture par égalité, mise à jour partielle et suppression.

    `match` sur update/delete est vérifié dans la même requête SQL que
    l'id : un document qui ne correspond pas est traité comme absent.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        document = Document(id=record_id, collection=collection, fields=encode_fields(fields))
        try:
            self.db.add(document)
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("insert", collection, e)
        return record_id

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            document = self._find(collection, record_id, None)
        except SQLAlchemyError as e:
            self._fail("get", collection, e)
        if document is None:
            return None
        return decode_fields(document.fields)

    def query_by_equality(self, collection: str, field: str, value: Any) -> List[Tuple[str, Dict[str, Any]]]:
        try:
            documents = (
                self.db.query(Document)
                .filter(Document.collection == collection, _field_equals(field, value))
                .order_by(Document.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("query", collection, e)
        return [(document.id, decode_fields(document.fields)) for document in documents]

    def update_partial(
        self,
        collection: str,
        record_id: str,
        fields: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            document = self._find(collection, record_id, match)
            if document is None:
                raise DocumentNotFound(collection, record_id)
            # JSON n'est pas suivi en place : on réassigne un nouveau dict
            document.fields = {**document.fields, **encode_fields(fields)}
            document.updated_at = datetime.utcnow()
            self.db.commit()
        except StaleDataError:
            # supprimé entre la lecture et l'écriture
            self.db.rollback()
            raise DocumentNotFound(collection, record_id)
        except SQLAlchemyError as e:
            self._fail("update", collection, e)

    def delete(self, collection: str, record_id: str, match: Optional[Dict[str, Any]] = None) -> None:
        try:
            document = self._find(collection, record_id, match)
            if document is None:
                raise DocumentNotFound(collection, record_id)
            self.db.delete(document)
            self.db.commit()
        except StaleDataError:
            # supprimé entre la lecture et l'écriture
            self.db.rollback()
            raise DocumentNotFound(collection, record_id)
        except SQLAlchemyError as e:
            self._fail("delete", collection, e)

    # ---- helpers ----

    def _find(self, collection: str, record_id: str, match: Optional[Dict[str, Any]]) -> Optional[Document]:
        query = self.db.query(Document).filter(
            Document.id == record_id,
            Document.collection == collection
        )
        for field, value in (match or {}).items():
            query = query.filter(_field_equals(field, value))
        return query.first()

    def _fail(self, operation: str, collection: str, error: SQLAlchemyError):
        self.db.rollback()
        logger.error(f"Store {operation} failed on {collection}: {error}")
        raise StoreError(f"{operation} {collection}: {error}") from error


def _field_equals(field: str, value: Any):
    # bool avant int : bool est une sous-classe de int
    element = Document.fields[field]
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    return element.as_string() == str(value)
