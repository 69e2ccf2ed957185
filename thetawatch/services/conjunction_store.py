"""
Conjunction Document Store.

Conjunctions go in and come out as plain dicts shaped like the upstream
conjunction documents. Reads are lazy: the table is walked in id order, one
short-lived session per batch, so a caller may write back records while it is
still iterating. Writes replace a whole document keyed by its id, with no
version check (last write wins).
"""
import copy
import logging
import uuid
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy.orm import Session

from thetawatch.core.config import settings
from thetawatch.models.conjunction import (
    Conjunction,
    ID,
    CONJUNCTION_ID,
    SAT1_NORAD_ID,
    SAT2_NORAD_ID,
    NEWEST_RISK_ESTIMATION,
    NEWEST_RISK_PREDICTION,
)

logger = logging.getLogger(__name__)

_COLUMN_KEYS = (
    ID,
    CONJUNCTION_ID,
    SAT1_NORAD_ID,
    SAT2_NORAD_ID,
    NEWEST_RISK_ESTIMATION,
    NEWEST_RISK_PREDICTION,
)
_OPTIONAL_DOCUMENT_KEYS = (NEWEST_RISK_ESTIMATION, NEWEST_RISK_PREDICTION)


def eligibility_criteria(maximum_norad_id: int, conjunction_id: Optional[str] = None) -> List[Any]:
    """
    Filter for conjunctions the suggestion adjustment applies to: both risk
    documents present and both NORAD ids strictly below ``maximum_norad_id``.
    Optionally narrowed to a single ``conjunction_id``.
    """
    criteria = [
        Conjunction.newest_risk_estimation.is_not(None),
        Conjunction.newest_risk_prediction.is_not(None),
    ]
    if conjunction_id is not None:
        criteria.append(Conjunction.conjunction_id == conjunction_id)
    criteria.append(Conjunction.sat1_norad_id < maximum_norad_id)
    criteria.append(Conjunction.sat2_norad_id < maximum_norad_id)
    return criteria


def _to_document(row: Conjunction) -> Dict[str, Any]:
    document = copy.deepcopy(row.attributes or {})
    document[ID] = row.id
    document[CONJUNCTION_ID] = row.conjunction_id
    document[SAT1_NORAD_ID] = row.sat1_norad_id
    document[SAT2_NORAD_ID] = row.sat2_norad_id
    for key in _OPTIONAL_DOCUMENT_KEYS:
        value = getattr(row, key)
        if value is not None:
            document[key] = copy.deepcopy(value)
    return document


def _to_columns(document: Dict[str, Any]) -> Dict[str, Any]:
    values = {key: document.get(key) for key in _COLUMN_KEYS}
    values["attributes"] = {
        key: value for key, value in document.items() if key not in _COLUMN_KEYS
    }
    return values


class ConjunctionStore:
    """Document-style access to the conjunction table."""

    def __init__(self, session_factory: Callable[[], Session], batch_size: Optional[int] = None):
        self._session_factory = session_factory
        self.batch_size = batch_size if batch_size is not None else settings.FIND_BATCH_SIZE
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    def find(self, *criteria: Any) -> Iterator[Dict[str, Any]]:
        """Lazily yield every document matching all ``criteria``, ordered by id."""
        last_id = None
        while True:
            db = self._session_factory()
            try:
                query = db.query(Conjunction).filter(*criteria)
                if last_id is not None:
                    query = query.filter(Conjunction.id > last_id)
                rows = query.order_by(Conjunction.id).limit(self.batch_size).all()
                documents = [_to_document(row) for row in rows]
            finally:
                db.close()

            for document in documents:
                yield document

            if len(documents) < self.batch_size:
                return
            last_id = documents[-1][ID]

    def find_one(self, *criteria: Any) -> Optional[Dict[str, Any]]:
        db = self._session_factory()
        try:
            row = db.query(Conjunction).filter(*criteria).order_by(Conjunction.id).first()
            return _to_document(row) if row is not None else None
        finally:
            db.close()

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one(Conjunction.id == record_id)

    def insert_one(self, document: Dict[str, Any]) -> str:
        """Insert a new document, assigning an id when it has none. Returns the id."""
        document.setdefault(ID, str(uuid.uuid4()))
        db = self._session_factory()
        try:
            db.add(Conjunction(**_to_columns(document)))
            db.commit()
        finally:
            db.close()
        return document[ID]

    def replace_one(self, document: Dict[str, Any]) -> int:
        """
        Replace the stored document that has the same id with ``document``.
        Returns the number of rows matched (0 or 1).
        """
        values = _to_columns(document)
        record_id = values.pop(ID)
        db = self._session_factory()
        try:
            matched = (
                db.query(Conjunction)
                .filter(Conjunction.id == record_id)
                .update(values, synchronize_session=False)
            )
            db.commit()
        finally:
            db.close()

        if matched == 0:
            logger.warning(f"Replace matched no conjunction with id {record_id}")
        return matched
