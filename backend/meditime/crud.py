import logging
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import EmptyHistoryError, StoreError

_logger = logging.getLogger(__name__)


@contextmanager
def _store_call(db: Session, operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        _logger.error("store operation failed op=%s error=%s", operation, exc)
        raise StoreError(f"{operation} failed: {exc}") from exc


# Medication CRUD
def list_medication_names(db: Session) -> list[str]:
    with _store_call(db, "list_medication_names"):
        rows = db.query(models.Medication.name).order_by(models.Medication.id.asc()).all()
    return [row[0] for row in rows if row and row[0]]


def get_medication(db: Session, name: str) -> models.Medication | None:
    with _store_call(db, "get_medication"):
        return db.query(models.Medication).filter(models.Medication.name == name).first()


def upsert_medication(db: Session, medication: schemas.MedicationCreate) -> bool:
    """Insert the medication unless one with the same name already exists."""
    name = medication.name.strip()
    with _store_call(db, "upsert_medication"):
        existing = (
            db.query(models.Medication.id)
            .filter(func.lower(models.Medication.name) == name.lower())
            .first()
        )
        if existing:
            return False
        data = medication.model_dump()
        data["name"] = name
        db.add(models.Medication(**data))
        db.commit()
    return True


# FAQ CRUD
def list_faqs(db: Session, *, sort_by_question: bool = False) -> list[models.Faq]:
    with _store_call(db, "list_faqs"):
        query = db.query(models.Faq)
        if sort_by_question:
            query = query.order_by(models.Faq.question.asc())
        else:
            query = query.order_by(models.Faq.id.asc())
        return query.all()


def add_faq(db: Session, faq: schemas.FaqCreate) -> bool:
    question = faq.question.strip()
    with _store_call(db, "add_faq"):
        existing = db.query(models.Faq.id).filter(models.Faq.question == question).first()
        if existing:
            return False
        db.add(models.Faq(question=question, answer=faq.answer))
        db.commit()
    return True


# History CRUD
def add_history(db: Session, question: str, answers: list[str]) -> list[models.HistoryEntry]:
    """Store one history row per response part, in a single commit."""
    now = datetime.utcnow()
    entries = [models.HistoryEntry(question=question, answer=answer, created_at=now) for answer in answers]
    with _store_call(db, "add_history"):
        db.add_all(entries)
        db.commit()
    return entries


def list_history(db: Session, limit: int = 50) -> list[models.HistoryEntry]:
    with _store_call(db, "list_history"):
        return (
            db.query(models.HistoryEntry)
            .order_by(models.HistoryEntry.created_at.desc(), models.HistoryEntry.id.desc())
            .limit(limit)
            .all()
        )


def count_history(db: Session) -> int:
    with _store_call(db, "count_history"):
        return int(db.query(func.count(models.HistoryEntry.id)).scalar() or 0)


def clear_history(db: Session) -> int:
    if count_history(db) == 0:
        raise EmptyHistoryError("No hay historial para borrar.")
    with _store_call(db, "clear_history"):
        deleted = db.query(models.HistoryEntry).delete(synchronize_session=False)
        db.commit()
    return int(deleted or 0)
