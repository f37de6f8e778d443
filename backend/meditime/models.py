from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from datetime import datetime

from meditime.db import Base


class Medication(Base):
    """
    Reference record for one medication.

    List fields keep the order they were seeded with; the formatter relies on it.
    """

    __tablename__ = "medicamentos"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    presentation = Column(Text, nullable=True)
    uses = Column(JSON, nullable=False, default=list)
    common_effects = Column(JSON, nullable=False, default=list)
    adverse_effects = Column(JSON, nullable=False, default=list)
    interactions = Column(JSON, nullable=False, default=list)


class Faq(Base):
    __tablename__ = "preguntas"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)


class HistoryEntry(Base):
    __tablename__ = "historial"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
