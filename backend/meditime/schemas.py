from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --------------------
# Medication
# --------------------


class MedicationBase(BaseModel):
    # Seed files use Spanish keys.
    name: str = Field(alias="nombre")
    presentation: Optional[str] = Field(default=None, alias="presentacion")
    uses: List[str] = Field(default_factory=list, alias="usos")
    common_effects: List[str] = Field(default_factory=list, alias="efectos")
    adverse_effects: List[str] = Field(default_factory=list, alias="adversos")
    interactions: List[str] = Field(default_factory=list, alias="interacciones")

    model_config = ConfigDict(populate_by_name=True)


class MedicationCreate(MedicationBase):
    pass


# --------------------
# FAQ
# --------------------


class FaqBase(BaseModel):
    question: str = Field(alias="texto")
    answer: str = Field(alias="respuesta")

    model_config = ConfigDict(populate_by_name=True)


class FaqCreate(FaqBase):
    pass


class Faq(BaseModel):
    id: int
    question: str
    answer: str

    model_config = ConfigDict(from_attributes=True)


# --------------------
# History
# --------------------


class HistoryEntry(BaseModel):
    id: int
    question: str
    answer: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClearHistoryOut(BaseModel):
    ok: bool
    message: str
    deleted: int = 0


# --------------------
# Chat
# --------------------


MAX_MESSAGE_LENGTH = 1000


class ChatIn(BaseModel):
    message: str = Field(max_length=MAX_MESSAGE_LENGTH)


class ChatOut(BaseModel):
    respuestas: List[str]
    stage: str
    medication: Optional[str] = None
    intent: Optional[str] = None
