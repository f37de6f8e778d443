from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace

from sqlalchemy.orm import Session

from meditime import crud, models
from meditime.chat.faq import match_faq
from meditime.chat.formatter import format_medication
from meditime.chat.intent import classify_intent
from meditime.chat.medications import extract_medication_name
from meditime.chat.safety import REFUSAL_MESSAGE, detect_symptom_advice
from meditime.chat.session_memory import SessionState, SessionStore
from meditime.chat.small_talk import match_small_talk
from meditime.chat.topics import match_topic
from meditime.config.chatbot import ChatbotConfig, get_chatbot_config
from meditime.errors import StoreError

_logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Lo siento, no pude encontrar información sobre eso. ¿Puedes reformular?"

STAGE_TOPIC = "topic"
STAGE_SMALL_TALK = "small_talk"
STAGE_SYMPTOM_REFUSAL = "symptom_refusal"
STAGE_FAQ = "faq"
STAGE_MEDICATION = "medication"
STAGE_FALLBACK = "fallback"


@dataclass(frozen=True)
class TurnResult:
    parts: list[str]
    stage: str
    medication: str | None = None
    intent: str | None = None
    session: SessionState | None = field(default=None, compare=False)


class ChatOrchestrator:
    """Runs one chat turn through the matching cascade and records it in the history."""

    def __init__(
        self,
        sessions: SessionStore,
        config: ChatbotConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.sessions = sessions
        self.config = config or get_chatbot_config()
        self.rng = rng or random.Random()

    async def handle_message(self, db: Session, client_key: str, message: str) -> TurnResult:
        text = (message or "").strip()
        state = self.sessions.get_or_create(client_key)
        result, state = self._route(db, text, state)
        state = self.sessions.set(state)

        try:
            crud.add_history(db, text, result.parts)
        except StoreError:
            _logger.exception("history append failed client=%s stage=%s", client_key, result.stage)

        _logger.info(
            "chat turn client=%s stage=%s medication=%s intent=%s parts=%d",
            client_key,
            result.stage,
            result.medication,
            result.intent,
            len(result.parts),
        )
        return replace(result, session=state)

    def _route(self, db: Session, text: str, state: SessionState) -> tuple[TurnResult, SessionState]:
        topic = match_topic(text, state.active_topic)
        state = replace(state, active_topic=topic.active_topic)
        if topic.answer:
            return TurnResult(parts=[topic.answer], stage=STAGE_TOPIC), state

        small = match_small_talk(text, rng=self.rng, max_distance=self.config.small_talk_max_distance)
        if small is not None:
            return TurnResult(parts=small, stage=STAGE_SMALL_TALK), state

        is_advice, symptom = detect_symptom_advice(text)
        if is_advice:
            _logger.info("refused symptom advice symptom=%r", symptom)
            return TurnResult(parts=[REFUSAL_MESSAGE], stage=STAGE_SYMPTOM_REFUSAL), state

        answer = match_faq(text, crud.list_faqs(db), max_distance=self.config.faq_max_distance)
        if answer is not None:
            return TurnResult(parts=[answer], stage=STAGE_FAQ), state

        name = extract_medication_name(
            text,
            crud.list_medication_names(db),
            max_distance=self.config.medication_max_distance,
            max_length_gap=self.config.medication_max_length_gap,
        )
        name = name or state.last_medication_name
        if name:
            state = replace(state, last_medication_name=name)
            intent = classify_intent(text)
            med = crud.get_medication(db, name)
            reply = format_medication(med, intent) if med else f'No encontré información sobre "{name}".'
            return TurnResult(parts=[reply], stage=STAGE_MEDICATION, medication=name, intent=intent), state

        return TurnResult(parts=[FALLBACK_MESSAGE], stage=STAGE_FALLBACK), state

    def list_faqs(self, db: Session) -> list[models.Faq]:
        return crud.list_faqs(db, sort_by_question=True)

    def list_history(self, db: Session, limit: int | None = None) -> list[models.HistoryEntry]:
        return crud.list_history(db, limit=limit or self.config.history_limit)

    def clear_history(self, db: Session, client_key: str | None = None) -> int:
        deleted = crud.clear_history(db)
        if client_key:
            self.sessions.delete(client_key)
        _logger.info("history cleared rows=%d client=%s", deleted, client_key)
        return deleted
