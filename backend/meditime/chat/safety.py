from __future__ import annotations

import re

from meditime.chat.text import normalize_full


# "que tomo para la fiebre", "puedo tomar algo por el dolor", ...
_SYMPTOM_ADVICE_RE = re.compile(
    r"^(?:que\s+)?(?:puedo\s+)?(?:tomo|tomar)\s+(?:para|por)?\s*(?:los|las|el|la)?\s*(.+)$"
)

REFUSAL_MESSAGE = "Lo siento, no puedo recomendar medicamentos. Consulta con un profesional de la salud."


def detect_symptom_advice(text: str) -> tuple[bool, str]:
    m = _SYMPTOM_ADVICE_RE.match(normalize_full(text))
    if m:
        return True, m.group(1).strip()
    return False, ""
