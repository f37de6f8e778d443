from __future__ import annotations

from typing import Any

from meditime.chat.intent import (
    INTENT_ADVERSE_EFFECTS,
    INTENT_COMMON_EFFECTS,
    INTENT_INTERACTIONS,
    INTENT_PRESENTATION,
    INTENT_USES,
)


def join_natural(items: list[str] | None) -> str:
    """["A", "B", "C"] -> "A, B y C"."""
    values = [str(item).strip() for item in (items or []) if str(item).strip()]
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    return f"{', '.join(values[:-1])} y {values[-1]}"


def _field(med: Any, name: str) -> list[str]:
    return [str(v) for v in (getattr(med, name, None) or []) if str(v).strip()]


def format_full(med: Any) -> str:
    parts: list[str] = []
    presentation = (getattr(med, "presentation", None) or "").strip()
    uses = _field(med, "uses")
    effects = _field(med, "common_effects")
    adverse = _field(med, "adverse_effects")
    interactions = _field(med, "interactions")

    if presentation:
        parts.append(f"Se presenta como {presentation}.")
    if uses:
        parts.append(f"Suele utilizarse para {join_natural(uses)}.")
    if effects:
        parts.append(f"Entre los efectos más frecuentes están {join_natural(effects)}.")
    if adverse:
        parts.append(f"Atención: puede provocar {join_natural(adverse)}.")
    if interactions:
        parts.append(f"Evita combinarlo con {join_natural(interactions)}.")
    if not parts:
        parts.append("Todavía no tengo más datos registrados sobre este medicamento.")

    return f"¡Hola! Te cuento sobre {med.name}:\n" + "\n".join(parts)


def format_medication(med: Any, intent: str) -> str:
    name = med.name

    if intent == INTENT_PRESENTATION:
        presentation = (getattr(med, "presentation", None) or "").strip()
        if presentation:
            return f"El {name} se presenta como {presentation}."
        return f"No tengo datos de presentación para {name}."

    if intent == INTENT_USES:
        uses = _field(med, "uses")
        if uses:
            return f"El {name} se usa para {join_natural(uses)}."
        return f"No dispongo de información sobre los usos de {name}."

    if intent == INTENT_COMMON_EFFECTS:
        effects = _field(med, "common_effects")
        if effects:
            return f"Entre los efectos comunes de {name} están {join_natural(effects)}."
        return f"No tengo datos de efectos para {name}."

    if intent == INTENT_ADVERSE_EFFECTS:
        adverse = _field(med, "adverse_effects")
        if adverse:
            return f"Atención: {name} puede causar {join_natural(adverse)}."
        return f"No cuento con información sobre efectos adversos de {name}."

    if intent == INTENT_INTERACTIONS:
        interactions = _field(med, "interactions")
        if interactions:
            return f"No mezcles {name} con {join_natural(interactions)}."
        return f"No hay registros de interacciones para {name}."

    return format_full(med)
