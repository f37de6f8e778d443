from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Union

from meditime.chat.text import levenshtein, normalize_light


@dataclass(frozen=True)
class SingleFixed:
    text: str


@dataclass(frozen=True)
class SingleRandom:
    choices: tuple[str, ...]


@dataclass(frozen=True)
class MultiPart:
    parts: tuple[str, ...]


Reply = Union[SingleFixed, SingleRandom, MultiPart]


@dataclass(frozen=True)
class SmallTalkRule:
    name: str
    phrases: tuple[str, ...]
    reply: Reply


_HISTORY_HINT = (
    "También puedes desplegar las preguntas predefinidas pulsando la flecha junto al campo de entrada "
    "y seleccionando la que necesites. Cada consulta que hagas se guardará automáticamente en tu historial, "
    "al que puedes acceder desde el menú (≡) y borrar con el botón ‘Limpiar historial’."
)

# Table order is priority order.
SMALL_TALK_RULES: tuple[SmallTalkRule, ...] = (
    SmallTalkRule(
        "how_to_use",
        ("cómo te uso", "como te uso"),
        MultiPart(
            (
                "Para usarme, simplemente escribe en el chat el nombre del medicamento o la pregunta que tengas "
                "sobre él (por ejemplo: “¿Para qué sirve la aspirina?”, “¿Qué efectos secundarios tiene la warfarina?”).",
                _HISTORY_HINT,
            )
        ),
    ),
    SmallTalkRule(
        "what_can_i_ask",
        (
            "qué puedo preguntarte",
            "que puedo preguntarte",
            "q puedo preguntarte",
            "que te puedo preguntar",
            "qué te puedo preguntar",
            "que puedo preguntar",
            "qué puedo preguntar",
            "q puedo preguntar",
        ),
        MultiPart(
            (
                "Puedes realizar preguntas que tengas sobre un medicamento (por ejemplo: “¿Para qué sirve la "
                "aspirina?”, “¿Qué efectos secundarios tiene la warfarina?”).",
                _HISTORY_HINT,
            )
        ),
    ),
    SmallTalkRule(
        "greeting",
        ("hola", "ola", "holá", "buenas", "hi", "hello"),
        SingleRandom(
            (
                "¡Hola! ¿Cómo puedo ayudarte hoy?",
                "¡Hola! ¿En qué puedo ayudarte?",
                "¡Buenas! Pregúntame por cualquier medicamento.",
            )
        ),
    ),
    SmallTalkRule(
        "how_are_you",
        ("cómo estás", "como estas", "qué tal", "que tal", "cmo estas"),
        SingleFixed("Estoy bien, gracias por preguntar. ¿En qué más puedo ayudarte?"),
    ),
    SmallTalkRule(
        "thanks",
        ("gracias", "merci", "thank you", "thanks", "thank u", "grasias", "grazias", "graciaz", "graciac"),
        SingleRandom(
            (
                "Por nada, estoy para ayudarte.",
                "¡De nada! Aquí estoy si necesitas algo más.",
            )
        ),
    ),
    SmallTalkRule(
        "what_do_you_do",
        ("qué haces", "que haces", "cómo funcionas", "como funcionas", "cmo funcionas"),
        SingleFixed(
            "Soy el ChatBot de MediTime y puedo proporcionarte información sobre medicamentos, sus usos, "
            "efectos, presentaciones e interacciones, y llevo un historial de tus consultas."
        ),
    ),
)


def render_reply(reply: Reply, rng: random.Random | None = None) -> list[str]:
    if isinstance(reply, MultiPart):
        return list(reply.parts)
    if isinstance(reply, SingleRandom):
        return [(rng or random).choice(reply.choices)]
    return [reply.text]


def match_small_talk(
    text: str,
    *,
    rng: random.Random | None = None,
    max_distance: int = 2,
    rules: tuple[SmallTalkRule, ...] = SMALL_TALK_RULES,
) -> list[str] | None:
    msg = normalize_light(text)
    if not msg:
        return None
    for rule in rules:
        for phrase in rule.phrases:
            if levenshtein(msg, normalize_light(phrase), max_distance) <= max_distance:
                return render_reply(rule.reply, rng)
    return None
