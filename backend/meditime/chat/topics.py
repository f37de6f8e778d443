"""
Topic sub-dialogues.

A topic becomes active when its trigger keyword shows up and stays active while
the user keeps asking about it. Follow-up questions ("¿y si se cae?") are
answered from the topic's canned rules even though they no longer name the
product.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class TopicRule:
    name: str
    pattern: re.Pattern
    answer: str


@dataclass(frozen=True)
class Topic:
    name: str
    trigger: re.Pattern
    rules: tuple[TopicRule, ...]


@dataclass(frozen=True)
class TopicMatch:
    active_topic: str | None
    answer: str | None = None


PILL_DISPENSER = Topic(
    name="pastillero",
    trigger=re.compile(r"pastillero", re.I),
    rules=(
        TopicRule(
            "power",
            re.compile(
                r"\b(luz|electricidad|el[eé]ctric\w*|corriente|enchuf\w*|bater[ií]as?|pilas?|carga\w*|apag\w*|enciend\w*)\b",
                re.I,
            ),
            "El pastillero MediTime funciona con una batería recargable que dura unos 7 días. "
            "Cárgalo con el cable USB incluido; si se queda sin batería conserva la programación de tus tomas.",
        ),
        TopicRule(
            "materials",
            re.compile(r"\b(material\w*|hecho|fabricad\w*|pl[aá]stico|metal|resistente)\b", re.I),
            "El pastillero está fabricado en plástico ABS libre de BPA, con compartimentos sellados "
            "que protegen las pastillas del polvo y la humedad.",
        ),
        TopicRule(
            "mishandling",
            re.compile(r"\b(ca[ií]das?|cae\w*|cay\w*|golpe\w*|romp\w*|rot[oa]s?|moj\w*|agua)\b", re.I),
            "Si el pastillero se cae o se moja, sécalo, revisa que las tapas cierren bien y comprueba "
            "que la pantalla enciende. Si alguna tapa no cierra, no lo uses y contacta con soporte.",
        ),
        TopicRule(
            "placement",
            re.compile(
                r"(d[oó]nde\s+(?:lo\s+)?(?:pongo|coloco|guardo|dejo)|\b(coloc\w*|ubic\w*|guard\w*|sol|calor|humedad)\b)",
                re.I,
            ),
            "Colócalo en un lugar seco y fresco, lejos del sol directo y de fuentes de calor, "
            "y fuera del alcance de los niños. Evita el baño por la humedad.",
        ),
    ),
)

TOPICS: tuple[Topic, ...] = (PILL_DISPENSER,)


def match_topic(text: str, active_topic: str | None, topics: tuple[Topic, ...] = TOPICS) -> TopicMatch:
    msg = (text or "").lower()

    for topic in topics:
        if topic.trigger.search(msg):
            active_topic = topic.name
            break

    current = next((t for t in topics if t.name == active_topic), None)
    if current is None:
        return TopicMatch(active_topic=None)

    for rule in current.rules:
        if rule.pattern.search(msg):
            return TopicMatch(active_topic=current.name, answer=rule.answer)

    if not current.trigger.search(msg):
        return TopicMatch(active_topic=None)
    return TopicMatch(active_topic=current.name)
