from __future__ import annotations

import re

INTENT_USES = "usos"
INTENT_COMMON_EFFECTS = "efectos"
INTENT_ADVERSE_EFFECTS = "adversos"
INTENT_PRESENTATION = "presentacion"
INTENT_INTERACTIONS = "interacciones"
INTENT_FULL = "full"

# First match wins. Adverse effects go before common effects, otherwise
# "efectos adversos" would be answered with the common ones.
_INTENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\busos?\b|para\s+qu[eé]|\bsirve"), INTENT_USES),
    (re.compile(r"\badversos?\b|efectos?\s+secundarios?"), INTENT_ADVERSE_EFFECTS),
    (re.compile(r"efectos?\s+comun(es)?|qu[eé]\s+efectos|\befectos\b"), INTENT_COMMON_EFFECTS),
    (re.compile(r"presentaci[oó]n"), INTENT_PRESENTATION),
    (re.compile(r"interacci[oó]n|interacciones|mezclar|combinar"), INTENT_INTERACTIONS),
]


def classify_intent(text: str) -> str:
    msg = (text or "").lower()
    for pattern, intent in _INTENT_PATTERNS:
        if pattern.search(msg):
            return intent
    return INTENT_FULL
