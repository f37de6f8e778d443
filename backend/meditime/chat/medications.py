from __future__ import annotations

from typing import Iterable

from meditime.chat.text import levenshtein, tokenize


def extract_medication_name(
    text: str,
    names: Iterable[str],
    *,
    max_distance: int = 2,
    max_length_gap: int = 2,
) -> str | None:
    lower = (text or "").lower()
    tokens = tokenize(lower)
    catalog = [(name, name.lower()) for name in names if name]

    # Exact: whole token or substring of the message.
    for name, low in catalog:
        if low in tokens or low in lower:
            return name

    # Approximate, tolerating typos like "asprina".
    for tok in tokens:
        for name, low in catalog:
            if abs(len(tok) - len(low)) <= max_length_gap and levenshtein(tok, low, max_distance) <= max_distance:
                return name

    return None
