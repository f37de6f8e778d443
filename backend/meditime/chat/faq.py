from __future__ import annotations

from typing import Iterable, Protocol

from meditime.chat.text import levenshtein, normalize_full


class FaqLike(Protocol):
    question: str
    answer: str


def match_faq(text: str, faqs: Iterable[FaqLike], *, max_distance: int = 6) -> str | None:
    """Answer of the first FAQ whose normalized question is within `max_distance` edits."""
    msg = normalize_full(text)
    if not msg:
        return None
    for faq in faqs:
        if levenshtein(msg, normalize_full(faq.question), max_distance) <= max_distance:
            return faq.answer
    return None
