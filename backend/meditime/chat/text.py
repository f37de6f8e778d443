from __future__ import annotations

import re
import unicodedata

from rapidfuzz.distance import Levenshtein

_TOKEN_RE = re.compile(r"[a-záéíóúüñ]+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_SPACES_RE = re.compile(r"\s+")


def levenshtein(a: str, b: str, max_distance: int | None = None) -> int:
    """
    Minimum single-character insertions, deletions and substitutions turning `a` into `b`.

    With `max_distance`, any distance above it is reported as `max_distance + 1`.
    """
    if max_distance is not None and abs(len(a) - len(b)) > max_distance:
        return max_distance + 1
    return Levenshtein.distance(a, b, score_cutoff=max_distance)


def normalize_light(text: str) -> str:
    return (text or "").strip().lower()


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_full(text: str) -> str:
    """Lowercase, drop accents, `¿?¡!` and any other symbol, collapse whitespace."""
    cleaned = _NON_ALNUM_RE.sub("", strip_accents(normalize_light(text)).replace("\t", " ").replace("\n", " "))
    return _SPACES_RE.sub(" ", cleaned).strip()


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall((text or "").lower())
