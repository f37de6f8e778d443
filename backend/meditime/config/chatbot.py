from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ChatbotConfig:
    small_talk_max_distance: int = 2
    faq_max_distance: int = 6
    medication_max_distance: int = 2
    medication_max_length_gap: int = 2
    history_limit: int = 50
    session_ttl_minutes: int = 30  # 0 keeps sessions forever


def _repo_backend_root() -> Path:
    # backend/meditime/config/chatbot.py -> backend/
    return Path(__file__).resolve().parents[2]


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return {}

    # Minimal YAML reader for `backend/config/chatbot.yaml`.
    # Supports a top-level `chatbot:` mapping of scalar `key: value` pairs.
    section: dict[str, Any] = {}
    in_section = False
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if not in_section and stripped == "chatbot:":
            in_section = True
            continue
        if in_section:
            if not line.startswith("  "):
                in_section = False
                continue
            kv = stripped.split(":", 1)
            if len(kv) != 2:
                continue
            key = kv[0].strip()
            val = kv[1].strip()
            if "#" in val:
                val = val.split("#", 1)[0].strip()
            try:
                section[key] = int(val)
            except ValueError:
                section[key] = val
    return {"chatbot": section} if section else {}


def _env_int(key: str) -> int | None:
    if key not in os.environ:
        return None
    try:
        return int(os.getenv(key) or "")
    except ValueError:
        return None


def _pick(env_key: str, file_value: Any, default: int) -> int:
    env_value = _env_int(env_key)
    if env_value is not None:
        return env_value
    try:
        return int(file_value)
    except (TypeError, ValueError):
        return default


@lru_cache(maxsize=1)
def get_chatbot_config() -> ChatbotConfig:
    path = Path(os.getenv("CHATBOT_CONFIG_FILE") or (_repo_backend_root() / "config" / "chatbot.yaml"))
    data = _load_yaml(path)
    section = data.get("chatbot") if isinstance(data.get("chatbot"), dict) else {}
    defaults = ChatbotConfig()

    return ChatbotConfig(
        small_talk_max_distance=_pick(
            "CHATBOT_SMALL_TALK_MAX_DISTANCE",
            section.get("small_talk_max_distance"),
            defaults.small_talk_max_distance,
        ),
        faq_max_distance=_pick("CHATBOT_FAQ_MAX_DISTANCE", section.get("faq_max_distance"), defaults.faq_max_distance),
        medication_max_distance=_pick(
            "CHATBOT_MEDICATION_MAX_DISTANCE",
            section.get("medication_max_distance"),
            defaults.medication_max_distance,
        ),
        medication_max_length_gap=_pick(
            "CHATBOT_MEDICATION_MAX_LENGTH_GAP",
            section.get("medication_max_length_gap"),
            defaults.medication_max_length_gap,
        ),
        history_limit=_pick("CHATBOT_HISTORY_LIMIT", section.get("history_limit"), defaults.history_limit),
        session_ttl_minutes=max(
            0,
            _pick("CHATBOT_SESSION_TTL_MINUTES", section.get("session_ttl_minutes"), defaults.session_ttl_minutes),
        ),
    )
