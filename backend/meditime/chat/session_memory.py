from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta


_DEFAULT_TTL_MINUTES = 30
_DEFAULT_SWEEP_EVERY = 100


@dataclass(frozen=True)
class SessionState:
    client_key: str
    last_medication_name: str | None = None
    active_topic: str | None = None
    last_seen_at: datetime = field(default_factory=datetime.utcnow)


class SessionStore:
    """
    Per-client conversation memory, keyed by an opaque client key.

    Entries idle for longer than `ttl_minutes` are dropped lazily on access, and all
    expired entries are swept every `sweep_every` writes. A TTL of 0 keeps entries forever.
    """

    def __init__(self, ttl_minutes: int = _DEFAULT_TTL_MINUTES, sweep_every: int = _DEFAULT_SWEEP_EVERY) -> None:
        self.ttl = timedelta(minutes=ttl_minutes) if ttl_minutes > 0 else None
        self.sweep_every = max(1, sweep_every)
        self._writes = 0
        self._states: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def _is_expired(self, state: SessionState, now: datetime) -> bool:
        return self.ttl is not None and now - state.last_seen_at > self.ttl

    def get(self, client_key: str) -> SessionState | None:
        if not client_key:
            return None
        now = datetime.utcnow()
        with self._lock:
            state = self._states.get(client_key)
            if state and self._is_expired(state, now):
                del self._states[client_key]
                return None
            return state

    def get_or_create(self, client_key: str) -> SessionState:
        return self.get(client_key) or SessionState(client_key=client_key)

    def set(self, state: SessionState) -> SessionState:
        if not state.client_key:
            return state
        touched = replace(state, last_seen_at=datetime.utcnow())
        with self._lock:
            self._states[state.client_key] = touched
            self._writes += 1
            if self._writes >= self.sweep_every:
                self._writes = 0
                self._evict_locked(touched.last_seen_at)
        return touched

    def delete(self, client_key: str) -> bool:
        with self._lock:
            return self._states.pop(client_key, None) is not None

    def _evict_locked(self, now: datetime) -> int:
        expired = [key for key, state in self._states.items() if self._is_expired(state, now)]
        for key in expired:
            del self._states[key]
        return len(expired)

    def evict_expired(self) -> int:
        now = datetime.utcnow()
        with self._lock:
            return self._evict_locked(now)
