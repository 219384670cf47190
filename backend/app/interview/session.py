from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from threading import Lock


@dataclass
class SessionEntry:
    controller: object
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    active: bool = True
    recording: bool = False


class InterviewSessionRegistry:
    """
    Live interview sessions keyed by session id. A session turns inactive
    when its result is recorded and is swept once it has been idle for the
    configured TTL. Sessions that never finish are swept after a longer
    idle TTL.
    """

    def __init__(self):
        self._lock = Lock()
        self._sessions: dict[str, SessionEntry] = {}

    def register(self, session_id: str, controller) -> None:
        with self._lock:
            self._sessions[session_id] = SessionEntry(controller=controller)

    def touch(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.updated_at = time.time()

    def claim_recording(self, session_id: str) -> bool:
        """One live recording per session at a time."""
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None or entry.recording:
                return False
            entry.recording = True
            entry.updated_at = time.time()
            return True

    def release_recording(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.recording = False

    def mark_inactive(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.active = False
                entry.updated_at = time.time()

    def get(self, session_id: str) -> SessionEntry | None:
        with self._lock:
            entry = self._sessions.get(session_id)
            return replace(entry) if entry is not None else None

    def get_controller(self, session_id: str):
        entry = self.get(session_id)
        return entry.controller if entry is not None else None

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for entry in self._sessions.values() if entry.active)

    def cleanup_inactive(self, ttl_sec: float, idle_ttl_sec: float | None = None) -> int:
        """
        Drop finished sessions idle for ttl_sec, and abandoned active ones idle
        for idle_ttl_sec (four times the TTL when not given). Sessions
        mid-recording are never swept.
        """
        ttl = max(30.0, float(ttl_sec or 900.0))
        idle_ttl = max(ttl, float(idle_ttl_sec or ttl * 4))
        now = time.time()
        with self._lock:
            stale = [
                session_id
                for session_id, entry in self._sessions.items()
                if not entry.recording
                and entry.updated_at <= now - (idle_ttl if entry.active else ttl)
            ]
            for session_id in stale:
                del self._sessions[session_id]
        return len(stale)


session_registry = InterviewSessionRegistry()
