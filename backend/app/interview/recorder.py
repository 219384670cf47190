"""
Recording / transcription adapter.

Runs one timed answer clip: a preparation countdown, an optional spoken
question, a bounded recording with live transcription, then delivery of
(video bytes, transcript, integrity events). Media and speech handles are
ports so the same adapter drives a browser-backed WebSocket session or a test
double.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol

from core.config import (
    INTERRUPTION_PROBABILITY,
    PREP_COUNTDOWN_SEC,
    PROCESSING_DELAY_SEC,
    RECORDING_LIMIT_SEC,
)
from app.models import IntegrityEvent, IntegrityEventType, Severity

logger = logging.getLogger("app.interview.recorder")

TRANSCRIPT_PLACEHOLDER = (
    "(Transcript unavailable in this browser environment. "
    "AI analysis will simulate based on audio patterns.)"
)
MIN_TRANSCRIPT_CHARS = 5

# Interruptions may only fire between 10s and 25s into the answer.
INTERRUPTION_WINDOW_SEC = (10, 25)

INTERRUPTION_SCRIPTS = (
    "Sorry to interrupt, but I need you to be more specific. Give me the exact metric.",
    "Pause there. That sounds like a generalization. What was the actual impact?",
    "Let me stop you. You're using corporate jargon. Explain it to me like I'm five.",
    "Hold on. Move directly to the ROI. We are short on time.",
)


class RecorderState(str, Enum):
    PREPARING = "PREPARING"
    AI_SPEAKING = "AI_SPEAKING"
    RECORDING = "RECORDING"
    INTERRUPTED = "INTERRUPTED"
    PROCESSING = "PROCESSING"


@dataclass(frozen=True)
class RecordingResult:
    video: bytes
    transcript: str
    integrity_events: tuple[IntegrityEvent, ...]


class MediaStream(Protocol):
    def start(self) -> None: ...
    def pause(self) -> None: ...
    def resume(self) -> None: ...
    async def stop(self) -> bytes: ...


class MediaDevice(Protocol):
    def acquire(self): ...


class Transcriber(Protocol):
    def start(self) -> None: ...
    def stop(self) -> str: ...


class Speaker(Protocol):
    async def speak(self, text: str) -> None: ...


def resolve_transcript(text: str | None) -> str:
    cleaned = str(text or "").strip()
    if len(cleaned) <= MIN_TRANSCRIPT_CHARS:
        return TRANSCRIPT_PLACEHOLDER
    return cleaned


# ---------- BUFFERED PORTS ----------

class BufferedMediaStream:
    """Collects media chunks pushed by a remote client while recording."""

    def __init__(self):
        self._chunks: list[bytes] = []
        self.recording = False
        self.paused = False
        self.stopped = False

    def start(self) -> None:
        self._chunks = []
        self.recording = True

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def push(self, chunk: bytes) -> bool:
        if not self.recording or self.paused or self.stopped:
            return False
        self._chunks.append(bytes(chunk))
        return True

    async def stop(self) -> bytes:
        self.recording = False
        self.stopped = True
        return b"".join(self._chunks)


class BufferedMediaDevice:
    def __init__(self):
        self.stream: BufferedMediaStream | None = None
        self.released = False

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[BufferedMediaStream]:
        self.stream = BufferedMediaStream()
        self.released = False
        try:
            yield self.stream
        finally:
            self.stream.stopped = True
            self.released = True


class LiveTranscriber:
    """Holds the most recent interim transcript pushed by the client."""

    def __init__(self):
        self.active = False
        self._text = ""

    def start(self) -> None:
        self.active = True
        self._text = ""

    def update(self, text: str) -> None:
        if self.active:
            self._text = str(text or "")

    def stop(self) -> str:
        self.active = False
        return self._text


# ---------- ADAPTER ----------

class RecordingAdapter:

    def __init__(
        self,
        question_text: str,
        device: MediaDevice,
        transcriber: Optional[Transcriber] = None,
        speaker: Optional[Speaker] = None,
        recording_limit: int = RECORDING_LIMIT_SEC,
        prep_seconds: int = PREP_COUNTDOWN_SEC,
        processing_delay: float = PROCESSING_DELAY_SEC,
        tick_seconds: float = 1.0,
        is_practice: bool = False,
        interruption_probability: float = INTERRUPTION_PROBABILITY,
        rng: random.Random | None = None,
        on_update: Callable[[dict], Awaitable[None]] | None = None,
    ):
        self.question_text = question_text
        self.device = device
        self.transcriber = transcriber
        self.speaker = speaker
        self.recording_limit = max(1, int(recording_limit))
        self.processing_delay = max(0.0, float(processing_delay))
        self.tick_seconds = max(0.0, float(tick_seconds))
        self.is_practice = is_practice
        self.interruption_probability = interruption_probability
        self.rng = rng or random.Random()
        self.on_update = on_update

        self.state = RecorderState.PREPARING
        self.prep_count = max(0, int(prep_seconds))
        self.time_left = self.recording_limit
        self.integrity_events: list[IntegrityEvent] = []
        self.interruption_triggered = False

        self._finish_requested = asyncio.Event()
        self._started = False

    # -------------------------
    # CLIENT SIGNALS
    # -------------------------

    def finish(self) -> bool:
        """User pressed "finish answer". Only honoured while recording."""
        if self.state != RecorderState.RECORDING:
            return False
        self._finish_requested.set()
        return True

    def on_visibility_change(self, hidden: bool) -> IntegrityEvent | None:
        if not hidden:
            return None
        return self._record_integrity(IntegrityEventType.TAB_SWITCH, Severity.HIGH)

    def on_window_blur(self) -> IntegrityEvent | None:
        return self._record_integrity(IntegrityEventType.WINDOW_BLUR, Severity.LOW)

    def on_mouse_exit(self) -> IntegrityEvent | None:
        return self._record_integrity(IntegrityEventType.MOUSE_EXIT, Severity.LOW)

    def _record_integrity(self, event_type: IntegrityEventType, severity: Severity) -> IntegrityEvent | None:
        if self.state != RecorderState.RECORDING:
            return None
        event = IntegrityEvent(
            timestamp=int(time.time() * 1000),
            type=event_type,
            severity=severity,
        )
        self.integrity_events.append(event)
        logger.info("integrity event | type=%s severity=%s", event_type.value, severity.value)
        return event

    # -------------------------
    # LIFECYCLE
    # -------------------------

    async def run(self) -> RecordingResult:
        if self._started:
            raise RuntimeError("RecordingAdapter.run() may only be called once")
        self._started = True

        async with self.device.acquire() as stream:
            transcribing = False
            try:
                await self._prepare()

                if self.speaker is not None:
                    await self._set_state(RecorderState.AI_SPEAKING)
                    await self.speaker.speak(self.question_text)

                stream.start()
                if self.transcriber is not None:
                    self.transcriber.start()
                    transcribing = True
                await self._set_state(RecorderState.RECORDING)

                await self._record(stream)

                await self._set_state(RecorderState.PROCESSING)
                video = await stream.stop()
                text = self.transcriber.stop() if transcribing else ""
                transcribing = False
            finally:
                if transcribing:
                    self.transcriber.stop()

            if self.processing_delay:
                await asyncio.sleep(self.processing_delay)

        return RecordingResult(
            video=video,
            transcript=resolve_transcript(text),
            integrity_events=tuple(self.integrity_events),
        )

    async def _prepare(self) -> None:
        while self.prep_count > 0:
            await self._emit()
            await asyncio.sleep(self.tick_seconds)
            self.prep_count -= 1

    async def _record(self, stream: MediaStream) -> None:
        while True:
            if self.time_left <= 0:
                logger.info("recording limit reached | limit=%s", self.recording_limit)
                return
            if not self._finish_requested.is_set():
                try:
                    await asyncio.wait_for(self._finish_requested.wait(), timeout=self.tick_seconds)
                except asyncio.TimeoutError:
                    pass
            if self._finish_requested.is_set():
                logger.info("recording finished by user | time_left=%s", self.time_left)
                return

            elapsed = self.recording_limit - self.time_left
            self.time_left -= 1
            if self._should_interrupt(elapsed):
                await self._interrupt(stream)
            await self._emit()

    def _should_interrupt(self, elapsed: int) -> bool:
        if self.interruption_triggered or self.is_practice or self.speaker is None:
            return False
        if self.interruption_probability <= 0.0:
            return False
        low, high = INTERRUPTION_WINDOW_SEC
        if not (low < elapsed < high):
            return False
        return self.rng.random() < self.interruption_probability

    async def _interrupt(self, stream: MediaStream) -> None:
        self.interruption_triggered = True
        stream.pause()
        await self._set_state(RecorderState.INTERRUPTED)
        await self.speaker.speak(self.rng.choice(INTERRUPTION_SCRIPTS))
        stream.resume()
        await self._set_state(RecorderState.RECORDING)

    async def _set_state(self, state: RecorderState) -> None:
        self.state = state
        await self._emit()

    async def _emit(self) -> None:
        if self.on_update is None:
            return
        await self.on_update(self.snapshot())

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "prep_count": self.prep_count,
            "time_left": self.time_left,
            "integrity_events": len(self.integrity_events),
        }
