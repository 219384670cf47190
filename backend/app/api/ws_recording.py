"""
Server-timed recording over a WebSocket.

The browser streams media chunks (binary frames) and JSON signals; the
server owns the countdown, the integrity log and the hand-off to the session
controller.

Client -> server text frames:
    {"type": "transcript", "text": "..."}       latest interim transcript
    {"type": "visibility", "hidden": true}      document visibility change
    {"type": "blur"} / {"type": "mouse_exit"}
    {"type": "finish"}                          user pressed "finish answer"

Server -> client:
    {"type": "recorder_state", "state": ..., "prep_count": ..., "time_left": ...}
    {"type": "integrity_event", ...}
    {"type": "session_update", "session": {...}}
    {"type": "error", "detail": "..."}
"""

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from core.config import PREP_COUNTDOWN_SEC, PROCESSING_DELAY_SEC, RECORDING_LIMIT_SEC
from core.logger import log_event
from app.interview.controller import InterviewPhase
from app.interview.errors import HardwareAccessError, InterviewError
from app.interview.recorder import BufferedMediaDevice, LiveTranscriber, RecordingAdapter
from app.interview.session import session_registry

router = APIRouter()
logger = logging.getLogger("app.api.ws_recording")

RECORDABLE_PHASES = (
    InterviewPhase.PRACTICE_RECORDING,
    InterviewPhase.QUESTION,
    InterviewPhase.FOLLOW_UP,
)

TICK_SEC = 1.0


async def _safe_send(websocket: WebSocket, payload: dict) -> None:
    if websocket.client_state != WebSocketState.CONNECTED:
        return
    try:
        await websocket.send_json(payload)
    except Exception as exc:
        logger.warning("recording ws send failed: %s", exc)


async def _reject(websocket: WebSocket, detail: str, code: int) -> None:
    await _safe_send(websocket, {"type": "error", "detail": detail})
    await websocket.close(code=code)


async def _receive_client_signals(
    websocket: WebSocket,
    adapter: RecordingAdapter,
    device: BufferedMediaDevice,
    transcriber: LiveTranscriber,
) -> None:
    while True:
        message = await websocket.receive()
        if message.get("type") == "websocket.disconnect":
            return

        chunk = message.get("bytes")
        if chunk is not None:
            if device.stream is not None:
                device.stream.push(chunk)
            continue

        try:
            payload = json.loads(message.get("text") or "")
        except json.JSONDecodeError as exc:
            logger.warning("recording ws bad frame: %s", exc)
            continue
        if not isinstance(payload, dict):
            continue

        kind = str(payload.get("type") or "")
        event = None
        if kind == "transcript":
            transcriber.update(str(payload.get("text") or ""))
        elif kind == "visibility":
            event = adapter.on_visibility_change(bool(payload.get("hidden")))
        elif kind == "blur":
            event = adapter.on_window_blur()
        elif kind == "mouse_exit":
            event = adapter.on_mouse_exit()
        elif kind == "finish":
            adapter.finish()

        if event is not None:
            await _safe_send(websocket, {
                "type": "integrity_event",
                "timestamp": event.timestamp,
                "event": event.type.value,
                "severity": event.severity.value,
            })


@router.websocket("/ws/interview/{session_id}/recording")
async def recording_ws(websocket: WebSocket, session_id: str):
    await websocket.accept()

    controller = session_registry.get_controller(session_id)
    if controller is None:
        await _reject(websocket, "Invalid interview session", 4404)
        return
    if controller.phase not in RECORDABLE_PHASES:
        await _reject(websocket, f"No recording expected in phase {controller.phase.value}", 4409)
        return
    if not controller.hardware_ready:
        await _reject(websocket, "Hardware check has not passed", 4409)
        return
    if not session_registry.claim_recording(session_id):
        await _reject(websocket, "A recording is already in progress", 4409)
        return

    device = BufferedMediaDevice()
    transcriber = LiveTranscriber()

    async def _on_update(snapshot: dict) -> None:
        await _safe_send(websocket, {"type": "recorder_state", **snapshot})

    adapter = RecordingAdapter(
        question_text=controller.active_prompt or "",
        device=device,
        transcriber=transcriber,
        recording_limit=RECORDING_LIMIT_SEC,
        prep_seconds=PREP_COUNTDOWN_SEC,
        processing_delay=PROCESSING_DELAY_SEC,
        tick_seconds=TICK_SEC,
        is_practice=controller.is_practice,
        on_update=_on_update,
    )
    log_event("recording", "started", session_id, phase=controller.phase.value)

    record_task = asyncio.create_task(adapter.run())
    receive_task = asyncio.create_task(_receive_client_signals(websocket, adapter, device, transcriber))
    try:
        await asyncio.wait({record_task, receive_task}, return_when=asyncio.FIRST_COMPLETED)

        if not record_task.done():
            # Client went away mid-recording; the clip is discarded.
            record_task.cancel()
            await asyncio.gather(record_task, return_exceptions=True)
            log_event("recording", "abandoned", session_id, phase=controller.phase.value)
            return

        receive_task.cancel()
        await asyncio.gather(receive_task, return_exceptions=True)

        try:
            recording = record_task.result()
        except HardwareAccessError as exc:
            await _reject(websocket, str(exc), 4409)
            return

        log_event(
            "recording",
            "completed",
            session_id,
            transcript=recording.transcript,
            integrity_events=len(recording.integrity_events),
            video_bytes=len(recording.video),
        )
        try:
            await controller.submit_recording(recording)
        except InterviewError as exc:
            await _reject(websocket, str(exc), 4409)
            return

        await _safe_send(websocket, {"type": "session_update", "session": controller.snapshot()})
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()
    except WebSocketDisconnect:
        logger.info("recording ws disconnected | session=%s", session_id)
    finally:
        session_registry.release_recording(session_id)
        for task in (record_task, receive_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(record_task, receive_task, return_exceptions=True)
