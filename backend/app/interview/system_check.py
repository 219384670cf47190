"""
Hardware self-check that gates entry to the interview.

Steps run in order (network, camera & microphone, speech output). A media
failure is blocking: the remaining steps are skipped and the report is not
ready. Missing speech output is only a warning.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from typing import List

from app.interview.errors import HardwareAccessError

logger = logging.getLogger("app.interview.system_check")

STATUS_WAITING = "waiting"
STATUS_SUCCESS = "success"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"


@dataclass
class CheckStep:
    id: str
    label: str
    status: str = STATUS_WAITING
    error: str = ""


@dataclass
class SystemCheckReport:
    steps: List[CheckStep] = field(default_factory=list)
    ready: bool = False
    permission_error: bool = False
    checked_at: float = 0.0

    def step(self, step_id: str) -> CheckStep | None:
        return next((s for s in self.steps if s.id == step_id), None)

    def to_dict(self) -> dict:
        return asdict(self)


class ClientReportedMediaDevice:
    """Media device whose permission outcome was reported by the browser."""

    def __init__(self, granted: bool, error: str = ""):
        self.granted = granted
        self.error = error
        self.released = True

    @asynccontextmanager
    async def acquire(self):
        if not self.granted:
            raise HardwareAccessError(self.error or "Camera/microphone permission denied")
        self.released = False
        try:
            yield self
        finally:
            self.released = True


def _new_report() -> SystemCheckReport:
    return SystemCheckReport(
        steps=[
            CheckStep(id="conn", label="Network Latency"),
            CheckStep(id="media", label="Camera & Microphone"),
            CheckStep(id="ai", label="Neural Engine"),
        ]
    )


async def run_system_check(device, speech_synthesis_available: bool, network_ok: bool = True) -> SystemCheckReport:
    report = _new_report()

    conn = report.step("conn")
    if not network_ok:
        conn.status, conn.error = STATUS_ERROR, "Network unreachable."
        report.checked_at = time.time()
        return report
    conn.status = STATUS_SUCCESS

    media = report.step("media")
    try:
        # Released immediately so the recorder can take the devices later.
        async with device.acquire():
            pass
        media.status = STATUS_SUCCESS
    except HardwareAccessError as exc:
        logger.warning("system check media denied | err=%s", exc)
        media.status, media.error = STATUS_ERROR, "Access denied. Please enable permissions."
        report.permission_error = True
        report.checked_at = time.time()
        return report

    ai = report.step("ai")
    if speech_synthesis_available:
        ai.status = STATUS_SUCCESS
    else:
        ai.status, ai.error = STATUS_WARNING, "Audio output not supported"

    report.ready = True
    report.checked_at = time.time()
    return report
