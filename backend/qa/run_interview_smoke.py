import asyncio
import json
import os
import socket
import subprocess
import sys
import time
from pathlib import Path

import httpx
import websockets

ROOT = Path(__file__).resolve().parents[1]
HOST = "127.0.0.1"
PORT = 9121
BASE_URL = f"http://{HOST}:{PORT}"
REPORT_DIR = ROOT / "qa" / "reports"
REPORT_PATH = REPORT_DIR / "interview_smoke_report.json"


def _wait_port(host: str, port: int, timeout_sec: float = 20.0) -> bool:
    end_at = time.time() + timeout_sec
    while time.time() < end_at:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(0.5)
            if sock.connect_ex((host, port)) == 0:
                return True
        time.sleep(0.2)
    return False


def _start_backend() -> subprocess.Popen:
    env = dict(os.environ)
    env["ENV"] = "development"
    env["PREP_COUNTDOWN_SEC"] = "0"
    env["PROCESSING_DELAY_SEC"] = "0"
    env["RECORDING_LIMIT_SEC"] = "20"
    if not env.get("OPENAI_API_KEY"):
        # Unreachable endpoint: every collaborator call fails and the fallback path is exercised.
        env["OPENAI_BASE_URL"] = "http://127.0.0.1:9"

    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "app.main:app",
        "--host",
        HOST,
        "--port",
        str(PORT),
    ]
    return subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


async def _record_answer(session_id: str, transcript: str, timeout_sec: float = 90.0) -> tuple[dict | None, list[str]]:
    url = f"ws://{HOST}:{PORT}/ws/interview/{session_id}/recording"
    seen = []
    async with websockets.connect(url) as ws:
        end_at = asyncio.get_event_loop().time() + timeout_sec
        sent = False
        while asyncio.get_event_loop().time() < end_at:
            remaining = max(0.1, end_at - asyncio.get_event_loop().time())
            try:
                msg = await asyncio.wait_for(ws.recv(), timeout=remaining)
            except Exception:
                break
            data = json.loads(msg)
            event_type = str(data.get("type") or "")
            seen.append(event_type)
            if event_type == "error":
                return None, seen
            if event_type == "recorder_state" and data.get("state") == "RECORDING" and not sent:
                await ws.send(b"\x1a\x45\xdf\xa3smoke")
                await ws.send(json.dumps({"type": "transcript", "text": transcript}))
                await ws.send(json.dumps({"type": "visibility", "hidden": True}))
                await ws.send(json.dumps({"type": "finish"}))
                sent = True
            if event_type == "session_update":
                return data.get("session") or {}, seen
    return None, seen


async def _run_smoke() -> dict:
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        session = (await client.post("/api/interview/start", json={"job_id": "j1"})).json()
        session_id = session["session_id"]

        check = (await client.post(
            f"/api/interview/{session_id}/system-check",
            json={"media_permission_granted": True, "speech_synthesis_available": True},
        )).json()
        advance = await client.post(f"/api/interview/{session_id}/advance", json={"action": "start_assessment"})

        first, first_seen = await _record_answer(
            session_id,
            "I would freeze the dashboard, diff the joins against the raw ledger and brief the CEO.",
        )
        final = first
        follow_seen: list[str] = []
        if first and first.get("phase") == "FOLLOW_UP":
            final, follow_seen = await _record_answer(session_id, "The join fanned out on a duplicated region key.")

        pipeline = (await client.get("/api/recruiter/pipeline", params={"blind": True})).json()

    result = (final or {}).get("result") or {}
    ok = (
        bool(check.get("ready"))
        and advance.status_code == 200
        and (final or {}).get("phase") == "COMPLETE"
        and 0 <= int(result.get("overall_score", -1)) <= 100
        and any(row.get("candidate_id") == session.get("candidate_id") for row in pipeline.get("candidates", []))
    )
    return {
        "ok": ok,
        "session_id": session_id,
        "first_seen": first_seen,
        "follow_up_seen": follow_seen,
        "overall_score": result.get("overall_score"),
        "recommendation": result.get("ai_recommendation"),
        "integrity_events": len(result.get("integrity_log") or []),
    }


def _stop_process(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=6)
    except subprocess.TimeoutExpired:
        proc.kill()


def main() -> None:
    REPORT_DIR.mkdir(parents=True, exist_ok=True)
    started = time.time()
    proc = _start_backend()

    try:
        if not _wait_port(HOST, PORT, timeout_sec=25):
            report = {
                "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                "duration_sec": round(time.time() - started, 2),
                "all_pass": False,
                "error": "Backend did not become ready",
            }
            REPORT_PATH.write_text(json.dumps(report, indent=2), encoding="utf-8")
            print(json.dumps(report, indent=2))
            sys.exit(1)

        result = asyncio.run(_run_smoke())
        report = {
            "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "duration_sec": round(time.time() - started, 2),
            "all_pass": bool(result.get("ok")),
            "result": result,
        }
        REPORT_PATH.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(json.dumps(report, indent=2))

        if not report["all_pass"]:
            sys.exit(1)
    finally:
        _stop_process(proc)


if __name__ == "__main__":
    main()
