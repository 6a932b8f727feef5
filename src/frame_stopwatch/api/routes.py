"""REST API routes for the frame stopwatch."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from frame_stopwatch.alarms import AlarmKind
from frame_stopwatch.telemetry import CommandLog, engine_state_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()

# Engine and command log - set by main.py
_engine: Any = None
_command_log: CommandLog | None = None


def set_stopwatch(engine: Any, command_log: CommandLog) -> None:
    """Inject the engine instance and its command log."""
    global _engine, _command_log
    _engine = engine
    _command_log = command_log


def get_engine() -> Any:
    if _engine is None:
        raise HTTPException(500, "Stopwatch not initialised")
    return _engine


def get_command_log() -> CommandLog:
    if _command_log is None:
        raise HTTPException(500, "Command log not initialised")
    return _command_log


def _record(command: str, ok: bool, params: dict[str, Any] | None = None) -> None:
    get_command_log().record(get_engine().get(), command, params, ok=ok)
    if not ok:
        logger.debug("Command %s rejected (params=%s)", command, params)


# --- Request schemas ---


class SetAlarmRequest(BaseModel):
    value: float = Field(description="Milliseconds: offset for relative, timeline position for absolute")
    kind: AlarmKind | None = None


# --- State ---


@router.get("/status")
def get_status() -> dict:
    """Current elapsed time, lifecycle flags and pending alarms."""
    return engine_state_to_dict(get_engine())


# --- Lifecycle commands ---


def _lifecycle(command: str) -> dict:
    engine = get_engine()
    ok = getattr(engine, command)()
    _record(command, ok)
    if not ok:
        raise HTTPException(409, f"Cannot {command} in the current state")
    return {"ok": True, **engine_state_to_dict(engine)}


@router.post("/start")
def start() -> dict:
    """Start the stopwatch, or resume it when paused."""
    return _lifecycle("start")


@router.post("/pause")
def pause() -> dict:
    return _lifecycle("pause")


@router.post("/stop")
def stop() -> dict:
    return _lifecycle("stop")


# --- Alarms ---


@router.get("/alarms")
def list_alarms() -> dict:
    return {"alarms": get_engine().get_alarms()}


@router.post("/alarms")
def set_alarm(req: SetAlarmRequest) -> dict:
    """Schedule a relative (default) or absolute alarm."""
    engine = get_engine()
    ok = engine.set_alarm(req.value, req.kind)
    params = {"value": req.value, "kind": req.kind.value if req.kind else None}
    _record("set_alarm", ok, params)
    if not ok:
        raise HTTPException(400, f"Alarm {req.value} rejected")
    return {"ok": True, "alarms": engine.get_alarms()}


@router.delete("/alarms")
def clear_alarms() -> dict:
    engine = get_engine()
    ok = engine.clear_alarms()
    _record("clear_alarms", ok)
    return {"ok": ok, "alarms": engine.get_alarms()}


# --- Audit ---


@router.get("/audit")
def get_audit(n: int = 50) -> dict:
    """Last n commands issued through the API."""
    return {"entries": get_command_log().get_last_n(n)}
