"""Health, status, catalog and trigger routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from elvia.api.deps import error_response, get_runtime, now_iso
from elvia.contracts.events import EVENT_TYPES
from elvia.runtime import Runtime

router = APIRouter()


class TriggerRequest(BaseModel):
    date: str | None = None


@router.get("/health")
def health(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    return {
        "status": "healthy",
        "service": runtime.settings.service_name,
        "timestamp": now_iso(),
        "version": runtime.settings.app_version,
    }


@router.get("/status")
def status(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    conversations = runtime.engine.list_conversations()
    return {
        "status": "operational",
        "timestamp": now_iso(),
        "components": {
            "graduation_scheduler": runtime.trigger.status().model_dump(mode="json"),
            "conversation_engine": {
                "active_conversations": len(conversations),
                "conversations": [conversation.summary() for conversation in conversations],
            },
        },
        "data": {
            "total_students": len(runtime.data_source.all_students()),
            "total_jobs": len(runtime.data_source.all_jobs()),
        },
    }


@router.get("/students")
def students(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    records = runtime.data_source.all_students()
    return {"students": [s.model_dump(mode="json") for s in records], "count": len(records)}


@router.get("/jobs")
def jobs(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    records = runtime.data_source.all_jobs()
    return {"jobs": [j.model_dump(mode="json") for j in records], "count": len(records)}


@router.post("/trigger-graduation", response_model=None)
def trigger_graduation(
    body: TriggerRequest | None = None, runtime: Runtime = Depends(get_runtime)
) -> dict[str, Any] | JSONResponse:
    requested = body.date if body else None
    try:
        graduating = runtime.trigger.check(requested)
    except ValueError as exc:
        return error_response(400, "Invalid date", str(exc))
    return {
        "message": "Graduation check triggered successfully",
        "date": requested or "today",
        "graduating_students": [
            {
                "id": student.id,
                "name": student.name,
                "title": student.title,
                "graduation_date": student.graduation_date.isoformat(),
            }
            for student in graduating
        ],
        "count": len(graduating),
        "timestamp": now_iso(),
    }


@router.get("/events", response_model=None)
def events(
    student_id: int | None = None,
    event_type: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    runtime: Runtime = Depends(get_runtime),
) -> dict[str, Any] | JSONResponse:
    recorded = runtime.bus.events
    if event_type is not None:
        if event_type not in EVENT_TYPES:
            return error_response(
                400, "Unknown event type", f"Expected one of {sorted(EVENT_TYPES)}"
            )
        recorded = [e for e in recorded if e.event_type == event_type]
    if student_id is not None:
        recorded = [e for e in recorded if e.student_id == student_id]
    selected = recorded[-limit:]
    return {"events": [e.envelope() for e in selected], "count": len(selected)}
