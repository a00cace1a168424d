"""Conversation lifecycle routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from elvia.api.deps import error_response, get_runtime, now_iso
from elvia.runtime import Runtime

router = APIRouter()


class StartConversationRequest(BaseModel):
    student_id: int | None = Field(
        default=None, validation_alias=AliasChoices("student_id", "studentId")
    )


@router.post("/start-conversation", response_model=None)
def start_conversation(
    body: StartConversationRequest, runtime: Runtime = Depends(get_runtime)
) -> dict[str, Any] | JSONResponse:
    if body.student_id is None:
        return error_response(
            400,
            "Missing required field: student_id",
            "Please provide a student_id in the request body",
        )

    student = runtime.data_source.find_student(body.student_id)
    if student is None:
        return error_response(
            404, "Student not found", f"No student found with ID: {body.student_id}"
        )

    existing = runtime.engine.get(body.student_id)
    if existing is not None:
        return error_response(
            409,
            "Conversation already exists",
            f"A conversation is already active for student {body.student_id}",
            conversation=existing.summary(),
        )

    conversation = runtime.engine.start(body.student_id)
    return {
        "message": "Conversation started successfully",
        "student": student.model_dump(mode="json"),
        "conversation": conversation.summary() if conversation else None,
        "timestamp": now_iso(),
    }


@router.get("/conversations")
def list_conversations(runtime: Runtime = Depends(get_runtime)) -> dict[str, Any]:
    conversations = runtime.engine.list_conversations()
    return {
        "conversations": [conversation.summary() for conversation in conversations],
        "count": len(conversations),
    }


@router.get("/conversations/{student_id}", response_model=None)
def get_conversation(
    student_id: int, runtime: Runtime = Depends(get_runtime)
) -> dict[str, Any] | JSONResponse:
    conversation = runtime.engine.get(student_id)
    if conversation is None:
        return error_response(
            404,
            "Conversation not found",
            f"No active conversation found for student {student_id}",
        )
    return {
        "conversation": {
            **conversation.summary(),
            "student": conversation.student.model_dump(mode="json"),
        }
    }


@router.delete("/conversations/{student_id}", response_model=None)
def delete_conversation(
    student_id: int, runtime: Runtime = Depends(get_runtime)
) -> dict[str, Any] | JSONResponse:
    if not runtime.engine.delete(student_id):
        return error_response(
            404,
            "Conversation not found",
            f"No active conversation found for student {student_id}",
        )
    return {"message": "Conversation cleared successfully", "student_id": student_id}
