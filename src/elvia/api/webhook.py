"""Inbound message webhook.

Stands in for a messaging provider callback: the relayed reply is fed to
the conversation engine and the resulting state is returned.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from elvia.api.deps import error_response, get_runtime, now_iso
from elvia.runtime import Runtime

router = APIRouter()


class WebhookRequest(BaseModel):
    student_id: int | None = Field(
        default=None, validation_alias=AliasChoices("student_id", "studentId")
    )
    message: str | None = None


@router.post("/whatsapp-webhook", response_model=None)
def receive_message(
    body: WebhookRequest, runtime: Runtime = Depends(get_runtime)
) -> dict[str, Any] | JSONResponse:
    if body.student_id is None or not body.message:
        return error_response(
            400,
            "Missing required fields",
            "Please provide both student_id and message in the request body",
        )

    student = runtime.data_source.find_student(body.student_id)
    if student is None:
        return error_response(
            404, "Student not found", f"No student found with ID: {body.student_id}"
        )

    conversation = runtime.engine.handle_message(body.student_id, body.message)
    if conversation is None:
        return error_response(
            404,
            "No active conversation",
            f"No active conversation found for student {body.student_id}. "
            "Please start a conversation first.",
        )

    return {
        "message": "Message processed successfully",
        "student": {"id": student.id, "name": student.name},
        "conversation_state": conversation.state.value,
        "timestamp": now_iso(),
    }


@router.get("/whatsapp-webhook")
def webhook_status() -> dict[str, str]:
    return {"message": "WhatsApp webhook endpoint is active", "timestamp": now_iso()}
