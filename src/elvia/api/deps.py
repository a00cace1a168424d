"""Shared FastAPI dependencies and response helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from elvia.runtime import Runtime


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, **extra},
    )
