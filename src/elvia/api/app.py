# elvia/api/app.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
import logging
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from elvia.api.conversation import router as conversation_router
from elvia.api.health import router as health_router
from elvia.api.webhook import router as webhook_router
from elvia.observability.logging import configure_logging
from elvia.observability.metrics import render_metrics
from elvia.observability.telemetry import setup_tracing
from elvia.runtime import Runtime, build_runtime
from elvia.settings import AppSettings, get_app_settings

logger = logging.getLogger("elvia.api")


def create_app(
    settings: AppSettings | None = None,
    *,
    runtime: Runtime | None = None,
    setup_observability: bool = True,
) -> FastAPI:
    """Build the HTTP shim around a runtime.

    A prebuilt ``runtime`` is used as-is (tests inject one with an immediate
    notifier); otherwise one is built from ``settings`` on startup.
    """
    settings = runtime.settings if runtime is not None else settings or get_app_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ----- startup -----
        if setup_observability:
            configure_logging(settings.log_level, service=settings.service_name)
            setup_tracing(settings.service_name)
        app.state.runtime = runtime or build_runtime(settings)
        app.state.runtime.start()
        logger.info(
            "service.start",
            extra={"extra": {"env": settings.app_env, "service": settings.service_name}},
        )
        try:
            yield
        finally:
            # ----- shutdown -----
            app.state.runtime.stop()
            logger.info(
                "service.stop",
                extra={"extra": {"env": settings.app_env, "service": settings.service_name}},
            )

    app = FastAPI(
        title="Graduation Engagement API",
        version=settings.app_version,
        description="Graduation trigger -> conversation -> job matching workflow",
        lifespan=lifespan,
    )

    # ----- Middleware -----

    @app.middleware("http")
    async def add_request_id(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Attach a request ID to every request/response and log basic access info."""
        req_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.req_id = req_id
        logger.info(
            "http.request",
            extra={
                "extra": {
                    "req_id": req_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client": str(request.client.host if request.client else None),
                }
            },
        )
        response: Response = await call_next(request)
        response.headers["x-request-id"] = req_id
        logger.info(
            "http.response",
            extra={
                "extra": {
                    "req_id": req_id,
                    "status_code": response.status_code,
                    "path": request.url.path,
                }
            },
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowlist(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ----- Simple health & root -----

    @app.get("/", tags=["meta"])
    async def root(request: Request) -> dict[str, str | None]:
        return {
            "service": settings.service_name,
            "env": settings.app_env,
            "version": app.version,
            "request_id": getattr(request.state, "req_id", None),
        }

    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["meta"], response_class=PlainTextResponse)
    async def metrics() -> str:
        return render_metrics()

    # ----- Routers -----

    app.include_router(conversation_router, prefix="/api", tags=["conversations"])
    app.include_router(webhook_router, prefix="/api", tags=["webhook"])
    app.include_router(health_router, prefix="/api", tags=["status"])
    return app
