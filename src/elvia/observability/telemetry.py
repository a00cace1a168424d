"""Tracing for the conversation engine and the graduation trigger.

Spans go to the OpenTelemetry SDK once ``setup_tracing`` has run. With
``ELVIA_DISABLE_TRACING`` set, callers get a tracer whose spans do nothing.
"""

from __future__ import annotations

import logging
from typing import Any

from elvia.config import get_bool

logger = logging.getLogger(__name__)

_provider_installed = False


class _NoOpSpan:
    def __enter__(self) -> _NoOpSpan:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def set_attribute(self, key: str, value: Any) -> None:
        return None


class _NoOpTracer:
    def start_as_current_span(self, name: str) -> _NoOpSpan:
        return _NoOpSpan()


def tracing_disabled() -> bool:
    return get_bool("ELVIA_DISABLE_TRACING", False)


def _build_provider(service_name: str, exporter: Any | None) -> Any:
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter or ConsoleSpanExporter()))
    return provider


def setup_tracing(service_name: str, exporter: Any | None = None) -> bool:
    """Install the SDK tracer provider once per process; returns whether it is active."""
    global _provider_installed
    if tracing_disabled():
        logger.info("tracing.disabled", extra={"extra": {"service": service_name}})
        return False
    if not _provider_installed:
        from opentelemetry import trace

        trace.set_tracer_provider(_build_provider(service_name, exporter))
        _provider_installed = True
        logger.info("tracing.configured", extra={"extra": {"service": service_name}})
    return True


def get_tracer(name: str) -> Any:
    if tracing_disabled():
        return _NoOpTracer()
    from opentelemetry import trace

    return trace.get_tracer(name)
