"""Application lifespan: startup and shutdown.

Only wiring of infrastructure: logging, tracing, the document store client
(or the in-memory store) and their shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from visita.core.config import get_settings
from visita.infrastructure.firebase import close_firebase, init_firebase
from visita.infrastructure.memory import InMemoryStore
from visita.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    With the firestore backend a failed initialization is logged and the
    app still starts; data endpoints then answer 503.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.database_backend == "memory":
        if getattr(app.state, "memory_store", None) is None:
            app.state.memory_store = InMemoryStore()
        logger.info("Using in-memory document store")
    elif not init_firebase():
        logger.warning("Firestore not configured; data endpoints will answer 503")

    app.state.telemetry = None
    if settings.telemetry_enabled:
        from visita.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            jaeger_endpoint=settings.telemetry_jaeger_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        app.state.telemetry = telemetry
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if settings.database_backend == "firestore":
        await close_firebase()
    if app.state.telemetry is not None:
        from visita.shared.telemetry.telemetry import set_telemetry

        app.state.telemetry.shutdown()
        set_telemetry(None)
        app.state.telemetry = None
