from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostmon.api.routes import broadcast_reading, router
from hostmon.config import settings
from hostmon.engine import MetricBus, TelemetryFacade
from hostmon.pollers import build_pollers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    facade = TelemetryFacade()
    bus = MetricBus()
    bus.subscribe(broadcast_reading)
    await bus.start()

    pollers = build_pollers(bus, facade, settings)
    for p in pollers:
        await p.start()

    app.state.facade = facade
    app.state.bus = bus
    app.state.pollers = pollers

    logger.info("Host monitor started: %d pollers active", len(pollers))

    yield

    # ── shutdown ──────────────────────────────────────
    for p in pollers:
        await p.stop()
    await bus.stop()
    logger.info("Host monitor shut down")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def run() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
