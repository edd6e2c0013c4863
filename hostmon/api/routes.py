from __future__ import annotations

import logging

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from hostmon.engine.event_bus import MetricBus
from hostmon.engine.telemetry import TelemetryFacade
from hostmon.models import MetricCategory, MetricEvent

logger = logging.getLogger(__name__)

router = APIRouter()


# ── WebSocket connection manager ──────────────────────


def _reading_message(event: MetricEvent) -> dict:
    return {"type": "reading", "id": event.id, "reading": event.reading.model_dump(mode="json")}


class ConnectionManager:
    """Display clients subscribed to ``/ws/metrics``.

    A client joining mid-stream is first sent the newest reading of every
    category, so it does not wait out a full poll interval for its first value.
    """

    def __init__(self) -> None:
        self.clients: list[WebSocket] = []

    async def connect(self, websocket: WebSocket, bus: MetricBus) -> None:
        await websocket.accept()
        for event in bus.latest_all():
            await websocket.send_json(_reading_message(event))
        self.clients.append(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)

    async def broadcast(self, event: MetricEvent) -> None:
        message = _reading_message(event)
        for ws in list(self.clients):
            try:
                await ws.send_json(message)
            except Exception:
                logger.debug("Dropping websocket client after failed send of %s", event.id)
                self.disconnect(ws)


ws_manager = ConnectionManager()


async def broadcast_reading(event: MetricEvent) -> None:
    """MetricBus subscriber: push each relayed reading to WebSocket clients."""
    await ws_manager.broadcast(event)


def _facade(request: Request) -> TelemetryFacade:
    return request.app.state.facade


# ── REST routes ───────────────────────────────────────


@router.get("/api/system")
async def get_system(request: Request) -> dict:
    reading = await _facade(request).read(MetricCategory.SYSTEM)
    return reading.model_dump(mode="json")


@router.get("/api/cpu")
async def get_cpu(request: Request) -> dict:
    reading = await _facade(request).read(MetricCategory.CPU)
    return reading.model_dump(mode="json")


@router.get("/api/memory")
async def get_memory(request: Request) -> dict:
    reading = await _facade(request).read(MetricCategory.MEMORY)
    return reading.model_dump(mode="json")


@router.get("/api/disk")
async def get_disk(request: Request) -> dict:
    reading = await _facade(request).read(MetricCategory.DISK)
    return reading.model_dump(mode="json")


@router.get("/api/snapshot")
async def get_snapshot(request: Request) -> dict:
    snapshot = await _facade(request).get_aggregate_snapshot()
    return snapshot.model_dump(mode="json")


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    state = request.app.state
    bus = state.bus
    pollers = getattr(state, "pollers", [])
    return {
        "status": "running",
        "bus_running": bus.running,
        "subscribers": bus.subscriber_count,
        "pending_events": bus.pending,
        "pollers": [p.status() for p in pollers],
        "diagnostics": state.facade.source.name,
    }


# ── WebSocket endpoint ────────────────────────────────


@router.websocket("/ws/metrics")
async def websocket_metrics(websocket: WebSocket) -> None:
    await ws_manager.connect(websocket, websocket.app.state.bus)
    try:
        while True:
            # Keep connection alive; client can send pings or messages
            await websocket.receive_text()
    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)
