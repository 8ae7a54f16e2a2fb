"""
Neuromorphic Visualization Bridge: Read API
===========================================

Read-only HTTP view of the bridge for dashboard renderers.

Endpoints:
- GET  /health                -> Liveness and analysis state
- GET  /api/v1/visual-state   -> Current VisualSnapshot
- GET  /api/v1/activity       -> Neural activity indicator
- GET  /api/v1/metrics        -> Projection metrics and error records
- POST /api/v1/layout         -> Device graph layout for a surface
- GET  /api/v1/stream         -> Server-Sent Events of visual snapshots

Usage:
    uvicorn bridge.api.server:app --reload
"""
import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from display.dtos import Device, CommunicationRecord, LinkStatus
from display.mapper import SpatialLayoutMapper

from ..contracts.base import ErrorCode
from ..engine import BridgeConfig, VisualizationBridge
from .mapper import map_snapshot_to_dto

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_MS = 500


# =============================================================================
# REQUEST MODELS
# =============================================================================

StatusLabel = Literal["normal", "suspicious", "anomaly"]


class PositionPayload(BaseModel):
    x: float
    y: float


class DevicePayload(BaseModel):
    id: str
    deviceType: str
    status: StatusLabel = "normal"
    position: PositionPayload
    activeConnections: int = 0

    def to_device(self) -> Device:
        return Device(
            device_id=self.id,
            device_type=self.deviceType,
            status=LinkStatus.parse(self.status),
            position=(self.position.x, self.position.y),
            active_connections=self.activeConnections,
        )


class CommunicationPayload(BaseModel):
    sourceDevice: str
    destinationDevice: str
    protocol: str = ""
    status: StatusLabel = "normal"
    anomalyScore: float = 0.0

    def to_record(self) -> CommunicationRecord:
        return CommunicationRecord(
            source_device=self.sourceDevice,
            destination_device=self.destinationDevice,
            protocol=self.protocol,
            status=LinkStatus.parse(self.status),
            anomaly_score=self.anomalyScore,
        )


class LayoutRequest(BaseModel):
    devices: List[DevicePayload] = Field(default_factory=list)
    communications: List[CommunicationPayload] = Field(default_factory=list)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    selectedDevice: Optional[str] = None


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def _default_bridge():
    from demo.simulated_detector import SimulatedDetector

    seed = int(os.environ.get("NVB_POSITION_SEED", "0"))
    detector = SimulatedDetector()
    return detector, VisualizationBridge(detector, BridgeConfig(position_seed=seed))


def create_app(
    bridge: Optional[VisualizationBridge] = None,
    detector=None,
    tick_interval_ms: Optional[int] = None,
) -> FastAPI:
    """
    Build the API around ``bridge``.

    Without a bridge, one is created at startup over the simulated
    detector. ``tick_interval_ms`` (or NVB_TICK_MS) drives the detector's
    ``tick``; 0 disables the ticker.
    """
    if tick_interval_ms is None:
        tick_interval_ms = int(os.environ.get("NVB_TICK_MS", DEFAULT_TICK_INTERVAL_MS))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        nonlocal bridge, detector
        if bridge is None:
            detector, bridge = _default_bridge()
            if not bridge.start_analysis(os.environ.get("NVB_INTERFACE")):
                logger.warning("Serving without live analysis")

        app.state.bridge = bridge
        app.state.layout_mapper = SpatialLayoutMapper()

        ticker = None
        if detector is not None and tick_interval_ms > 0:
            ticker = asyncio.create_task(_run_ticker(detector, tick_interval_ms / 1000.0))
        logger.info("Bridge API ready")

        yield

        if ticker is not None:
            ticker.cancel()
        logger.info("Bridge API shutting down")

    app = FastAPI(
        title="Neuromorphic Visualization Bridge API",
        version="0.1.0",
        description="Read layer for the network-security dashboard",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


async def _run_ticker(detector, interval_s: float):
    while True:
        try:
            detector.tick()
        except Exception:
            logger.exception("Detector tick failed; ticker keeps running")
        await asyncio.sleep(interval_s)


# =============================================================================
# ENDPOINTS
# =============================================================================

def _register_routes(app: FastAPI):

    def current_bridge() -> VisualizationBridge:
        bridge = getattr(app.state, "bridge", None)
        if bridge is None:
            raise HTTPException(status_code=503, detail="Bridge not initialized")
        return bridge

    @app.get("/health")
    async def health_check():
        activity = current_bridge().get_neural_activity_state()
        return {"status": "online", "analysis_active": activity.is_analysis_active}

    @app.get("/api/v1/visual-state")
    async def get_visual_state():
        return map_snapshot_to_dto(current_bridge().get_visual_state())

    @app.get("/api/v1/activity")
    async def get_activity():
        return current_bridge().get_neural_activity_state().to_dict()

    @app.post("/api/v1/layout")
    async def post_layout(request: LayoutRequest):
        mapper = app.state.layout_mapper
        dropped_before = mapper.dropped_communications
        view = mapper.layout(
            [d.to_device() for d in request.devices],
            [c.to_record() for c in request.communications],
            request.width,
            request.height,
            selected_device=request.selectedDevice,
        )

        dropped = mapper.dropped_communications - dropped_before
        bridge = getattr(app.state, "bridge", None)
        if dropped and bridge is not None:
            bridge.metrics.record("dangling_communications_dropped", float(dropped))
            bridge.metrics.error(
                ErrorCode.DANGLING_COMMUNICATION,
                "Communications with unknown endpoints dropped from layout",
                count=str(dropped),
            )
        return view.to_dict()

    @app.get("/api/v1/metrics")
    async def get_metrics():
        metrics = current_bridge().metrics
        return {
            "metrics": {
                d.name: {"type": d.metric_type.value, **metrics.summarize(d.name)}
                for d in metrics.definitions()
            },
            "errors": [
                {"code": e.code.name, "message": e.message, "timestamp": e.timestamp}
                for e in metrics.get_errors()
            ],
        }

    @app.get("/api/v1/stream")
    async def stream_state(limit: Optional[int] = None):
        """
        Server-Sent Events of visual snapshots.

        The current snapshot (if any) is sent first; ``limit`` closes the
        stream after that many events.
        """
        bridge = current_bridge()
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        subscription = bridge.subscribe_to_visual_state(
            lambda snapshot: loop.call_soon_threadsafe(queue.put_nowait, snapshot)
        )

        async def event_generator():
            sent = 0
            try:
                while limit is None or sent < limit:
                    snapshot = await queue.get()
                    yield f"data: {json.dumps(map_snapshot_to_dto(snapshot))}\n\n"
                    sent += 1
            finally:
                subscription.cancel()

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )


app = create_app()
