"""
Read API Tests

HTTP surface over a bridge driven by the fake detector.
"""

import asyncio
import json
import logging

import pytest
from fastapi.testclient import TestClient

from bridge import Channel, VisualizationBridge
from bridge.api.server import _run_ticker, create_app
from bridge.contracts.base import ErrorCode
from bridge.temporal import LogicalClock

from tests.pipeline.fixtures import NOW, FakeDetector, small_network


@pytest.fixture
def detector():
    return FakeDetector(threats=1)


@pytest.fixture
def bridge(detector):
    clock = LogicalClock.replay([NOW + i for i in range(10)])
    return VisualizationBridge(detector, clock=clock)


@pytest.fixture
def client(bridge, detector):
    app = create_app(bridge=bridge, detector=detector, tick_interval_ms=0)
    with TestClient(app) as test_client:
        yield test_client


def _layout_request(**overrides):
    body = {
        "devices": [
            {"id": "srv-1", "deviceType": "Server", "status": "normal",
             "position": {"x": 400, "y": 200}, "activeConnections": 2},
            {"id": "ws-1", "deviceType": "Workstation", "status": "anomaly",
             "position": {"x": 100, "y": 50}},
        ],
        "communications": [
            {"sourceDevice": "srv-1", "destinationDevice": "ws-1",
             "protocol": "HTTPS", "status": "anomaly", "anomalyScore": 0.9},
            {"sourceDevice": "srv-1", "destinationDevice": "ghost"},
        ],
        "width": 800,
        "height": 400,
    }
    body.update(overrides)
    return body


class TestReadEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "online", "analysis_active": False}

    def test_visual_state_before_first_tick(self, client):
        body = client.get("/api/v1/visual-state").json()
        assert body["dtoVersion"] == "v1"
        assert body["neurons"] == []
        assert body["connections"] == []

    def test_visual_state_after_tick(self, client, detector):
        detector.emit_snapshot(small_network(anomaly_score=0.5))
        body = client.get("/api/v1/visual-state").json()

        assert body["anomalyScore"] == 0.5
        assert body["activeThreats"] == 1
        assert {n["id"] for n in body["neurons"]} == {"in-0", "h-0", "out-0"}
        assert len(body["connections"]) == 2
        neuron = next(n for n in body["neurons"] if n["id"] == "in-0")
        assert neuron["state"] == "active"
        assert set(neuron) >= {"x", "y", "z", "size", "activationLevel", "anomalyLevel"}

    def test_activity(self, client, detector):
        detector.emit_snapshot(small_network())
        body = client.get("/api/v1/activity").json()
        assert body["totalNeurons"] == 3
        assert body["activeNeurons"] == 1
        assert body["isAnalysisActive"] is True


class TestLayoutEndpoint:

    def test_layout(self, client):
        response = client.post("/api/v1/layout", json=_layout_request())
        assert response.status_code == 200
        view = response.json()

        nodes = {n["id"]: n for n in view["nodes"]}
        assert nodes["srv-1"]["x"] == 400.0
        assert nodes["srv-1"]["fill"] == "#3B82F6"
        assert nodes["srv-1"]["badge"] == 2
        assert nodes["ws-1"]["pulsing"] is True

        assert len(view["edges"]) == 1
        assert view["edges"][0]["dashed"] is True
        assert len(view["legend"]) == 3

    def test_dropped_communications_are_recorded(self, client, bridge):
        client.post("/api/v1/layout", json=_layout_request())
        assert bridge.metrics.total("dangling_communications_dropped") == 1
        assert len(bridge.metrics.get_errors(ErrorCode.DANGLING_COMMUNICATION)) == 1

    def test_unknown_status_rejected(self, client):
        request = _layout_request()
        request["devices"][0]["status"] = "compromised"
        response = client.post("/api/v1/layout", json=request)
        assert response.status_code == 422

    def test_non_positive_surface_rejected(self, client):
        response = client.post("/api/v1/layout", json=_layout_request(width=0))
        assert response.status_code == 422


class TestStream:

    def test_stream_sends_current_snapshot(self, client, detector):
        detector.emit_snapshot(small_network(anomaly_score=0.7))

        response = client.get("/api/v1/stream", params={"limit": 1})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = [line for line in response.text.splitlines() if line.startswith("data: ")]
        assert len(events) == 1
        payload = json.loads(events[0][len("data: "):])
        assert payload["anomalyScore"] == 0.7

    def test_stream_cancels_subscription(self, client, detector, bridge):
        detector.emit_snapshot(small_network())
        before = bridge.hub.subscriber_count(Channel.VISUAL_STATE)
        client.get("/api/v1/stream", params={"limit": 1})
        assert bridge.hub.subscriber_count(Channel.VISUAL_STATE) == before


class TestMetricsEndpoint:

    def test_metrics_after_tick(self, client, detector):
        detector.emit_snapshot(small_network())
        body = client.get("/api/v1/metrics").json()

        cycles = body["metrics"]["projection_cycles_total"]
        assert cycles["type"] == "counter"
        assert cycles["total"] == 1.0
        assert body["metrics"]["dangling_connections_dropped"]["total"] == 1.0
        assert [e["code"] for e in body["errors"]] == ["DANGLING_CONNECTION"]


class FlakyDetector:
    """Detector whose first tick fails."""

    def __init__(self):
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        if self.ticks == 1:
            raise RuntimeError("sensor offline")


class TestTicker:

    def test_failed_tick_is_logged_and_ticking_continues(self, caplog):
        detector = FlakyDetector()

        async def drive():
            task = asyncio.create_task(_run_ticker(detector, 0))
            while detector.ticks < 3:
                await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        with caplog.at_level(logging.ERROR, logger="bridge.api.server"):
            asyncio.run(asyncio.wait_for(drive(), timeout=5))

        assert detector.ticks >= 3
        failures = [r for r in caplog.records if "Detector tick failed" in r.getMessage()]
        assert len(failures) == 1
        assert failures[0].exc_info[0] is RuntimeError
