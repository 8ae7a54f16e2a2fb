"""
Live Projection Demo
====================

Drives the bridge with the simulated detector and prints the neural
activity indicator each tick, then lays out a small device graph.

Usage:
    python -m demo.run_live_projection
"""

import logging
import time

from bridge import VisualizationBridge, BridgeConfig
from demo.simulated_detector import SimulatedDetector
from display.dtos import Device, CommunicationRecord, LinkStatus
from display.mapper import SpatialLayoutMapper


DEVICES = [
    Device("srv-01", "Server", LinkStatus.NORMAL, (120.0, 80.0), 3),
    Device("ws-07", "Workstation", LinkStatus.SUSPICIOUS, (420.0, 300.0), 1),
    Device("gw-01", "Router", LinkStatus.NORMAL, (400.0, 200.0), 0),
    Device("cam-3", "IoT Device", LinkStatus.ANOMALY, (5000.0, -40.0), 2),
    Device("lab-x", "Oscilloscope", LinkStatus.NORMAL, (700.0, 380.0), 0),
]

COMMUNICATIONS = [
    CommunicationRecord("srv-01", "gw-01", "HTTPS", LinkStatus.NORMAL, 0.05),
    CommunicationRecord("ws-07", "srv-01", "SMB", LinkStatus.SUSPICIOUS, 0.48),
    CommunicationRecord("cam-3", "gw-01", "RTSP", LinkStatus.ANOMALY, 0.91),
    CommunicationRecord("ghost-9", "gw-01", "DNS", LinkStatus.NORMAL, 0.10),
]


def run_demo(ticks: int = 10):
    print("=== LIVE PROJECTION DEMO ===\n")

    detector = SimulatedDetector(seed=11)
    bridge = VisualizationBridge(detector, BridgeConfig(position_seed=42))

    bridge.subscribe_to_threats(lambda t: print(f"  [threat] {t.threat_id} confidence={t.confidence:.2f}"))

    if not bridge.start_analysis("sim0"):
        print("[!] Detector refused to start")
        return

    for _ in range(ticks):
        detector.tick()
        activity = bridge.get_neural_activity_state()
        print(
            f"anomaly={activity.anomaly_score:.3f} "
            f"active={activity.active_neurons}/{activity.total_neurons} "
            f"threats={activity.active_threats}"
        )
        time.sleep(0.05)

    bridge.stop_analysis()

    print("\n=== DEVICE GRAPH (640x320) ===\n")
    view = SpatialLayoutMapper().layout(DEVICES, COMMUNICATIONS, 640, 320, selected_device="srv-01")
    for node in view.nodes:
        badge = f" [{node.badge.count}]" if node.badge else ""
        print(f"  {node.label:8s} ({node.x:6.1f}, {node.y:6.1f}) fill={node.color}{badge}")
    for edge in view.edges:
        print(f"  {edge.source_id} -> {edge.target_id} {edge.label} {edge.style} {edge.color}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_demo()
