"""
Bridge Contracts

Immutable types shared by every bridge component. Contracts import
nothing from the components that use them.
"""

from .base import ErrorCode, Error, LayerConfigurationError, NeuronLayer
from .snn import Neuron, SynapticConnection, SimulationSnapshot
from .events import Anomaly, ThreatDetection, PipelineStatus, DetectorStatus
from .detector import AnomalyDetector

__all__ = [
    'ErrorCode', 'Error', 'LayerConfigurationError', 'NeuronLayer',
    'Neuron', 'SynapticConnection', 'SimulationSnapshot',
    'Anomaly', 'ThreatDetection', 'PipelineStatus', 'DetectorStatus',
    'AnomalyDetector',
]
