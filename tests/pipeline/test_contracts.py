"""
Contract Tests

Layer parsing and payload decoding for the collaborator's shapes.
"""

from dataclasses import FrozenInstanceError

import pytest

from bridge.contracts import (
    Error, ErrorCode, LayerConfigurationError, Neuron, NeuronLayer,
    SimulationSnapshot, SynapticConnection,
)


class TestNeuronLayer:

    @pytest.mark.parametrize("tag,expected", [
        ("input", NeuronLayer.INPUT),
        ("hidden1", NeuronLayer.HIDDEN1),
        ("hidden-1", NeuronLayer.HIDDEN1),
        ("Hidden_2", NeuronLayer.HIDDEN2),
        (" output ", NeuronLayer.OUTPUT),
        (NeuronLayer.HIDDEN2, NeuronLayer.HIDDEN2),
    ])
    def test_parse(self, tag, expected):
        assert NeuronLayer.parse(tag) is expected

    @pytest.mark.parametrize("tag", ["hidden3", "", "convolutional"])
    def test_parse_rejects_unknown(self, tag):
        with pytest.raises(LayerConfigurationError):
            NeuronLayer.parse(tag)

    def test_from_kind(self):
        assert NeuronLayer.from_kind("input") is NeuronLayer.INPUT
        assert NeuronLayer.from_kind("hidden", 0) is NeuronLayer.HIDDEN1
        assert NeuronLayer.from_kind("hidden", 1) is NeuronLayer.HIDDEN2
        assert NeuronLayer.from_kind("hidden", 4) is NeuronLayer.HIDDEN2
        assert NeuronLayer.from_kind("OUTPUT") is NeuronLayer.OUTPUT

    def test_from_kind_rejects_unknown(self):
        with pytest.raises(LayerConfigurationError):
            NeuronLayer.from_kind("recurrent")


class TestPayloadDecoding:

    def test_neuron_from_camel_case(self):
        neuron = Neuron.from_payload({
            "id": "n-3",
            "type": "hidden",
            "layerIndex": 1,
            "index": 3,
            "potential": 42.0,
            "threshold": 100,
            "isRefractory": True,
            "anomalyContribution": 0.7,
            "connections": ["s-1", "s-2"],
        })
        assert neuron.neuron_id == "n-3"
        assert neuron.layer == "hidden2"
        assert neuron.index == 3
        assert neuron.threshold == 100.0
        assert neuron.is_refractory is True
        assert neuron.anomaly_contribution == 0.7
        assert neuron.connections == ("s-1", "s-2")

    def test_explicit_layer_tag_wins(self):
        neuron = Neuron.from_payload({"id": "n", "layer": "output", "type": "input"})
        assert neuron.layer == "output"

    def test_synapse_from_payload(self):
        synapse = SynapticConnection.from_payload({
            "id": "s-1", "sourceId": "a", "targetId": "b",
            "weight": -0.4, "plasticity": 0.6, "lastActivation": 1000,
        })
        assert synapse.source_id == "a"
        assert synapse.target_id == "b"
        assert synapse.weight == -0.4
        assert synapse.last_activation == 1000.0

    def test_never_fired_synapse(self):
        synapse = SynapticConnection.from_payload({"id": "s", "sourceId": "a", "targetId": "b"})
        assert synapse.last_activation is None
        assert synapse.plasticity == 0.0

    @pytest.mark.parametrize("payload", [{}, {"id": None}, {"id": ""}, {"type": "input"}])
    def test_neuron_without_id_rejected(self, payload):
        with pytest.raises(ValueError):
            Neuron.from_payload(payload)

    def test_snake_case_id_accepted(self):
        assert Neuron.from_payload({"neuron_id": "n-9"}).neuron_id == "n-9"

    @pytest.mark.parametrize("missing", ["id", "sourceId", "targetId"])
    def test_synapse_without_id_or_endpoint_rejected(self, missing):
        payload = {"id": "s", "sourceId": "a", "targetId": "b"}
        del payload[missing]
        with pytest.raises(ValueError):
            SynapticConnection.from_payload(payload)

    def test_snapshot_from_payload(self):
        snapshot = SimulationSnapshot.from_payload({
            "neurons": [{"id": "a", "type": "input"}],
            "connections": [{"id": "s", "sourceId": "a", "targetId": "a"}],
            "anomalyScore": 0.9,
        })
        assert len(snapshot.neurons) == 1
        assert len(snapshot.connections) == 1
        assert snapshot.anomaly_score == 0.9
        assert isinstance(snapshot.neurons, tuple)


class TestErrorRecords:

    def test_with_context_returns_new_record(self):
        error = Error(ErrorCode.DANGLING_CONNECTION, "missing endpoint", 1.0)
        enriched = error.with_context("connection_id", "s-1")
        assert error.context == ()
        assert enriched.context == (("connection_id", "s-1"),)
        with pytest.raises(FrozenInstanceError):
            enriched.message = "changed"
