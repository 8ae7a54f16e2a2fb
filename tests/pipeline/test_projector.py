"""
State Projector Tests

One simulation snapshot in, one immutable visual snapshot out.
"""

from dataclasses import FrozenInstanceError

import pytest

from bridge.contracts import LayerConfigurationError, SimulationSnapshot
from bridge.core import PositionCache, SeededJitter, StateProjector
from bridge.contracts.base import ErrorCode
from bridge.observability import MetricsCollector
from display.dtos import ActivationState

from tests.pipeline.fixtures import NOW, make_connection, make_neuron, small_network


@pytest.fixture
def metrics():
    return MetricsCollector(time_source=lambda: NOW)


@pytest.fixture
def projector(metrics):
    return StateProjector(PositionCache(jitter=SeededJitter(5)), metrics=metrics)


# =============================================================================
# NEURON MAPPING
# =============================================================================

class TestNeuronMapping:

    def test_neuron_fields(self, projector):
        visual = projector.project(small_network(), NOW)
        by_id = {n.neuron_id: n for n in visual.neurons}

        source = by_id["in-0"]
        assert source.state is ActivationState.ACTIVE
        assert source.activation_level == pytest.approx(0.7)
        assert source.size == 1.0
        assert source.layer == "input"
        assert source.connections == ("in-0->h-0",)

        hidden = by_id["h-0"]
        assert hidden.state is ActivationState.INACTIVE   # 80 <= 0.6 x 200
        assert hidden.size == 1.5
        assert hidden.anomaly_level == 0.8

        assert by_id["out-0"].state is ActivationState.REFRACTORY

    def test_positions_come_from_cache(self, projector):
        cache = PositionCache(jitter=SeededJitter(5))
        visual = projector.project(small_network(), NOW)
        for neuron in visual.neurons:
            original = next(n for n in small_network().neurons if n.neuron_id == neuron.neuron_id)
            assert neuron.position == cache.position(original.neuron_id, original.layer, original.index)

    def test_positions_stable_across_ticks(self, projector):
        first = projector.project(small_network(), NOW)
        moved = SimulationSnapshot(
            neurons=tuple(
                make_neuron(n.neuron_id, n.layer, n.index + 4, potential=1.0)
                for n in small_network().neurons
            ),
            connections=(),
        )
        second = projector.project(moved, NOW + 1000)
        assert [n.position for n in first.neurons] == [n.position for n in second.neurons]

    def test_unknown_layer_is_fatal(self, projector):
        snapshot = SimulationSnapshot(neurons=(make_neuron("x", layer="hidden9"),), connections=())
        with pytest.raises(LayerConfigurationError):
            projector.project(snapshot, NOW)

    def test_unknown_layer_on_known_id_is_fatal(self, projector):
        projector.project(
            SimulationSnapshot(neurons=(make_neuron("n1", layer="input"),), connections=()), NOW
        )
        renamed = SimulationSnapshot(neurons=(make_neuron("n1", layer="hidden3"),), connections=())
        with pytest.raises(LayerConfigurationError):
            projector.project(renamed, NOW + 100)

    @pytest.mark.parametrize("spelling", [" Hidden-1 ", "hidden_1", "HIDDEN1", "hidden1"])
    def test_layer_published_in_canonical_form(self, projector, spelling):
        snapshot = SimulationSnapshot(neurons=(make_neuron("h", layer=spelling),), connections=())
        visual = projector.project(snapshot, NOW)
        assert visual.neurons[0].layer == "hidden1"


# =============================================================================
# CONNECTION MAPPING
# =============================================================================

class TestConnectionMapping:

    def test_activity_and_highlight(self, projector):
        visual = projector.project(small_network(), NOW)
        by_id = {c.connection_id: c for c in visual.connections}

        fresh = by_id["in-0->h-0"]
        assert fresh.active is True
        assert fresh.highlighted is True
        assert fresh.strength == 0.9

        stale = by_id["h-0->out-0"]
        assert stale.active is False
        assert stale.highlighted is False

    def test_dangling_connection_dropped(self, projector, metrics):
        visual = projector.project(small_network(), NOW)
        assert "h-0->ghost" not in {c.connection_id for c in visual.connections}
        assert len(visual.connections) == 2
        assert metrics.total("dangling_connections_dropped") == 1
        assert len(metrics.get_errors(ErrorCode.DANGLING_CONNECTION)) == 1

    def test_every_endpoint_resolves(self, projector):
        snapshot = SimulationSnapshot(
            neurons=(make_neuron("a"), make_neuron("b", index=1)),
            connections=(
                make_connection("a", "b"),
                make_connection("b", "a"),
                make_connection("a", "missing"),
                make_connection("missing", "b"),
            ),
        )
        visual = projector.project(snapshot, NOW)
        ids = {n.neuron_id for n in visual.neurons}
        assert len(visual.connections) == 2
        for connection in visual.connections:
            assert connection.source_id in ids
            assert connection.target_id in ids

    def test_activity_depends_on_now(self, projector):
        snapshot = small_network()
        later = projector.project(snapshot, NOW + 1000)
        assert not any(c.active for c in later.connections)


# =============================================================================
# AGGREGATES & IMMUTABILITY
# =============================================================================

class TestSnapshotAggregates:

    def test_aggregates_copied(self, projector):
        visual = projector.project(
            small_network(anomaly_score=0.42), NOW, is_analysis_active=True, active_threats=3
        )
        assert visual.anomaly_score == 0.42
        assert visual.is_analysis_active is True
        assert visual.active_threats == 3
        assert visual.generated_at == NOW

    def test_activity_state_summary(self, projector):
        visual = projector.project(small_network(), NOW, active_threats=2)
        activity = visual.activity_state()
        assert activity.active_neurons == 1
        assert activity.total_neurons == 3
        assert activity.active_threats == 2

    def test_each_cycle_builds_a_new_snapshot(self, projector):
        first = projector.project(small_network(), NOW)
        second = projector.project(small_network(), NOW)
        assert first == second
        assert first is not second

    def test_snapshot_is_frozen(self, projector):
        visual = projector.project(small_network(), NOW)
        with pytest.raises(FrozenInstanceError):
            visual.anomaly_score = 1.0
        with pytest.raises(FrozenInstanceError):
            visual.neurons[0].state = ActivationState.ACTIVE
        assert isinstance(visual.neurons, tuple)
        assert isinstance(visual.connections, tuple)
