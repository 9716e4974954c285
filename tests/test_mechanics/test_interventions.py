"""Tests for src/influence_engine/mechanics/interventions.py."""
from __future__ import annotations

import pytest

from influence_engine.errors import UnknownMechanism
from influence_engine.mechanics.interventions import (
    base_strength,
    execute_influence,
    weighted_strength,
)
from influence_engine.models.influence import PlayerResponse


class TestBaseStrength:
    @pytest.mark.parametrize("mechanism, susceptibility, expected", [
        ("framing", 0.5, 0.75),
        ("anchoring", 0.5, 0.8),
        ("scarcity", 0.0, 0.8),
        ("social_proof", 1.0, 0.9),
        ("loss_aversion", 1.0, 0.9),
    ])
    def test_linear_in_susceptibility(self, mechanism, susceptibility, expected):
        assert base_strength(mechanism, susceptibility) == pytest.approx(expected)

    def test_unknown(self):
        with pytest.raises(UnknownMechanism):
            base_strength("hypnosis", 0.5)


class TestWeightedStrength:
    def test_untrained_weight_is_identity(self):
        assert weighted_strength(0.6, 0.5) == pytest.approx(0.6)

    def test_scales_down(self):
        assert weighted_strength(0.6, 0.25) == pytest.approx(0.3)

    def test_clamped(self):
        assert weighted_strength(0.8, 0.9) == 1.0


class TestExecuteInfluence:
    def test_unknown_mechanism_is_neutral(self, profile_factory):
        outcome = execute_influence("hypnosis", "threat", 0.9, profile_factory())
        assert outcome.strength == 0.5
        assert outcome.player_response is PlayerResponse.NEUTRAL
        assert outcome.modified is False

    def test_loss_aversion_risk_averse(self, profile_factory):
        outcome = execute_influence("loss_aversion", "", 0.5, profile_factory(risk_tolerance=0.2))
        assert outcome.player_response is PlayerResponse.ACCEPTED
        assert outcome.effectiveness == 0.8
        assert outcome.modified is True
        assert outcome.strength == pytest.approx(0.75)

    def test_framing_threat_context(self, profile_factory):
        outcome = execute_influence(
            "framing", "Threat Payment", 0.5, profile_factory(risk_tolerance=0.3),
        )
        assert outcome.player_response is PlayerResponse.ACCEPTED
        assert outcome.effectiveness == 0.8

    def test_framing_investment_context(self, profile_factory):
        outcome = execute_influence(
            "framing", "investment", 0.5, profile_factory(strategic_score=0.6),
        )
        assert outcome.effectiveness == 0.7

    def test_framing_not_triggered(self, profile_factory):
        outcome = execute_influence("framing", "threat", 0.5, profile_factory(risk_tolerance=0.7))
        assert outcome.modified is False
        assert outcome.player_response is PlayerResponse.NEUTRAL

    def test_anchoring_resource_cost(self, profile_factory):
        outcome = execute_influence(
            "anchoring", "resource_cost", 0.5, profile_factory(resource_efficiency=0.4),
        )
        assert (outcome.player_response, outcome.effectiveness) == (PlayerResponse.ACCEPTED, 0.6)

    def test_scarcity_engaged_player(self, profile_factory):
        outcome = execute_influence(
            "scarcity", "daily bonus", 0.5, profile_factory(engagement_level=0.7),
        )
        assert outcome.effectiveness == 0.7

    def test_social_proof_emotional_player(self, profile_factory):
        outcome = execute_influence(
            "social_proof", "", 0.5, profile_factory(emotional_responsiveness=0.9),
        )
        assert outcome.player_response is PlayerResponse.ACCEPTED

    def test_learned_weight_applied(self, profile_factory):
        outcome = execute_influence("scarcity", "", 0.0, profile_factory(), weight=0.25)
        assert outcome.strength == pytest.approx(0.4)
