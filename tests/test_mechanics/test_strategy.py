"""Tests for src/influence_engine/mechanics/strategy.py."""
from __future__ import annotations

import pytest

from influence_engine.mechanics.strategy import STRATEGY_RULES, StrategyRule, select_strategy
from influence_engine.models.influence import Mechanism


class TestSelectStrategy:
    def test_risk_averse_threat(self, profile_factory):
        strategy = select_strategy(profile_factory(risk_tolerance=0.2), "threat payment due")
        assert strategy.mechanism == "loss_aversion"
        assert strategy.strength == 0.8
        assert strategy.parameters == {"increaseAcceptance": 0.3}

    def test_earlier_rule_wins(self, profile_factory):
        profile = profile_factory(risk_tolerance=0.2, strategic_score=0.9, engagement_level=0.9)
        strategy = select_strategy(profile, "threat on this investment opportunity")
        assert strategy.mechanism == "loss_aversion"

    def test_falls_through_to_next_rule(self, profile_factory):
        profile = profile_factory(risk_tolerance=0.9, strategic_score=0.9)
        strategy = select_strategy(profile, "threat on this investment")
        assert strategy.mechanism == "social_proof"
        assert strategy.strength == 0.6

    @pytest.mark.parametrize("scores, context, mechanism, strength", [
        ({"resource_efficiency": 0.3}, "building cost", "anchoring", 0.7),
        ({"engagement_level": 0.8}, "limited opportunity", "scarcity", 0.8),
        ({}, "nothing special", "framing", 0.5),
        ({"risk_tolerance": 0.2}, "", "framing", 0.5),
    ])
    def test_rule_table(self, profile_factory, scores, context, mechanism, strength):
        strategy = select_strategy(profile_factory(**scores), context)
        assert (strategy.mechanism, strategy.strength) == (mechanism, strength)

    def test_keyword_case_insensitive(self, profile_factory):
        strategy = select_strategy(profile_factory(risk_tolerance=0.1), "THREAT incoming")
        assert strategy.mechanism == "loss_aversion"

    def test_threshold_is_strict(self, profile_factory):
        strategy = select_strategy(profile_factory(risk_tolerance=0.4), "threat")
        assert strategy.mechanism == "framing"

    def test_no_profile(self):
        strategy = select_strategy(None, "threat")
        assert strategy.mechanism == "none"
        assert strategy.reason == "No profile available"

    def test_no_rule_matched(self, profile_factory):
        strategy = select_strategy(profile_factory(), "threat", rules=STRATEGY_RULES[:1])
        assert strategy.mechanism == "none"

    def test_custom_rule_table(self, profile_factory):
        rule = StrategyRule(
            name="always_scarcity",
            condition=lambda p: True,
            keyword=None,
            mechanism=Mechanism.SCARCITY,
            strength=0.9,
            message="Only a few left.",
        )
        strategy = select_strategy(profile_factory(), "", rules=(rule,))
        assert strategy.mechanism == "scarcity"
        assert strategy.reason == "always_scarcity"

    def test_returned_parameters_are_copies(self, profile_factory):
        strategy = select_strategy(profile_factory(), "")
        strategy.parameters["framingBias"] = 99
        assert STRATEGY_RULES[-1].parameters["framingBias"] == 0.2
