"""Strategy selector: picks an influence mechanism for a profile and context.

Pure functions, no I/O. Rules are evaluated in table order and the first
match wins; a rule later in the table never overrides an earlier one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from influence_engine.models.influence import Mechanism, Strategy
from influence_engine.models.profile import BehavioralProfile


@dataclass(frozen=True)
class StrategyRule:
    name: str
    condition: Callable[[BehavioralProfile], bool]
    keyword: str | None
    mechanism: Mechanism
    strength: float
    message: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def matches(self, profile: BehavioralProfile, context: str) -> bool:
        if self.keyword is not None and self.keyword not in context.lower():
            return False
        return self.condition(profile)

    def to_strategy(self) -> Strategy:
        return Strategy(
            mechanism=self.mechanism.value,
            strength=self.strength,
            message=self.message,
            parameters=dict(self.parameters),
            reason=self.name,
        )


STRATEGY_RULES: tuple[StrategyRule, ...] = (
    StrategyRule(
        name="risk_averse_threat",
        condition=lambda p: p.risk_tolerance < 0.4,
        keyword="threat",
        mechanism=Mechanism.LOSS_AVERSION,
        strength=0.8,
        message="Don't risk losing your progress! Pay the threat now.",
        parameters={"increaseAcceptance": 0.3},
    ),
    StrategyRule(
        name="strategist_investment",
        condition=lambda p: p.strategic_score > 0.6,
        keyword="investment",
        mechanism=Mechanism.SOCIAL_PROOF,
        strength=0.6,
        message="Most successful players make this investment.",
        parameters={"increaseAcceptance": 0.2},
    ),
    StrategyRule(
        name="inefficient_cost",
        condition=lambda p: p.resource_efficiency < 0.5,
        keyword="cost",
        mechanism=Mechanism.ANCHORING,
        strength=0.7,
        message="Special deal! Usually costs much more.",
        parameters={"discountPerception": 0.3},
    ),
    StrategyRule(
        name="engaged_opportunity",
        condition=lambda p: p.engagement_level > 0.7,
        keyword="opportunity",
        mechanism=Mechanism.SCARCITY,
        strength=0.8,
        message="Limited time offer! This opportunity won't last long.",
        parameters={"urgencyMultiplier": 1.5},
    ),
    StrategyRule(
        name="default_framing",
        condition=lambda p: True,
        keyword=None,
        mechanism=Mechanism.FRAMING,
        strength=0.5,
        message="Make the smart choice for your empire's future.",
        parameters={"framingBias": 0.2},
    ),
)


def select_strategy(
    profile: BehavioralProfile | None,
    context: str,
    rules: tuple[StrategyRule, ...] = STRATEGY_RULES,
) -> Strategy:
    """Return the first rule's strategy that matches, or "none" without a profile."""
    if profile is None:
        return Strategy(mechanism="none", reason="No profile available")
    for rule in rules:
        if rule.matches(profile, context or ""):
            return rule.to_strategy()
    return Strategy(mechanism="none", reason="No rule matched")
