"""Player insights derived from a profile via fixed thresholds."""
from __future__ import annotations

from typing import Any

from influence_engine.models.profile import BehavioralProfile

HIGH = 0.7
LOW = 0.3

# (score field, label) checked against HIGH / LOW
STRENGTHS: list[tuple[str, str]] = [
    ("decision_speed", "Quick Decision Maker"),
    ("strategic_score", "Strategic Thinker"),
    ("resource_efficiency", "Efficient Resource Manager"),
]
WEAKNESSES: list[tuple[str, str]] = [
    ("decision_speed", "Slow Decision Making"),
    ("risk_tolerance", "Risk Averse"),
    ("engagement_level", "Low Engagement"),
]
# (score field, below this value, advice)
RECOMMENDATIONS: list[tuple[str, float, str]] = [
    ("risk_tolerance", 0.4, "Consider taking calculated risks to improve resource gain"),
    ("decision_speed", 0.4, "Practice making decisions more quickly"),
    ("strategic_score", 0.5, "Focus on long-term planning over immediate gains"),
]


def player_type(profile: BehavioralProfile) -> str:
    if profile.risk_tolerance > HIGH:
        return "Risk-Taker"
    if profile.strategic_score > HIGH:
        return "Strategist"
    if profile.resource_efficiency > HIGH:
        return "Resource Manager"
    return "Balanced Player"


def play_style(profile: BehavioralProfile) -> str:
    """Three-word style label, e.g. "Cautious Quick Strategic Player"."""
    traits = [
        "Aggressive" if profile.risk_tolerance > 0.6 else "Cautious",
        "Quick" if profile.decision_speed > 0.6 else "Deliberate",
        "Strategic" if profile.strategic_score > 0.6 else "Tactical",
    ]
    return " ".join(traits) + " Player"


def generate_insights(profile: BehavioralProfile) -> dict[str, Any]:
    return {
        "player_type": player_type(profile),
        "play_style": play_style(profile),
        "strengths": [label for name, label in STRENGTHS if getattr(profile, name) > HIGH],
        "weaknesses": [label for name, label in WEAKNESSES if getattr(profile, name) < LOW],
        "recommendations": [
            advice for name, cutoff, advice in RECOMMENDATIONS
            if getattr(profile, name) < cutoff
        ],
    }
