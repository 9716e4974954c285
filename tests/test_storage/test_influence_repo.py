"""Tests for src/influence_engine/storage/repos/influence_repo.py."""
from __future__ import annotations

from influence_engine.models.influence import InfluenceEvent, PlayerResponse


def _event(uid: str, mechanism: str, occurred_at, response: str = "accepted") -> InfluenceEvent:
    return InfluenceEvent(
        uid=uid, mechanism=mechanism, strength=0.6, context="threat",
        player_response=response, effectiveness_score=0.4, occurred_at=occurred_at,
    )


class TestInfluenceEvents:
    def test_append_assigns_id(self, repos, timestamps):
        stored = repos["influence"].append_event(_event("u1", "framing", timestamps()))
        assert stored.id is not None
        assert stored.player_response is PlayerResponse.ACCEPTED

    def test_newest_first(self, repos, timestamps):
        repo = repos["influence"]
        repo.append_event(_event("u1", "framing", timestamps()))
        repo.append_event(_event("u1", "scarcity", timestamps(), "resisted"))
        events = repo.get_events("u1")
        assert [e.mechanism for e in events] == ["scarcity", "framing"]
        assert events[0].player_response is PlayerResponse.RESISTED
        assert [e.mechanism for e in repo.get_events("u1", limit=1)] == ["scarcity"]

    def test_count_by_mechanism(self, repos, timestamps):
        repo = repos["influence"]
        for mechanism in ("framing", "framing", "anchoring"):
            repo.append_event(_event("u1", mechanism, timestamps()))
        repo.append_event(_event("u2", "framing", timestamps()))
        assert repo.count_by_mechanism("u1") == {"framing": 2, "anchoring": 1}


class TestEffectivenessWeights:
    def test_no_weight_yet(self, repos):
        assert repos["influence"].get_weight("framing") is None
        assert repos["influence"].get_all_weights() == {}

    def test_update_starts_from_initial(self, repos):
        seen = []

        def update(current):
            seen.append(current)
            return current + 0.1

        new = repos["influence"].update_weight("framing", 0.5, update)
        assert seen == [0.5]
        assert new == 0.6
        assert repos["influence"].get_weight("framing") == 0.6

    def test_update_reads_stored_weight(self, repos):
        repo = repos["influence"]
        repo.update_weight("framing", 0.5, lambda w: 0.7)
        repo.update_weight("framing", 0.5, lambda w: w / 2)
        assert repo.get_weight("framing") == 0.35
        with repos["influence"].db.get_connection() as conn:
            updates = conn.execute(
                "SELECT updates FROM effectiveness_weights WHERE mechanism = 'framing'"
            ).fetchone()[0]
        assert updates == 2

    def test_all_weights(self, repos):
        repo = repos["influence"]
        repo.update_weight("framing", 0.5, lambda w: 0.6)
        repo.update_weight("scarcity", 0.5, lambda w: 0.4)
        assert repo.get_all_weights() == {"framing": 0.6, "scarcity": 0.4}
