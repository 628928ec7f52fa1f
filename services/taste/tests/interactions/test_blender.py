"""
Tests for the interaction blender: action weights, recency bands, replay,
log capping and interaction confidence.
"""

import random
from datetime import datetime, timedelta

import pytest

from services.taste.interactions.blender import (
    LEARNING_RATE,
    append_to_log,
    apply_interaction,
    apply_interaction_confidence,
    chronological,
    genre_default_baseline,
    recency_weight,
    replay_confidence,
    replay_interactions,
)
from services.taste.interactions.types import InteractionAction
from services.taste.tests.conftest import NOW, make_interaction, make_vector
from services.taste.vector.dimensions import ALL_DIMENSIONS, GENRE_DIMENSIONS, META_DIMENSIONS
from services.taste.vector.model import ConfidenceVector, TasteVector


# ---------------------------------------------------------------------------
# 1. Weights
# ---------------------------------------------------------------------------

class TestRecency:

    @pytest.mark.parametrize("days,expected", [
        (0, 1.0), (3, 1.0), (7, 1.0), (8, 0.8), (30, 0.8), (31, 0.5), (90, 0.5), (91, 0.3), (400, 0.3),
    ])
    def test_bands(self, days, expected):
        assert recency_weight(NOW - timedelta(days=days), NOW) == expected

    def test_naive_timestamps_read_as_utc(self):
        naive = datetime(2025, 5, 30, 12, 0)
        assert recency_weight(naive, NOW) == 1.0


class TestApplyInteraction:

    def test_positive_blends_toward(self):
        out = apply_interaction(TasteVector.zero(), make_interaction("thumbs_up"))
        assert out["scifi"] == pytest.approx(1.0 * LEARNING_RATE)
        assert out["intensity"] == pytest.approx(0.6 * LEARNING_RATE)

    def test_action_weight_scales_step(self):
        out = apply_interaction(TasteVector.zero(), make_interaction("watchlist_add"))
        assert out["scifi"] == pytest.approx(0.3 * LEARNING_RATE)

    def test_negative_blends_away(self):
        start = make_vector(scifi=0.5)
        out = apply_interaction(start, make_interaction("thumbs_down"))
        assert out["scifi"] == pytest.approx(0.5 - 0.6 * LEARNING_RATE * 0.5)

    def test_removed_is_negative(self):
        assert make_interaction("removed").is_negative
        assert not make_interaction("watched").is_negative

    def test_recency_scales_step(self):
        out = apply_interaction(TasteVector.zero(), make_interaction("thumbs_up"), recency=0.5)
        assert out["scifi"] == pytest.approx(0.5 * LEARNING_RATE)


# ---------------------------------------------------------------------------
# 2. Replay
# ---------------------------------------------------------------------------

class TestReplay:

    def test_chronological_is_stable(self):
        a = make_interaction(content_id=1, timestamp=NOW)
        b = make_interaction(content_id=2, timestamp=NOW - timedelta(days=1))
        c = make_interaction(content_id=3, timestamp=NOW)
        assert [i.content_id for i in chronological([a, b, c])] == [2, 1, 3]

    def test_without_recency_matches_incremental_path(self):
        log = [
            make_interaction("thumbs_up", NOW - timedelta(days=100), comedy=1.0, tone=0.8),
            make_interaction("thumbs_down", NOW - timedelta(days=10), horror=1.0, tone=-0.8),
            make_interaction("watched", NOW, drama=1.0),
        ]
        incremental = TasteVector.zero()
        for interaction in log:
            incremental = apply_interaction(incremental, interaction)
        replayed = replay_interactions(TasteVector.zero(), log, NOW, use_recency=False)
        assert replayed == incremental

    def test_log_order_does_not_matter(self):
        older = make_interaction("thumbs_up", NOW - timedelta(days=2), comedy=1.0)
        newer = make_interaction("thumbs_down", NOW, comedy=1.0)
        forward = replay_interactions(TasteVector.zero(), [older, newer], NOW)
        backward = replay_interactions(TasteVector.zero(), [newer, older], NOW)
        assert forward == backward

    def test_old_interactions_count_less(self):
        old = make_interaction("thumbs_up", NOW - timedelta(days=200))
        out = replay_interactions(TasteVector.zero(), [old], NOW)
        assert out["scifi"] == pytest.approx(0.3 * LEARNING_RATE)

    def test_diminishing_returns(self):
        log = [make_interaction("thumbs_up", NOW, comedy=1.0) for _ in range(2)]
        plain = replay_interactions(TasteVector.zero(), log, NOW)
        damped = replay_interactions(TasteVector.zero(), log, NOW, diminishing_returns=True)
        # second step at half weight: 0.05 + 0.95 * 0.025
        assert damped["comedy"] == pytest.approx(0.05 + 0.95 * 0.025)
        assert damped["comedy"] < plain["comedy"]

    def test_empty_log_returns_baseline(self):
        baseline = make_vector(drama=0.4)
        assert replay_interactions(baseline, [], NOW) == baseline

    @pytest.mark.parametrize("seed", range(8))
    def test_replay_stays_in_bounds(self, seed):
        rng = random.Random(seed)
        log = [
            make_interaction(
                rng.choice(list(InteractionAction)),
                NOW - timedelta(days=rng.randint(0, 400)),
                i,
                **{dim: rng.choice([-1.0, 0.0, 0.5, 1.0]) for dim in rng.sample(ALL_DIMENSIONS, 6)},
            )
            for i in range(60)
        ]
        start = make_vector(**{dim: rng.choice([-1.0, 1.0]) for dim in ALL_DIMENSIONS})
        for use_recency in (True, False):
            for learning_rate in (LEARNING_RATE, 1.0):
                out = replay_interactions(
                    start, log, NOW, learning_rate, use_recency, diminishing_returns=seed % 2 == 0
                )
                assert all(0.0 <= out[dim] <= 1.0 for dim in GENRE_DIMENSIONS)
                assert all(-1.0 <= out[dim] <= 1.0 for dim in META_DIMENSIONS)


class TestLog:

    def test_append_keeps_newest_at_cap(self):
        log = tuple(make_interaction(content_id=i) for i in range(3))
        updated = append_to_log(log, make_interaction(content_id=99), cap=3)
        assert [i.content_id for i in updated] == [1, 2, 99]

    def test_append_under_cap(self):
        updated = append_to_log((), make_interaction(content_id=7))
        assert len(updated) == 1


class TestBaselineAndConfidence:

    def test_genre_default_baseline(self):
        seed = make_vector(comedy=0.6, horror=0.05, tone=0.5)
        baseline = genre_default_baseline(seed)
        assert baseline["comedy"] == 0.2
        assert baseline["horror"] == 0.2
        assert baseline["drama"] == 0.0
        assert baseline["tone"] == 0.0

    def test_genre_default_without_seed(self):
        assert genre_default_baseline(None) == TasteVector.zero()

    def test_confidence_on_set_dimensions_only(self):
        conf = apply_interaction_confidence(ConfidenceVector.zero(), make_interaction("thumbs_up"))
        assert conf["scifi"] == pytest.approx(0.05)
        assert conf["intensity"] == pytest.approx(0.05)
        assert conf["comedy"] == 0.0

    def test_confidence_gain_by_action(self):
        conf = apply_interaction_confidence(ConfidenceVector.zero(), make_interaction("watchlist_add"))
        assert conf["scifi"] == pytest.approx(0.02)

    def test_confidence_capped(self):
        log = [make_interaction(InteractionAction.THUMBS_UP) for _ in range(30)]
        conf = replay_confidence(ConfidenceVector.zero(), log)
        assert conf["scifi"] == 1.0
