"""
Tests for the quiz pair catalogue and phase 2 / phase 3 pair selection.

Covers:
  - Catalogue structure and lookups
  - Genre-responsive scoring (uncovered genres first, cluster tie-break)
  - Adaptive ambiguity ranking and pair scoring
  - The three fallback tiers and the never-repeat guarantee
"""

import pytest

from services.taste.errors import CatalogueError, UnknownPairError
from services.taste.quiz.pairs import (
    ADAPTIVE_PAIRS,
    ALL_PAIRS,
    FIXED_PAIRS,
    GENRE_RESPONSIVE_PAIRS,
    covered_genres,
    get_fixed_pairs,
    get_pair,
    validate_pairs,
)
from services.taste.quiz.selection import (
    AdaptiveSelectionConfig,
    ambiguous_dimensions,
    dimension_ambiguity,
    score_adaptive_pair,
    score_genre_responsive_pair,
    select_adaptive_pairs,
    select_genre_responsive_pairs,
)
from services.taste.quiz.types import QuizOption, QuizPair, QuizPhase
from services.taste.tests.conftest import make_vector
from services.taste.vector.dimensions import GENRE_DIMENSIONS, META_DIMENSIONS
from services.taste.vector.model import TasteVector

FIXED_IDS = [p.id for p in FIXED_PAIRS]


def _option(tmdb_id: int, **vector: float) -> QuizOption:
    return QuizOption(tmdb_id, "movie", f"Title {tmdb_id}", 2000, "test title", vector)


def _pair(pair_id, a_id, b_id, tested=("comedy",), triggers=("comedy",), phase=QuizPhase.GENRE_RESPONSIVE):
    return QuizPair(
        id=pair_id,
        phase=phase,
        dimensions_tested=tuple(tested),
        option_a=_option(a_id, **{d: 1.0 for d in tested}),
        option_b=_option(b_id, **{d: 0.5 for d in tested}),
        trigger_genres=tuple(triggers),
    )


# ---------------------------------------------------------------------------
# 1. Catalogue
# ---------------------------------------------------------------------------

class TestCatalogue:

    def test_pool_sizes(self):
        assert len(FIXED_PAIRS) == 5
        assert len(GENRE_RESPONSIVE_PAIRS) == 11
        assert len(ADAPTIVE_PAIRS) == 25

    def test_ids_unique(self):
        ids = [p.id for p in ALL_PAIRS]
        assert len(ids) == len(set(ids))

    def test_every_tested_dimension_is_set_by_an_option(self):
        for pair in ALL_PAIRS:
            for dim in pair.dimensions_tested:
                assert dim in pair.option_a.vector or dim in pair.option_b.vector, (pair.id, dim)

    def test_phases_match_pools(self):
        assert all(p.phase is QuizPhase.FIXED for p in FIXED_PAIRS)
        assert all(p.phase is QuizPhase.GENRE_RESPONSIVE for p in GENRE_RESPONSIVE_PAIRS)
        assert all(p.phase is QuizPhase.ADAPTIVE for p in ADAPTIVE_PAIRS)

    def test_fixed_pairs_in_order(self):
        assert [p.id for p in get_fixed_pairs()] == ["fixed-1", "fixed-2", "fixed-3", "fixed-4", "fixed-5"]

    def test_get_pair(self):
        assert get_pair("genre-horror").trigger_genres == ("horror",)
        with pytest.raises(UnknownPairError):
            get_pair("genre-anime")

    def test_validation_catches_untested_dimension(self):
        bad = QuizPair(
            id="bad-1",
            phase=QuizPhase.ADAPTIVE,
            dimensions_tested=("western",),
            option_a=_option(1, comedy=1.0),
            option_b=_option(2, drama=1.0),
        )
        with pytest.raises(CatalogueError, match="western"):
            validate_pairs([bad])

    def test_validation_catches_duplicate_ids(self):
        with pytest.raises(CatalogueError, match="duplicate"):
            validate_pairs([FIXED_PAIRS[0], FIXED_PAIRS[0]])

    def test_fixed_pairs_leave_some_genres_uncovered(self):
        covered = covered_genres()
        assert "action" in covered
        assert {"documentary", "fantasy", "mystery", "reality", "western"}.isdisjoint(covered)


# ---------------------------------------------------------------------------
# 2. Genre-responsive
# ---------------------------------------------------------------------------

class TestGenreResponsive:

    def test_scoring_prefers_uncovered_genres(self):
        covered = covered_genres()
        documentary = get_pair("genre-documentary")
        crime = get_pair("genre-crime")
        assert score_genre_responsive_pair(documentary, ["documentary"], covered) == 2
        assert score_genre_responsive_pair(crime, ["crime"], covered) == 1
        assert score_genre_responsive_pair(crime, ["comedy"], covered) == 0

    def test_selects_top_scoring_pairs(self):
        selected = select_genre_responsive_pairs(["documentary", "crime", "thriller"], FIXED_IDS)
        assert [p.id for p in selected] == ["genre-documentary", "genre-crime"]

    def test_cluster_match_breaks_ties(self):
        top = ["fantasy", "reality"]
        plain = select_genre_responsive_pairs(top, FIXED_IDS, count=1)
        hinted = select_genre_responsive_pairs(
            top, FIXED_IDS, cluster_ids=["reality-entertainment"], count=1
        )
        assert [p.id for p in plain] == ["genre-fantasy"]
        assert [p.id for p in hinted] == ["genre-reality"]

    def test_zero_count(self):
        assert select_genre_responsive_pairs(["horror"], FIXED_IDS, count=0) == []

    def test_always_fills_quota_from_real_pool(self):
        selected = select_genre_responsive_pairs([], FIXED_IDS, count=4)
        assert len(selected) == 4
        assert len({p.id for p in selected}) == 4


class TestFallbackTiers:

    @pytest.fixture
    def pool(self):
        return [
            _pair("p1", 901, 902),
            _pair("p2", 902, 903),
            _pair("p3", 904, 905, tested=("drama",), triggers=("drama",)),
        ]

    def test_tier_one_skips_content_overlap(self, pool):
        selected = select_genre_responsive_pairs(["comedy"], [], count=2, pool=pool)
        assert [p.id for p in selected] == ["p1", "p3"]

    def test_tier_two_allows_overlap(self, pool):
        selected = select_genre_responsive_pairs(["comedy"], [], count=3, pool=pool)
        assert [p.id for p in selected] == ["p1", "p3", "p2"]

    def test_tier_three_reuses_excluded(self, pool):
        selected = select_genre_responsive_pairs(["comedy"], ["p3"], count=3, pool=pool)
        assert [p.id for p in selected] == ["p1", "p2", "p3"]

    def test_short_pool_returns_what_exists(self, pool):
        selected = select_genre_responsive_pairs(["comedy"], [], count=10, pool=pool)
        assert sorted(p.id for p in selected) == ["p1", "p2", "p3"]

    def test_excluded_content_blocked_in_tier_one(self, pool):
        # p1 excluded: its content (901, 902) blocks p2 in tier 1
        selected = select_genre_responsive_pairs(["comedy"], ["p1"], count=1, pool=pool)
        assert [p.id for p in selected] == ["p3"]


# ---------------------------------------------------------------------------
# 3. Adaptive
# ---------------------------------------------------------------------------

class TestAmbiguity:

    def test_ambiguity_formulas(self):
        v = make_vector(comedy=0.5, horror=1.0, drama=0.25, tone=0.0, era=-0.6)
        amb = dimension_ambiguity(v)
        assert amb["comedy"] == pytest.approx(1.0)
        assert amb["horror"] == pytest.approx(0.0)
        assert amb["drama"] == pytest.approx(0.5)
        assert amb["tone"] == pytest.approx(1.0)
        assert amb["era"] == pytest.approx(0.4)

    def test_zero_vector_targets_neutral_meta(self):
        assert ambiguous_dimensions(TasteVector.zero()) == list(META_DIMENSIONS)

    def test_capped_at_six(self):
        v = make_vector(**{g: 0.5 for g in GENRE_DIMENSIONS})
        chosen = ambiguous_dimensions(v)
        assert len(chosen) == 6
        assert chosen[:3] == ["action", "adventure", "animation"]

    def test_top_k_always_included(self):
        v = make_vector(**{g: 1.0 for g in GENRE_DIMENSIONS}, tone=0.9, pacing=0.9, era=0.9,
                        popularity=0.9, intensity=0.95)
        chosen = ambiguous_dimensions(v)
        assert len(chosen) == 3

    def test_custom_config(self):
        config = AdaptiveSelectionConfig(ambiguous_top_k=1, max_ambiguous_dimensions=2)
        assert len(ambiguous_dimensions(TasteVector.zero(), config)) == 2

    def test_pair_score(self):
        pair = QuizPair(
            id="score-me",
            phase=QuizPhase.ADAPTIVE,
            dimensions_tested=("tone", "comedy"),
            option_a=_option(1, tone=0.8, comedy=1.0),
            option_b=_option(2, tone=-0.6),
        )
        # tone: 2 + 1.4 * 0.5; comedy: 2 (no separation, B is silent); breadth 2 * 0.1
        assert score_adaptive_pair(pair, {"tone", "comedy"}) == pytest.approx(4.9)
        assert score_adaptive_pair(pair, set()) == pytest.approx(0.2)


class TestAdaptiveSelection:

    def test_returns_distinct_unused_pairs(self):
        used = FIXED_IDS + ["genre-horror", "genre-crime"]
        selected = select_adaptive_pairs(TasteVector.zero(), used)
        ids = [p.id for p in selected]
        assert len(ids) == 5
        assert len(set(ids)) == 5
        assert not set(ids) & set(used)
        assert all(p.phase is QuizPhase.ADAPTIVE for p in selected)

    def test_prefers_pairs_testing_ambiguous_dimensions(self):
        selected = select_adaptive_pairs(TasteVector.zero(), [], count=1)
        ambiguous = set(META_DIMENSIONS)
        best = max(score_adaptive_pair(p, ambiguous) for p in ADAPTIVE_PAIRS)
        assert score_adaptive_pair(selected[0], ambiguous) == pytest.approx(best)

    def test_exhausted_pool_reuses_used_pairs(self):
        used = [p.id for p in ADAPTIVE_PAIRS[:-2]]
        selected = select_adaptive_pairs(TasteVector.zero(), used, count=5)
        ids = [p.id for p in selected]
        assert len(ids) == 5
        assert len(set(ids)) == 5
        assert {ADAPTIVE_PAIRS[-1].id, ADAPTIVE_PAIRS[-2].id} <= set(ids)

    def test_zero_count(self):
        assert select_adaptive_pairs(TasteVector.zero(), [], count=0) == []
