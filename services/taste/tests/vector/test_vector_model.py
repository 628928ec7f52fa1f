"""
Tests for the TasteVector value type and vector math.

Covers:
  - Strict construction and clamping
  - Blend toward / away, argument validation
  - Weighted (and confidence-weighted) cosine similarity
  - Genre helpers
"""

import math

import numpy as np
import pytest

from services.taste.errors import TasteEngineError, UnknownDimensionError
from services.taste.tests.conftest import make_vector
from services.taste.vector.dimensions import ALL_DIMENSIONS, DIMENSION_WEIGHTS, GENRE_DIMENSIONS
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    blend_vector,
    blend_vector_away,
    clamp_vector,
    cosine_similarity,
    genre_default_vector,
    genres_above,
    is_non_zero,
    similarity_percent,
    top_genres,
)


# ---------------------------------------------------------------------------
# 1. Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_zero_has_every_dimension(self):
        v = TasteVector.zero()
        assert list(v.to_dict()) == list(ALL_DIMENSIONS)
        assert not is_non_zero(v)

    def test_missing_dimension_rejected(self):
        genres = {g: 0.0 for g in GENRE_DIMENSIONS if g != "war"}
        with pytest.raises(UnknownDimensionError, match="missing"):
            TasteVector(genres=genres, meta=TasteVector.zero().meta)

    def test_extra_dimension_rejected(self):
        genres = {**TasteVector.zero().genres, "anime": 0.5}
        with pytest.raises(UnknownDimensionError, match="unexpected"):
            TasteVector(genres=genres, meta=TasteVector.zero().meta)

    def test_out_of_bounds_rejected(self):
        values = TasteVector.zero().to_dict()
        values["comedy"] = -0.1
        with pytest.raises(TasteEngineError):
            TasteVector.from_dict(values)

    def test_meta_may_be_negative(self):
        values = TasteVector.zero().to_dict()
        values["tone"] = -1.0
        assert TasteVector.from_dict(values)["tone"] == -1.0

    def test_families_are_read_only(self):
        v = TasteVector.zero()
        with pytest.raises(TypeError):
            v.genres["comedy"] = 1.0  # type: ignore[index]

    def test_equality_and_hash(self):
        a = make_vector(comedy=0.5, tone=0.2)
        b = make_vector(comedy=0.5, tone=0.2)
        assert a == b
        assert hash(a) == hash(b)
        assert a != make_vector(comedy=0.6, tone=0.2)


class TestClamp:

    def test_clips_each_family_to_its_bounds(self):
        v = clamp_vector({"comedy": 1.7, "horror": -0.3, "tone": -2.0, "pacing": 1.4})
        assert v["comedy"] == 1.0
        assert v["horror"] == 0.0
        assert v["tone"] == -1.0
        assert v["pacing"] == 1.0

    def test_missing_keys_default_to_zero(self):
        v = clamp_vector({"drama": 0.4})
        assert v["action"] == 0.0
        assert v["era"] == 0.0

    def test_nan_becomes_zero(self):
        v = clamp_vector({"drama": math.nan, "tone": math.nan})
        assert v["drama"] == 0.0
        assert v["tone"] == 0.0

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownDimensionError):
            clamp_vector({"anime": 0.5})


# ---------------------------------------------------------------------------
# 2. Blending
# ---------------------------------------------------------------------------

class TestBlend:

    def test_toward_moves_fraction_of_gap(self):
        current = make_vector(comedy=0.2, tone=0.0)
        target = make_vector(comedy=1.0, tone=1.0)
        out = blend_vector(current, target, weight=1.0, rate=0.5)
        assert out["comedy"] == pytest.approx(0.6)
        assert out["tone"] == pytest.approx(0.5)

    def test_away_moves_same_magnitude_opposite_way(self):
        current = make_vector(comedy=0.5, tone=0.2)
        target = make_vector(comedy=1.0, tone=0.6)
        toward = blend_vector(current, target, weight=0.6, rate=0.05)
        away = blend_vector_away(current, target, weight=0.6, rate=0.05)
        for dim in ("comedy", "tone"):
            assert toward[dim] - current[dim] == pytest.approx(current[dim] - away[dim])

    def test_away_is_clamped(self):
        current = make_vector(comedy=0.01)
        target = make_vector(comedy=1.0)
        assert blend_vector_away(current, target, weight=1.0, rate=1.0)["comedy"] == 0.0

    def test_zero_weight_is_identity(self):
        current = make_vector(drama=0.3, era=-0.4)
        assert blend_vector(current, make_vector(drama=1.0), weight=0.0, rate=0.05) == current

    @pytest.mark.parametrize("weight,rate", [(-0.1, 0.05), (1.1, 0.05), (0.5, 0.0), (0.5, -1.0)])
    def test_invalid_arguments_rejected(self, weight, rate):
        with pytest.raises(TasteEngineError):
            blend_vector(TasteVector.zero(), TasteVector.zero(), weight=weight, rate=rate)


# ---------------------------------------------------------------------------
# 3. Similarity
# ---------------------------------------------------------------------------

class TestCosine:

    def test_identical_vectors_score_one(self):
        v = make_vector(action=0.8, scifi=0.6, tone=-0.3)
        assert cosine_similarity(v, v) == pytest.approx(1.0)
        assert similarity_percent(v, v) == 100

    def test_opposite_meta_scores_minus_one(self):
        a = make_vector(tone=1.0, pacing=-0.5)
        b = make_vector(tone=-1.0, pacing=0.5)
        assert cosine_similarity(a, b) == pytest.approx(-1.0)
        assert similarity_percent(a, b) == 0

    def test_zero_magnitude_returns_zero(self):
        v = make_vector(comedy=0.5)
        assert cosine_similarity(TasteVector.zero(), v) == 0.0
        assert similarity_percent(TasteVector.zero(), v) == 50

    def test_orthogonal_is_fifty_percent(self):
        assert similarity_percent(make_vector(comedy=1.0), make_vector(horror=1.0)) == 50

    def test_symmetric(self):
        a = make_vector(action=0.9, tone=0.4, era=-0.2)
        b = make_vector(drama=0.7, tone=-0.1, intensity=0.5)
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_scales_by_weight_before_cosine(self):
        a = make_vector(comedy=1.0, era=1.0)
        b = make_vector(comedy=1.0, era=-1.0)
        wa = np.array([DIMENSION_WEIGHTS[d] * a[d] for d in ALL_DIMENSIONS])
        wb = np.array([DIMENSION_WEIGHTS[d] * b[d] for d in ALL_DIMENSIONS])
        expected = float(wa @ wb / (np.linalg.norm(wa) * np.linalg.norm(wb)))
        assert cosine_similarity(a, b) == pytest.approx(expected)
        # era weighs 0.4, so disagreement there barely costs anything
        assert cosine_similarity(a, b) > 0.7

    def test_custom_weights_can_ignore_dimensions(self):
        a = make_vector(comedy=1.0, tone=1.0)
        b = make_vector(comedy=1.0, tone=-1.0)
        weights = {**DIMENSION_WEIGHTS, "tone": 0.0}
        assert cosine_similarity(a, b, weights=weights) == pytest.approx(1.0)

    def test_low_confidence_dimension_counts_less(self):
        a = make_vector(comedy=1.0, tone=1.0)
        b = make_vector(comedy=1.0, tone=-1.0)
        sure = ConfidenceVector({"comedy": 1.0, "tone": 1.0})
        unsure_tone = ConfidenceVector({"comedy": 1.0, "tone": 0.0})
        assert cosine_similarity(a, b, confidence=unsure_tone) > cosine_similarity(a, b, confidence=sure)


# ---------------------------------------------------------------------------
# 4. Helpers
# ---------------------------------------------------------------------------

class TestGenreHelpers:

    def test_top_genres_strongest_first(self):
        v = make_vector(horror=0.9, comedy=0.3, drama=0.6, tone=1.0)
        assert top_genres(v, 2) == ["horror", "drama"]

    def test_top_genres_ties_keep_canonical_order(self):
        v = make_vector(war=0.5, action=0.5)
        assert top_genres(v, 2) == ["action", "war"]

    def test_genres_above_threshold(self):
        v = make_vector(horror=0.9, comedy=0.1, drama=0.6)
        assert genres_above(v) == ["horror", "drama"]

    def test_genre_default_vector(self):
        v = genre_default_vector(["comedy", "romance"])
        assert v["comedy"] == 0.5
        assert v["romance"] == 0.5
        assert v["horror"] == 0.25
        assert v["tone"] == 0.0

    def test_genre_default_rejects_unknown(self):
        with pytest.raises(UnknownDimensionError):
            genre_default_vector(["anime"])


class TestConfidenceVector:

    def test_missing_entries_are_zero(self):
        c = ConfidenceVector({"comedy": 0.4})
        assert c["comedy"] == 0.4
        assert c["tone"] == 0.0

    def test_out_of_range_rejected(self):
        with pytest.raises(TasteEngineError):
            ConfidenceVector({"comedy": 1.2})

    def test_unknown_dimension_rejected(self):
        with pytest.raises(UnknownDimensionError):
            ConfidenceVector({"anime": 0.2})
