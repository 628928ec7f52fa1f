"""
Exception hierarchy for the taste engine.

Every error carries a stable machine-readable ``code`` which the HTTP layer
puts into the response envelope. Malformed input fails fast with one of these;
under-supply in pair selection never raises (it degrades through fallbacks).
"""

from __future__ import annotations


class TasteEngineError(ValueError):
    """Base class for all taste engine input and state errors."""

    code = "TASTE_ENGINE_ERROR"


class UnknownDimensionError(TasteEngineError):
    """A vector mapping referenced a dimension key outside the schema."""

    code = "UNKNOWN_DIMENSION"


class UnknownClusterError(TasteEngineError):
    """A cluster id is not in the cluster catalogue."""

    code = "UNKNOWN_CLUSTER"


class UnknownPairError(TasteEngineError):
    """A quiz answer referenced a pair id that is not in the catalogue."""

    code = "UNKNOWN_PAIR"


class CatalogueError(TasteEngineError):
    """Static catalogue data violates a structural invariant."""

    code = "CATALOGUE_INVALID"


class VectorSchemaError(TasteEngineError):
    """A persisted vector array holds a non-numeric entry."""

    code = "VECTOR_SCHEMA"


class QuizSessionError(TasteEngineError):
    """A quiz session was driven out of order."""

    code = "QUIZ_SESSION"


class ProfileNotFoundError(TasteEngineError):
    """No taste profile exists for the user."""

    code = "PROFILE_NOT_FOUND"


class StaleProfileError(TasteEngineError):
    """A profile save lost a compare-and-set race against a newer revision."""

    code = "STALE_PROFILE"
