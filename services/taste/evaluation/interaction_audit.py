"""
Interaction signal audit for a single exported profile.

Replays the profile's interaction log three ways from its quiz baseline:

  A  no recency          what the incremental record path produces
  B  recency             what a correct recompute produces
  C  recency, from A     the old double-application defect

and reports how far each lands from the baseline and from each other. A
healthy profile has B close to A and C nowhere in production. A large
``dominance_ratio`` means interactions have drowned out the quiz; it is
null when the baseline is the zero vector.

Usage:
    python -m services.taste.evaluation.interaction_audit profile.json
    python -m services.taste.evaluation.interaction_audit profile.json --output report.json
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

import numpy as np

from services.taste.interactions.blender import (
    ACTION_WEIGHTS,
    LEARNING_RATE,
    replay_interactions,
)
from services.taste.profile.types import TasteProfile
from services.taste.profile.updates import quiz_baseline
from services.taste.vector.dimensions import DIMENSION_WEIGHTS, META_DIMENSIONS
from services.taste.vector.model import TasteVector, cosine_similarity

logger = logging.getLogger(__name__)

CONVERGENCE_TARGETS = (0.5, 0.75, 0.9)


def euclidean(a: TasteVector, b: TasteVector) -> float:
    return float(np.linalg.norm(a.to_array() - b.to_array()))


def interactions_to_converge(weight: float, target: float, learning_rate: float = LEARNING_RATE) -> int:
    """Same-direction interactions needed to close ``target`` of the gap: ceil(log(1-p) / log(1-step))."""
    step = weight * learning_rate
    if step >= 1.0:
        return 1
    return math.ceil(math.log(1.0 - target) / math.log(1.0 - step))


@dataclass
class ReplaySummary:
    label: str
    vector: dict[str, float]
    distance_from_baseline: float
    cosine_to_baseline: float


@dataclass
class AuditReport:
    user_id: str
    generated_at: str
    baseline_source: str
    interaction_count: int
    action_counts: dict[str, int]
    replays: dict[str, ReplaySummary]
    distance_a_to_b: float
    distance_b_to_c: float
    distance_stored_to_b: float
    dominance_ratio: float | None
    defect_amplification: float
    meta_shift: dict[str, float] = field(default_factory=dict)
    convergence: dict[str, dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _summary(label: str, vector: TasteVector, baseline: TasteVector) -> ReplaySummary:
    return ReplaySummary(
        label=label,
        vector={d: round(v, 4) for d, v in vector.to_dict().items()},
        distance_from_baseline=round(euclidean(vector, baseline), 4),
        cosine_to_baseline=round(cosine_similarity(vector, baseline, DIMENSION_WEIGHTS), 4),
    )


def build_audit_report(
    profile: TasteProfile,
    now: datetime,
    learning_rate: float = LEARNING_RATE,
) -> AuditReport:
    baseline, _, source = quiz_baseline(profile)
    log = profile.interaction_log

    replay_a = replay_interactions(baseline, log, now, learning_rate, use_recency=False)
    replay_b = replay_interactions(baseline, log, now, learning_rate, use_recency=True)
    replay_c = replay_interactions(replay_a, log, now, learning_rate, use_recency=True)

    baseline_magnitude = float(np.linalg.norm(baseline.to_array()))
    shift_a = euclidean(replay_a, baseline)
    shift_c = euclidean(replay_c, baseline)

    if source == "genre_default":
        logger.warning("interaction_audit: user=%s has no quiz data, baseline is genre-default", profile.user_id)

    return AuditReport(
        user_id=profile.user_id,
        generated_at=now.isoformat(),
        baseline_source=source,
        interaction_count=len(log),
        action_counts=dict(Counter(i.action.value for i in log)),
        replays={
            "A": _summary("no recency (incremental path)", replay_a, baseline),
            "B": _summary("recency from quiz baseline", replay_b, baseline),
            "C": _summary("recency applied on top of A", replay_c, baseline),
        },
        distance_a_to_b=round(euclidean(replay_a, replay_b), 4),
        distance_b_to_c=round(euclidean(replay_b, replay_c), 4),
        distance_stored_to_b=round(euclidean(profile.vector, replay_b), 4),
        dominance_ratio=round(shift_a / baseline_magnitude, 4) if baseline_magnitude > 0 else None,
        defect_amplification=round(shift_c / shift_a, 4) if shift_a > 0 else 1.0,
        meta_shift={m: round(replay_b.meta[m] - baseline.meta[m], 4) for m in META_DIMENSIONS},
        convergence={
            action.value: {
                f"{int(p * 100)}%": interactions_to_converge(weight, p, learning_rate)
                for p in CONVERGENCE_TARGETS
            }
            for action, weight in ACTION_WEIGHTS.items()
        },
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the interaction audit."""
    import argparse
    import json
    from pathlib import Path

    from services.taste.profile.types import profile_from_record

    parser = argparse.ArgumentParser(
        description="Replay a taste profile's interaction log and report drift"
    )
    parser.add_argument("profile", type=Path, help="Profile JSON export (record format)")
    parser.add_argument("--output", "-o", type=Path, help="Write the report here instead of stdout")
    parser.add_argument(
        "--learning-rate",
        type=float,
        default=LEARNING_RATE,
        help=f"Blend rate (default {LEARNING_RATE})",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.profile.exists():
        logger.error("Profile file not found: %s", args.profile)
        return 1

    profile = profile_from_record(json.loads(args.profile.read_text()))
    logger.info(
        "Profile loaded: user=%s interactions=%d quiz_completed=%s",
        profile.user_id, len(profile.interaction_log), profile.quiz_completed,
    )

    report = build_audit_report(profile, datetime.now(timezone.utc), args.learning_rate)
    payload = json.dumps(report.to_dict(), indent=2)
    if args.output:
        args.output.write_text(payload)
        logger.info("Report written to %s", args.output)
    else:
        print(payload)

    logger.info(
        "A->B %.4f | B->C %.4f | dominance %s | defect amplification %.2fx",
        report.distance_a_to_b, report.distance_b_to_c,
        "n/a" if report.dominance_ratio is None else f"{report.dominance_ratio:.2f}x",
        report.defect_amplification,
    )
    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
