"""
Coach Sim Scoring
=================

Compares an actual training log with a predicted one and reduces the
comparison to a single similarity score, roughly in [-1, 1].

Per-metric score from relative error e = |a - p| / a and tolerance t:
    e <= t          -> 100 .. 80
    t  < e <= 2t    ->  80 .. 50
    2t < e <= 3t    ->  50 .. 10
    3t < e <= 5t    ->  10 .. -50
    e  > 5t         -> -50 - min((e - 5t) * 10, 50)

The final score is the weighted average over metrics present on both logs,
rounded to an integer and divided by 100. Each result is ADDED to the
paper's cumulative confidence (see ConfidenceStore.accumulate), so the
confidence trend is unbounded and never decays.
"""

import math
from typing import Dict, List, Mapping, Optional, Union

from coach_sim.models import TrainingLogEntry, ConfidenceScorePoint, METRIC_FIELDS


METRIC_TOLERANCES = {
    'duration': 0.10,
    'distance': 0.10,
    'pace': 0.05,
    'cadence': 0.08,
    'lactate_threshold_pace': 0.05,
    'aerobic_decoupling': 0.15,
    'one_min_hrr': 0.12,
    'efficiency_factor': 0.10,
}

WEIGHT_PRESETS: Dict[str, Dict[str, float]] = {
    # General comparison
    'balanced': {
        'duration': 0.15,
        'distance': 0.15,
        'pace': 0.20,
        'cadence': 0.10,
        'lactate_threshold_pace': 0.15,
        'aerobic_decoupling': 0.10,
        'one_min_hrr': 0.10,
        'efficiency_factor': 0.05,
    },
    # Pace & efficiency
    'performance-focused': {
        'duration': 0.10,
        'distance': 0.10,
        'pace': 0.30,
        'cadence': 0.15,
        'lactate_threshold_pace': 0.20,
        'aerobic_decoupling': 0.05,
        'one_min_hrr': 0.05,
        'efficiency_factor': 0.05,
    },
    # Duration & distance
    'endurance-focused': {
        'duration': 0.25,
        'distance': 0.25,
        'pace': 0.15,
        'cadence': 0.10,
        'lactate_threshold_pace': 0.10,
        'aerobic_decoupling': 0.05,
        'one_min_hrr': 0.05,
        'efficiency_factor': 0.05,
    },
    # HRR & aerobic decoupling
    'recovery-focused': {
        'duration': 0.10,
        'distance': 0.10,
        'pace': 0.15,
        'cadence': 0.10,
        'lactate_threshold_pace': 0.10,
        'aerobic_decoupling': 0.25,
        'one_min_hrr': 0.20,
        'efficiency_factor': 0.00,
    },
}

DEFAULT_PRESET = 'balanced'

# Cumulative confidence above which a paper unlocks features
ELIGIBLE_FOR_LONG_TERM_PLANNING_SCORE = 2
ELIGIBLE_FOR_SUGGESTIONS_SCORE = 2


def resolve_weights(weights: Union[str, Mapping[str, float], None] = None) -> Dict[str, float]:
    """
    Preset name, full mapping, or partial mapping (merged over 'balanced').
    Unknown preset names raise ValueError.
    """
    if weights is None:
        return dict(WEIGHT_PRESETS[DEFAULT_PRESET])
    if isinstance(weights, str):
        key = weights.replace('_', '-')
        if key not in WEIGHT_PRESETS:
            raise ValueError(
                f"Unknown weight preset '{weights}'. Choose from: {', '.join(WEIGHT_PRESETS)}"
            )
        return dict(WEIGHT_PRESETS[key])

    merged = dict(WEIGHT_PRESETS[DEFAULT_PRESET])
    merged.update({k: v for k, v in weights.items() if k in METRIC_TOLERANCES})
    return merged


def metric_score(actual: float, predicted: float, tolerance: float = 0.1) -> float:
    """Piecewise-linear score of one metric, in [-100, 100]."""
    error = abs(actual - predicted) / actual

    if error <= tolerance:
        return 100 - (error / tolerance) * 20
    if error <= tolerance * 2:
        return 80 - ((error - tolerance) / tolerance) * 30
    if error <= tolerance * 3:
        return 50 - ((error - tolerance * 2) / tolerance) * 40
    if error <= tolerance * 5:
        return 10 - ((error - tolerance * 3) / (tolerance * 2)) * 60
    return -50 - min((error - tolerance * 5) * 10, 50)


def comparable_metrics(actual: TrainingLogEntry, predicted: TrainingLogEntry) -> List[str]:
    """Metrics present on both logs (an actual of 0 has no relative error)."""
    names = []
    for name in METRIC_FIELDS:
        a = getattr(actual, name)
        p = getattr(predicted, name)
        if a is None or p is None or a == 0:
            continue
        names.append(name)
    return names


def score_training_logs(
    actual: TrainingLogEntry,
    predicted: TrainingLogEntry,
    weights: Union[str, Mapping[str, float], None] = None,
) -> float:
    """
    Weighted similarity of two training logs, normalized to about [-1, 1].
    Returns exactly 0 when no metric is comparable, and also when every
    comparable metric has weight 0 in the chosen preset (e.g. a log with
    only efficiency_factor under 'recovery-focused'). Identical logs score
    1.0 whenever at least one comparable metric carries weight.
    """
    weight_map = resolve_weights(weights)

    total_score = 0.0
    total_weight = 0.0
    for name in comparable_metrics(actual, predicted):
        weight = weight_map.get(name, 0.0)
        score = metric_score(getattr(actual, name), getattr(predicted, name), METRIC_TOLERANCES[name])
        total_score += score * weight
        total_weight += weight

    if total_weight <= 0:
        return 0
    average = total_score / total_weight
    # Round half up to a whole score before normalizing
    return math.floor(average + 0.5) / 100


def confidence_badges(point: Optional[ConfidenceScorePoint]) -> List[str]:
    """Feature badges unlocked by a paper's latest cumulative score."""
    if point is None:
        return []
    badges = []
    if point.score > ELIGIBLE_FOR_LONG_TERM_PLANNING_SCORE:
        badges.append("Eligible for Long-term Planning")
    if point.score > ELIGIBLE_FOR_SUGGESTIONS_SCORE:
        badges.append("Eligible for Suggestions")
    return badges
