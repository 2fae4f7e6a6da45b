"""
Coach Sim Performance Simulation
================================

Synthesizes the next day's training log from the latest one along a
trajectory:

- IMPROVED: more duration/distance/EF, faster pace & threshold pace,
  higher cadence and 1-min HRR, lower aerobic decoupling
- DECLINED: the mirror image
- NEUTRAL: small symmetric fluctuation on every metric

Proportional mode draws one 10-25% magnitude per call plus independent
per-field jitter. Simple mode uses the factor itself as the magnitude and
adds no jitter (NEUTRAL keeps its +/- factor/2 band). The factor is
clamped to [0, MAX_FACTOR] so no value turns zero or negative.

Pace-like metrics are divided, not multiplied: a lower pace value is faster.
"""

import logging
import math
import random
from dataclasses import replace
from enum import Enum
from typing import Callable, List, Optional

from coach_sim.clock import SimulationClock, default_clock
from coach_sim.models import TrainingLogEntry

logger = logging.getLogger(__name__)


class Trajectory(str, Enum):
    IMPROVED = "IMPROVED"
    NEUTRAL = "NEUTRAL"
    DECLINED = "DECLINED"


# UI button ids -> trajectory
TRAJECTORY_ALIASES = {
    'performance-up': Trajectory.IMPROVED,
    'performance-neutral': Trajectory.NEUTRAL,
    'performance-down': Trajectory.DECLINED,
    'PERFORMANCE_INCREASED': Trajectory.IMPROVED,
    'PERFORMANCE_NEUTRAL': Trajectory.NEUTRAL,
    'PERFORMANCE_DECREASED': Trajectory.DECLINED,
}

# Magnitude range of the proportional mode
MIN_CHANGE = 0.10
CHANGE_SPAN = 0.15

# Fixed secondary nudges
CADENCE_NUDGE = 0.05
DECOUPLING_IMPROVE = 0.20
DECOUPLING_DECLINE = 0.30
HRR_NUDGE = 0.15

DEFAULT_FACTOR = 0.05

# Upper bound on the factor: keeps every scale and jitter term positive
MAX_FACTOR = 0.9


def parse_trajectory(value) -> Trajectory:
    """Trajectory from enum, enum name or UI alias. Raises ValueError."""
    if isinstance(value, Trajectory):
        return value
    if value in TRAJECTORY_ALIASES:
        return TRAJECTORY_ALIASES[value]
    try:
        return Trajectory(str(value).upper())
    except ValueError:
        raise ValueError(f"Unknown trajectory: {value!r}")


def _round(value: float, digits: int = 0) -> float:
    """Half-up rounding (matches the UI's rounding of displayed values)."""
    scale = 10 ** digits
    rounded = math.floor(value * scale + 0.5)
    if digits == 0:
        return rounded
    return rounded / scale


def _apply(value: Optional[float], fn: Callable[[float], float], digits: int = 0) -> Optional[float]:
    if value is None:
        return None
    return _round(fn(value), digits)


def simulate_training_entry(
    entry: TrainingLogEntry,
    trajectory,
    factor: float = DEFAULT_FACTOR,
    simple_mode: bool = False,
    rng: Optional[random.Random] = None,
) -> TrainingLogEntry:
    """
    Perturb one training log. The date is left untouched (callers stamp it).
    Absent metrics stay absent.
    """
    trajectory = parse_trajectory(trajectory)
    rng = rng or random.Random()
    factor = min(max(factor, 0.0), MAX_FACTOR)

    def jitter() -> float:
        return 1 + (rng.random() - 0.5) * factor

    if trajectory == Trajectory.NEUTRAL:
        return replace(
            entry,
            duration=_apply(entry.duration, lambda v: v * jitter()),
            distance=_apply(entry.distance, lambda v: v * jitter(), 2),
            pace=_apply(entry.pace, lambda v: v * jitter()),
            cadence=_apply(entry.cadence, lambda v: v * jitter()),
            lactate_threshold_pace=_apply(entry.lactate_threshold_pace, lambda v: v * jitter()),
            aerobic_decoupling=_apply(entry.aerobic_decoupling, lambda v: v * jitter(), 1),
            one_min_hrr=_apply(entry.one_min_hrr, lambda v: v * jitter()),
            efficiency_factor=_apply(entry.efficiency_factor, lambda v: v * jitter(), 2),
        )

    if simple_mode:
        magnitude = factor

        def j() -> float:
            return 1.0
    else:
        magnitude = MIN_CHANGE + rng.random() * CHANGE_SPAN
        j = jitter

    improved = trajectory == Trajectory.IMPROVED
    scale = 1 + magnitude if improved else 1 - magnitude
    sign = 1 if improved else -1

    def decoupling(v: float) -> float:
        # Lower decoupling is better
        if improved:
            return v * (1 - DECOUPLING_IMPROVE * j())
        return v * (1 + DECOUPLING_DECLINE * j())

    return replace(
        entry,
        duration=_apply(entry.duration, lambda v: v * scale * j()),
        distance=_apply(entry.distance, lambda v: v * scale * j(), 2),
        pace=_apply(entry.pace, lambda v: v / (scale * j())),
        cadence=_apply(entry.cadence, lambda v: v * (1 + sign * CADENCE_NUDGE * j())),
        lactate_threshold_pace=_apply(entry.lactate_threshold_pace, lambda v: v / (scale * j())),
        aerobic_decoupling=_apply(entry.aerobic_decoupling, decoupling, 1),
        one_min_hrr=_apply(entry.one_min_hrr, lambda v: v * (1 + sign * HRR_NUDGE * j())),
        efficiency_factor=_apply(entry.efficiency_factor, lambda v: v * scale * j(), 2),
    )


def run_training_simulation(
    history: List[TrainingLogEntry],
    trajectory,
    factor: float = DEFAULT_FACTOR,
    simple_mode: bool = False,
    clock: Optional[SimulationClock] = None,
    rng: Optional[random.Random] = None,
) -> List[TrainingLogEntry]:
    """
    Simulate from the most recent entry (by date) and return a new history
    with the simulated row appended. Empty history is returned unchanged.
    """
    if not history:
        return history

    clock = clock or default_clock
    ordered = sorted(history, key=lambda e: e.date)
    latest = ordered[-1]

    simulated = simulate_training_entry(latest, trajectory, factor, simple_mode, rng)
    simulated = replace(simulated, date=clock.now_iso_date())

    logger.info(
        f"Training simulation {parse_trajectory(trajectory).value} "
        f"from {latest.date} -> {simulated.date} (simple={simple_mode})"
    )
    return ordered + [simulated]
