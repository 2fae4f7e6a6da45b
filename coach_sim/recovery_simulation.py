"""
Coach Sim Recovery Simulation
=============================

Synthesizes the next recovery snapshot from the latest one and the
injury / recovery-factor tags picked in the UI.

Flag-like fields and numeric fields treat an unselected tag differently:
- soreness and injury are CLEARED when their tags are not selected
- numeric drivers (injuries, short sleep) only skip their directional
  nudge; ambient jitter still applies

All numeric outputs are clamped to realistic ranges.
"""

import logging
import random
from dataclasses import replace
from typing import Iterable, List, Optional

from coach_sim.clock import SimulationClock, default_clock
from coach_sim.models import RecoveryEntry

logger = logging.getLogger(__name__)


# Tag ids used by the UI
SLEEP_UNDER_6 = "sleep-under-6"
SORE_LEGS = "sore-legs"
KNEE_HURT = "knee-hurt"
BREAK_ANKLE = "break-ankle"

INJURY_TAGS = (KNEE_HURT, BREAK_ANKLE)
RECOVERY_TAGS = (SLEEP_UNDER_6, SORE_LEGS)

SIMULATION_SOURCE = "Simulation"

# Ranges
SHORT_SLEEP_RANGE = (0.5, 5.99)
AMBIENT_SLEEP_RANGE = (3.0, 12.0)
RHR_RANGE = (40, 100)
HRV_RANGE = (20, 100)
FATIGUE_RANGE = (1, 10)

SHORT_SLEEP_CAP = 5.9
SHORT_SLEEP_JITTER = 0.05   # +/- 5%
AMBIENT_SLEEP_JITTER = 0.3  # +/- hours

# Stress load = injuries * INJURY_WEIGHT + SHORT_SLEEP_BONUS
INJURY_WEIGHT = 1.0
SHORT_SLEEP_BONUS = 1.0

# Per unit of stress load, and ambient jitter half-widths
RHR_PER_LOAD, RHR_JITTER = 3.0, 1.0
HRV_PER_LOAD, HRV_JITTER = 5.0, 2.0
FATIGUE_PER_LOAD, FATIGUE_JITTER = 1.5, 0.5

# Starting points when the previous snapshot lacks a value
DEFAULT_RHR = 60
DEFAULT_HRV = 60
DEFAULT_FATIGUE = 3


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _unique(tags: Iterable[str]) -> List[str]:
    seen = []
    for tag in tags:
        if tag not in seen:
            seen.append(tag)
    return seen


def _simulate_sleep(current: Optional[float], short_sleep: bool, rng: random.Random) -> Optional[float]:
    if short_sleep:
        base = min(current if current is not None else SHORT_SLEEP_CAP, SHORT_SLEEP_CAP)
        value = base * (1 + rng.uniform(-SHORT_SLEEP_JITTER, SHORT_SLEEP_JITTER))
        return clamp(round(value, 1), *SHORT_SLEEP_RANGE)

    if current is None:
        return None
    value = current + rng.uniform(-AMBIENT_SLEEP_JITTER, AMBIENT_SLEEP_JITTER)
    return clamp(round(value, 1), *AMBIENT_SLEEP_RANGE)


def simulate_recovery_entry(
    entry: RecoveryEntry,
    injury_tags: Iterable[str] = (),
    recovery_tags: Iterable[str] = (),
    rng: Optional[random.Random] = None,
) -> RecoveryEntry:
    """Perturb one recovery snapshot. Date and source are left to the caller."""
    rng = rng or random.Random()
    injuries = _unique(injury_tags)
    factors = set(recovery_tags)
    short_sleep = SLEEP_UNDER_6 in factors

    sleep = _simulate_sleep(entry.sleep_duration, short_sleep, rng)

    if SORE_LEGS in factors:
        soreness = _unique(list(entry.soreness or []) + ["legs"])
    else:
        soreness = []

    load = len(injuries) * INJURY_WEIGHT + (SHORT_SLEEP_BONUS if short_sleep else 0.0)

    rhr = entry.rhr if entry.rhr is not None else DEFAULT_RHR
    rhr += RHR_PER_LOAD * load + rng.uniform(-RHR_JITTER, RHR_JITTER)

    hrv = entry.hrv if entry.hrv is not None else DEFAULT_HRV
    hrv -= HRV_PER_LOAD * load + rng.uniform(-HRV_JITTER, HRV_JITTER)

    fatigue = entry.fatigue if entry.fatigue is not None else DEFAULT_FATIGUE
    fatigue += FATIGUE_PER_LOAD * load + rng.uniform(-FATIGUE_JITTER, FATIGUE_JITTER)

    return replace(
        entry,
        sleep_duration=sleep,
        rhr=int(clamp(round(rhr), *RHR_RANGE)),
        hrv=int(clamp(round(hrv), *HRV_RANGE)),
        fatigue=int(clamp(round(fatigue), *FATIGUE_RANGE)),
        soreness=soreness,
        injury=injuries,
    )


def run_recovery_simulation(
    history: List[RecoveryEntry],
    injury_tags: Iterable[str] = (),
    recovery_tags: Iterable[str] = (),
    clock: Optional[SimulationClock] = None,
    rng: Optional[random.Random] = None,
) -> List[RecoveryEntry]:
    """
    Simulate from the most recent snapshot (by date) and return a new
    history with the simulated row appended. Empty history is returned
    unchanged.
    """
    if not history:
        return history

    clock = clock or default_clock
    ordered = sorted(history, key=lambda e: e.date)
    latest = ordered[-1]

    simulated = simulate_recovery_entry(latest, injury_tags, recovery_tags, rng)
    simulated = replace(simulated, date=clock.now_iso_date(), source=SIMULATION_SOURCE)

    logger.info(
        f"Recovery simulation {latest.date} -> {simulated.date}: "
        f"injuries={simulated.injury} soreness={simulated.soreness}"
    )
    return ordered + [simulated]
