"""
Recovery Scenarios
==================

Named slices of the recovery history used by the recovery page to replay
a typical period (injury rehab, overreaching, well recovered).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from coach_sim.models import RecoveryEntry
from coach_sim.stores import RecoveryStore


@dataclass
class RecoveryScenario:
    id: str
    name: str
    description: str
    dates: List[str]
    characteristics: List[str] = field(default_factory=list)


RECOVERY_SCENARIOS: Dict[str, RecoveryScenario] = {
    scenario.id: scenario
    for scenario in [
        RecoveryScenario(
            id="injury-recovery",
            name="Injury Recovery",
            description="Recovery from shoulder injury - showing gradual improvement",
            dates=["2025-08-10", "2025-08-11", "2025-08-12"],
            characteristics=["Shoulder injury", "Good sleep", "Low fatigue", "Gradual HRV improvement"],
        ),
        RecoveryScenario(
            id="high-fatigue",
            name="High Fatigue Period",
            description="Overreaching phase with high fatigue and soreness",
            dates=["2025-08-13", "2025-08-14", "2025-08-15"],
            characteristics=["High fatigue (7-9)", "Muscle soreness", "Decreased HRV", "Elevated RHR"],
        ),
        RecoveryScenario(
            id="optimal-recovery",
            name="Optimal Recovery",
            description="Well-recovered state with good metrics across the board",
            dates=["2025-08-16", "2025-08-17", "2025-08-18", "2025-08-19"],
            characteristics=["Good sleep (8+ hrs)", "Low fatigue", "High HRV", "No soreness"],
        ),
    ]
}


def get_scenario(scenario_id: str) -> Optional[RecoveryScenario]:
    return RECOVERY_SCENARIOS.get(scenario_id)


def get_scenario_entries(store: RecoveryStore, scenario_id: str) -> List[RecoveryEntry]:
    """Store rows for the scenario's dates, in scenario order. Missing dates are skipped."""
    scenario = get_scenario(scenario_id)
    if scenario is None:
        return []
    entries = []
    for date in scenario.dates:
        entry = store.get_by_date(date)
        if entry is not None:
            entries.append(entry)
    return entries
