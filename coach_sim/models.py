"""
Coach Sim Data Models
=====================

In-memory records for the simulation engine. Every store keys its records
by ``date`` (ISO ``YYYY-MM-DD`` string) so lexical order == calendar order.

Field naming follows Python conventions; ``WIRE_NAMES`` maps them to the
camelCase keys the browser UI and the AI backend exchange.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any, Union


# Training metrics compared by the scorer and moved by the simulator
METRIC_FIELDS = (
    'duration',
    'distance',
    'pace',
    'cadence',
    'lactate_threshold_pace',
    'aerobic_decoupling',
    'one_min_hrr',
    'efficiency_factor',
)

WIRE_NAMES = {
    'rest_time': 'restTime',
    'lactate_threshold_pace': 'lactaseThresholdPace',
    'aerobic_decoupling': 'aerobicDecoupling',
    'one_min_hrr': 'oneMinHRR',
    'efficiency_factor': 'efficiencyFactor',
    'sleep_duration': 'sleepDuration',
    'rhr': 'RHR',
    'hrv': 'HRV',
    'paper_id': 'paperId',
}

_FROM_WIRE = {v: k for k, v in WIRE_NAMES.items()}


@dataclass
class TrainingLogEntry:
    """One day's workout. Every metric is independently optional."""
    date: str
    duration: Optional[float] = None                # seconds
    distance: Optional[float] = None                # km
    pace: Optional[float] = None                    # sec/km
    cadence: Optional[float] = None                 # steps/min
    lactate_threshold_pace: Optional[float] = None  # sec/km
    aerobic_decoupling: Optional[float] = None      # percent
    one_min_hrr: Optional[float] = None             # bpm
    efficiency_factor: Optional[float] = None       # ratio
    exercise: Optional[str] = None
    intensity: Optional[float] = None               # RPE 1-10
    rep: Optional[int] = None
    set: Optional[int] = None
    rest_time: Optional[float] = None               # seconds

    def metrics(self) -> Dict[str, float]:
        """Present metric values only."""
        return {
            name: getattr(self, name)
            for name in METRIC_FIELDS
            if getattr(self, name) is not None
        }


@dataclass
class RecoveryEntry:
    """One day's recovery snapshot."""
    date: str
    sleep_duration: Optional[float] = None  # hours
    rhr: Optional[int] = None               # bpm
    hrv: Optional[int] = None               # ms
    soreness: List[str] = field(default_factory=list)
    fatigue: Optional[int] = None           # 1-10 self-report
    source: Optional[str] = None
    injury: List[str] = field(default_factory=list)


@dataclass
class ConfidenceScorePoint:
    """Cumulative confidence value of a paper at a date."""
    date: str
    paper_id: str
    score: float


@dataclass
class ClaimPrediction:
    """A predicted field value with its citation."""
    value: Union[str, float]
    reference: str
    reasoning: str


@dataclass
class PredictionEntry:
    """Predictions one paper produced for one day."""
    date: str
    paper_id: str
    predictions: Dict[str, ClaimPrediction] = field(default_factory=dict)


@dataclass
class ResearchPaper:
    id: str
    title: str
    authors: str
    journal: str
    year: int
    abstract: str
    goal: str  # 'strength' | 'endurance'


# ==============================================================================
# Serialization helpers
# ==============================================================================

def to_wire(record: Any, drop_none: bool = True) -> Dict[str, Any]:
    """Dataclass -> camelCase dict (as served to the UI)."""
    raw = asdict(record)
    out = {}
    for key, value in raw.items():
        if drop_none and value is None:
            continue
        out[WIRE_NAMES.get(key, key)] = value
    return out


def from_wire(data: Dict[str, Any]) -> Dict[str, Any]:
    """camelCase dict -> keyword arguments for the dataclasses above."""
    return {_FROM_WIRE.get(key, key): value for key, value in data.items()}
