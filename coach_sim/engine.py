"""
Coach Sim Engine
================

One "run simulation" action from the training page:

1. Simulate the next training row from the latest one -> training store
2. Get a predicted row per research paper (AI backend, else a mocked
   neutral-jitter prediction)
3. Score actual vs predicted; add the delta to the paper's cumulative
   confidence
4. Simulate the next recovery snapshot -> recovery store
5. Advance the clock (subscribers re-render)

Everything is synchronous and in-memory; stores and clock are injected so
each test can build a fresh engine.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from coach_sim.ai_client import AIClient, AIServiceError, map_suggestion_to_prediction, apply_prediction
from coach_sim.clock import SimulationClock
from coach_sim.mock_data import TRAINING_SEED, RECOVERY_SEED, CONFIDENCE_SEED, PREDICTION_SEED
from coach_sim.models import (
    TrainingLogEntry,
    RecoveryEntry,
    ConfidenceScorePoint,
    PredictionEntry,
    ClaimPrediction,
)
from coach_sim.performance_simulation import (
    DEFAULT_FACTOR,
    Trajectory,
    parse_trajectory,
    run_training_simulation,
    simulate_training_entry,
)
from coach_sim.recovery_simulation import run_recovery_simulation
from coach_sim.research import paper_ids as catalog_paper_ids
from coach_sim.scoring import score_training_logs, resolve_weights
from coach_sim.stores import TrainingStore, RecoveryStore, ConfidenceStore, PredictionStore

logger = logging.getLogger(__name__)

MOCK_REFERENCE = "Simulated prediction"


@dataclass
class SimulationOutcome:
    """Result of one run_simulation call."""
    date: str
    training_entry: Optional[TrainingLogEntry] = None
    recovery_entry: Optional[RecoveryEntry] = None
    deltas: Dict[str, float] = field(default_factory=dict)
    confidence: Dict[str, ConfidenceScorePoint] = field(default_factory=dict)
    predictions: List[PredictionEntry] = field(default_factory=list)


def seed_today(*histories: Iterable) -> datetime:
    """
    Day after the latest row across the given histories (training and
    recovery seeds by default). Real date when every history is empty.
    """
    if not histories:
        histories = (TRAINING_SEED, RECOVERY_SEED)
    dates = sorted(entry.date for history in histories for entry in history)
    if not dates:
        return datetime.now()
    return datetime.fromisoformat(dates[-1]) + timedelta(days=1)


class SimulationEngine:
    """Runs simulations against injected clock and stores."""

    def __init__(
        self,
        clock: Optional[SimulationClock] = None,
        training: Optional[TrainingStore] = None,
        recovery: Optional[RecoveryStore] = None,
        confidence: Optional[ConfidenceStore] = None,
        predictions: Optional[PredictionStore] = None,
        ai_client: Optional[AIClient] = None,
        rng: Optional[random.Random] = None,
        paper_ids: Optional[List[str]] = None,
        weights="balanced",
        factor: float = DEFAULT_FACTOR,
        simple_mode: bool = False,
    ):
        self.training = training if training is not None else TrainingStore(TRAINING_SEED)
        self.recovery = recovery if recovery is not None else RecoveryStore(RECOVERY_SEED)
        self.confidence = confidence if confidence is not None else ConfidenceStore(CONFIDENCE_SEED)
        self.predictions = predictions if predictions is not None else PredictionStore(PREDICTION_SEED)
        self.clock = clock if clock is not None else SimulationClock(self._seed_today())
        self.ai_client = ai_client
        self.rng = rng or random.Random()
        self.paper_ids = [str(p) for p in (paper_ids or catalog_paper_ids())]
        self.weights = resolve_weights(weights)
        self.factor = factor
        self.simple_mode = simple_mode

    # ---------- Main action ----------
    def run_simulation(
        self,
        trajectory,
        injury_tags: Iterable[str] = (),
        recovery_tags: Iterable[str] = (),
    ) -> SimulationOutcome:
        trajectory = parse_trajectory(trajectory)
        injury_tags = list(injury_tags)
        recovery_tags = list(recovery_tags)
        today = self.clock.now_iso_date()
        outcome = SimulationOutcome(date=today)

        previous = self.training.get_latest()
        if previous is not None:
            history = run_training_simulation(
                self.training.get_all(), trajectory, self.factor, self.simple_mode,
                clock=self.clock, rng=self.rng,
            )
            actual = history[-1]
            self.training.add(actual)
            outcome.training_entry = actual

            for prediction in self._collect_predictions(previous, trajectory, injury_tags, recovery_tags, today):
                self.predictions.add(prediction)
                outcome.predictions.append(prediction)

                predicted = apply_prediction(self._baseline_prediction(previous, today), prediction)
                delta = score_training_logs(actual, predicted, self.weights)
                point = self.confidence.accumulate(prediction.paper_id, delta, today)
                outcome.deltas[prediction.paper_id] = delta
                outcome.confidence[prediction.paper_id] = point
        else:
            logger.info("Training history empty - skipping training simulation and scoring")

        recovery_history = self.recovery.get_all()
        if recovery_history:
            simulated = run_recovery_simulation(
                recovery_history, injury_tags, recovery_tags, clock=self.clock, rng=self.rng,
            )
            self.recovery.add(simulated[-1])
            outcome.recovery_entry = simulated[-1]

        logger.info(
            f"Simulation {trajectory.value} on {today}: deltas={outcome.deltas} "
            f"injuries={injury_tags} recoveries={recovery_tags}"
        )
        self.clock.advance_day()
        return outcome

    # ---------- Predictions ----------
    def _baseline_prediction(self, previous: TrainingLogEntry, today: str) -> TrainingLogEntry:
        """Mocked predicted row: the previous session with neutral jitter."""
        predicted = simulate_training_entry(previous, Trajectory.NEUTRAL, self.factor, False, self.rng)
        return replace(predicted, date=today)

    def _collect_predictions(
        self,
        previous: TrainingLogEntry,
        trajectory: Trajectory,
        injury_tags: List[str],
        recovery_tags: List[str],
        today: str,
    ) -> List[PredictionEntry]:
        if self.ai_client is not None:
            try:
                response = self.ai_client.get_daily_training_suggestion(
                    trajectory, injury_tags, recovery_tags, latest_training=previous,
                )
                return [map_suggestion_to_prediction(response, today)]
            except AIServiceError as e:
                logger.warning(f"AI backend failed, falling back to mocked predictions: {e}")

        return [self._mock_prediction(previous, paper_id, today) for paper_id in self.paper_ids]

    def _mock_prediction(self, previous: TrainingLogEntry, paper_id: str, today: str) -> PredictionEntry:
        """Every paper predicts "same session as last time"."""
        predictions = {}
        if previous.duration is not None:
            predictions["duration"] = ClaimPrediction(
                value=previous.duration,
                reference=MOCK_REFERENCE,
                reasoning="No AI backend configured; repeating the previous session.",
            )
        return PredictionEntry(date=today, paper_id=paper_id, predictions=predictions)

    # ---------- Housekeeping ----------
    def _seed_today(self) -> datetime:
        return seed_today(self.training.get_all(), self.recovery.get_all())

    def reset(self) -> None:
        """Restore every store's seed and the seed 'today'."""
        self.training.reset()
        self.recovery.reset()
        self.confidence.reset()
        self.predictions.reset()
        self.clock.set_date(self._seed_today())
        logger.info(f"Engine reset; today is {self.clock.now_iso_date()}")
