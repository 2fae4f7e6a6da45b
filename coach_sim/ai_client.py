"""
Coach Sim AI Backend Client
===========================

HTTP JSON client for the external AI backend that turns a training /
recovery snapshot into per-paper suggestion claims and predictions.

Provider-agnostic: the engine only needs something satisfying AIClient.
MockAIClient returns a fixed, well-formed response for tests and offline
runs.

Failures are raised, never swallowed:
- AIServiceUnavailableError: server unreachable (connection error, timeout)
- AIServiceResponseError: server answered with non-2xx or an invalid body
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Protocol

import requests
from pydantic import ValidationError

from coach_sim.models import TrainingLogEntry, PredictionEntry, ClaimPrediction
from coach_sim.performance_simulation import Trajectory, parse_trajectory
from coach_sim.schemas import (
    TrainingStatus,
    TrainingEntry,
    DailyTrainingLogForAI,
    DailyTrainingSuggestionRequest,
    DailyTrainingSuggestionResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_ID = "user-001"

_STATUS_BY_TRAJECTORY = {
    Trajectory.IMPROVED: TrainingStatus.PERFORMANCE_INCREASED,
    Trajectory.DECLINED: TrainingStatus.PERFORMANCE_DECREASED,
    Trajectory.NEUTRAL: TrainingStatus.PERFORMANCE_NEUTRAL,
}

# Claim type -> TrainingLogEntry field
_CLAIM_FIELDS = {
    'exercise': 'exercise',
    'intensity': 'intensity',
    'duration': 'duration',
    'rest_time': 'rest_time',
}


class AIServiceError(Exception):
    """Base error for AI backend failures."""


class AIServiceUnavailableError(AIServiceError):
    """The AI backend could not be reached."""


class AIServiceResponseError(AIServiceError):
    """The AI backend answered, but not with a usable 2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AIClient(Protocol):
    """
    Protocol for AI backends.
    All implementations must provide both methods.
    """

    def get_daily_training_suggestion(
        self,
        training_status,
        injuries: Iterable[str],
        recoveries: Iterable[str],
        latest_training: Optional[TrainingLogEntry] = None,
        user_id: str = DEFAULT_USER_ID,
    ) -> DailyTrainingSuggestionResponse:
        ...

    def test_connection(self) -> bool:
        ...


# ==============================================================================
# Request building
# ==============================================================================

def to_training_status(value) -> TrainingStatus:
    """Trajectory / UI id -> backend status. Unknown values map to NEUTRAL."""
    if isinstance(value, TrainingStatus):
        return value
    try:
        return _STATUS_BY_TRAJECTORY[parse_trajectory(value)]
    except ValueError:
        return TrainingStatus.PERFORMANCE_NEUTRAL


def build_training_entry(training_status, injuries: Iterable[str], recoveries: Iterable[str]) -> TrainingEntry:
    injuries = list(injuries)
    recoveries = list(recoveries)
    return TrainingEntry(
        training_status=to_training_status(training_status),
        injury_status=", ".join(injuries) if injuries else None,
        recovery_status=", ".join(recoveries) if recoveries else None,
    )


def to_ai_format(entry: TrainingLogEntry) -> DailyTrainingLogForAI:
    return DailyTrainingLogForAI(
        date=entry.date,
        rest_time=entry.rest_time,
        exercise=entry.exercise,
        intensity=entry.intensity,
        rep=entry.rep,
        set=entry.set,
        duration=entry.duration,
        distance=entry.distance,
        pace=entry.pace,
        cadence=entry.cadence,
        lactate_threshold_pace=entry.lactate_threshold_pace,
        aerobic_decoupling=entry.aerobic_decoupling,
        one_min_hrr=entry.one_min_hrr,
        efficiency_factor=entry.efficiency_factor,
    )


def build_request(
    training_status,
    injuries: Iterable[str],
    recoveries: Iterable[str],
    latest_training: Optional[TrainingLogEntry] = None,
    user_id: str = DEFAULT_USER_ID,
) -> DailyTrainingSuggestionRequest:
    return DailyTrainingSuggestionRequest(
        user_id=user_id,
        current_form=build_training_entry(training_status, injuries, recoveries),
        latest_training=to_ai_format(latest_training) if latest_training else None,
    )


# ==============================================================================
# Response mapping
# ==============================================================================

def map_suggestion_to_prediction(response: DailyTrainingSuggestionResponse, date: str) -> PredictionEntry:
    """
    Turn the backend's claims into a PredictionEntry. Later claims of the
    same type overwrite earlier ones.
    """
    predictions = {}
    for claim in response.daily_suggestions.claims:
        field_name = _CLAIM_FIELDS[claim.type]
        if field_name == 'exercise':
            value = str(claim.modified_value)
        else:
            try:
                value = float(claim.modified_value)
            except (TypeError, ValueError):
                logger.warning(f"Non-numeric {claim.type} claim ignored: {claim.modified_value!r}")
                continue
        predictions[field_name] = ClaimPrediction(
            value=value,
            reference=claim.reference,
            reasoning=claim.reasoning,
        )

    return PredictionEntry(date=date, paper_id=str(response.paper_id), predictions=predictions)


def apply_prediction(entry: TrainingLogEntry, prediction: PredictionEntry) -> TrainingLogEntry:
    """Predicted training log: `entry` with every predicted field overridden."""
    updates = {name: claim.value for name, claim in prediction.predictions.items()}
    return replace(entry, date=prediction.date, **updates)


# ==============================================================================
# Clients
# ==============================================================================

class AIServiceClient:
    """requests-based client for the AI backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    def get_daily_training_suggestion(
        self,
        training_status,
        injuries: Iterable[str],
        recoveries: Iterable[str],
        latest_training: Optional[TrainingLogEntry] = None,
        user_id: str = DEFAULT_USER_ID,
    ) -> DailyTrainingSuggestionResponse:
        """POST /daily-training-suggestion and validate the response."""
        body = build_request(training_status, injuries, recoveries, latest_training, user_id)
        url = f"{self.base_url}/daily-training-suggestion"

        try:
            response = self.session.post(
                url,
                json=body.model_dump(by_alias=True, exclude_none=True, mode="json"),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"AI server unreachable at {self.base_url}: {e}")
            raise AIServiceUnavailableError(
                f"Unable to connect to AI server. Please ensure the server is running on {self.base_url}."
            ) from e

        if not response.ok:
            logger.error(f"AI server responded with status {response.status_code}")
            raise AIServiceResponseError(
                f"Failed to get AI suggestions: AI server responded with status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return DailyTrainingSuggestionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"AI server returned an invalid body: {e}")
            raise AIServiceResponseError(
                f"Failed to get AI suggestions: invalid response body ({e})",
                status_code=response.status_code,
            ) from e

    def test_connection(self) -> bool:
        """GET /health; False on any failure."""
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
            return response.ok
        except requests.RequestException as e:
            logger.warning(f"AI server connection test failed: {e}")
            return False


class MockAIClient:
    """Mock AI backend for testing: one duration/intensity claim per paper."""

    def __init__(self, paper_id: int = 1, duration_change: float = 1.0, intensity: float = 6):
        self.paper_id = paper_id
        self.duration_change = duration_change
        self.intensity = intensity
        self.calls: List[DailyTrainingSuggestionRequest] = []

    def get_daily_training_suggestion(
        self,
        training_status,
        injuries: Iterable[str],
        recoveries: Iterable[str],
        latest_training: Optional[TrainingLogEntry] = None,
        user_id: str = DEFAULT_USER_ID,
    ) -> DailyTrainingSuggestionResponse:
        request = build_request(training_status, injuries, recoveries, latest_training, user_id)
        self.calls.append(request)

        date = latest_training.date if latest_training else "1970-01-01"
        claims = [
            {
                'type': 'intensity',
                'modified_value': self.intensity,
                'reasoning': "Moderate intensity keeps load sustainable.",
                'reference': "Mock et al. (2024)",
            }
        ]
        if latest_training and latest_training.duration:
            claims.append({
                'type': 'duration',
                'modified_value': round(latest_training.duration * self.duration_change),
                'reasoning': "Hold volume steady until recovery markers improve.",
                'reference': "Mock et al. (2024)",
            })

        return DailyTrainingSuggestionResponse.model_validate({
            'paper_id': self.paper_id,
            'daily_suggestions': {'date': date, 'claims': claims},
            'daily_predictions': {
                'date': date,
                'predictions': [{'type': c['type'], 'prediction': c['modified_value']} for c in claims],
            },
        })

    def test_connection(self) -> bool:
        return True
