"""
Pydantic Schemas for Coach Sim
AI backend contract + request/response bodies of the simulation router
"""
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TrainingStatus(str, Enum):
    PERFORMANCE_INCREASED = "PERFORMANCE_INCREASED"
    PERFORMANCE_DECREASED = "PERFORMANCE_DECREASED"
    PERFORMANCE_NEUTRAL = "PERFORMANCE_NEUTRAL"


ClaimType = Literal["exercise", "intensity", "duration", "rest_time"]


# ============ AI Backend Request ============

class TrainingEntry(BaseModel):
    """What the athlete reported for today."""
    training_status: TrainingStatus
    injury_status: Optional[str] = None    # comma-joined injury tags
    recovery_status: Optional[str] = None  # comma-joined recovery tags


class DailyTrainingLogForAI(BaseModel):
    """Latest completed session, in the backend's camelCase field names."""
    model_config = ConfigDict(populate_by_name=True)

    date: str
    rest_time: Optional[float] = Field(default=None, alias="restTime")
    exercise: Optional[str] = None
    intensity: Optional[float] = None
    rep: Optional[int] = None
    set: Optional[int] = None
    duration: Optional[float] = None
    distance: Optional[float] = None
    pace: Optional[float] = None
    cadence: Optional[float] = None
    lactate_threshold_pace: Optional[float] = Field(default=None, alias="lactaseThresholdPace")
    aerobic_decoupling: Optional[float] = Field(default=None, alias="aerobicDecoupling")
    one_min_hrr: Optional[float] = Field(default=None, alias="oneMinHRR")
    efficiency_factor: Optional[float] = Field(default=None, alias="efficiencyFactor")


class DailyTrainingSuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str
    current_form: TrainingEntry = Field(..., alias="currentForm")
    latest_training: Optional[DailyTrainingLogForAI] = Field(default=None, alias="latestTraining")


# ============ AI Backend Response ============

class AIClaim(BaseModel):
    type: ClaimType
    modified_value: Union[float, str]
    reasoning: str
    reference: str


class DailySuggestions(BaseModel):
    date: str
    claims: List[AIClaim] = []


class AIPrediction(BaseModel):
    type: ClaimType
    prediction: Union[float, str]


class DailyPredictions(BaseModel):
    date: str
    predictions: List[AIPrediction] = []


class DailyTrainingSuggestionResponse(BaseModel):
    paper_id: int
    daily_suggestions: DailySuggestions
    daily_predictions: DailyPredictions


# ============ Router Bodies ============

class SetClockBody(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD or full ISO datetime")


class ClockResponseBody(BaseModel):
    today: str
    now: str


class RunSimulationBody(BaseModel):
    trajectory: str = Field(..., description="IMPROVED | NEUTRAL | DECLINED or a UI id")
    injuries: List[str] = []
    recoveries: List[str] = []


class RunSimulationResponseBody(BaseModel):
    date: str
    training: Optional[dict] = None
    recovery: Optional[dict] = None
    deltas: Dict[str, float] = {}
    confidence: Dict[str, float] = {}
    today: str


class RecoveryPatchBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sleep_duration: Optional[float] = Field(default=None, alias="sleepDuration")
    rhr: Optional[int] = Field(default=None, alias="RHR")
    hrv: Optional[int] = Field(default=None, alias="HRV")
    soreness: Optional[List[str]] = None
    fatigue: Optional[int] = Field(default=None, ge=1, le=10)
    source: Optional[str] = None
    injury: Optional[List[str]] = None


class ConfidenceResponseBody(BaseModel):
    paper_id: str
    latest: Optional[float] = None
    badges: List[str] = []
    history: List[dict] = []
