"""
Coach Sim API Router
====================

FastAPI router exposing the simulation engine to the browser UI.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from config import Settings
from coach_sim.ai_client import AIServiceClient
from coach_sim.clock import default_clock
from coach_sim.engine import SimulationEngine
from coach_sim.models import to_wire
from coach_sim.research import get_papers, get_paper
from coach_sim.scenarios import get_scenario, get_scenario_entries
from coach_sim.scoring import confidence_badges
from coach_sim.schemas import (
    SetClockBody,
    ClockResponseBody,
    RunSimulationBody,
    RunSimulationResponseBody,
    RecoveryPatchBody,
    ConfidenceResponseBody,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/simulation", tags=["simulation"])

_engine: Optional[SimulationEngine] = None


# ==============================================================================
# Helper Functions
# ==============================================================================

def build_default_engine() -> SimulationEngine:
    """Engine wired to the process-wide clock and the configured AI backend."""
    ai_client = None
    if Settings.USE_AI_BACKEND:
        ai_client = AIServiceClient(Settings.AI_SERVER_BASE_URL, timeout=Settings.ai_timeout())

    engine = SimulationEngine(
        clock=default_clock,
        ai_client=ai_client,
        weights=Settings.SCORING_WEIGHT_PRESET,
        factor=Settings.simulation_factor(),
        simple_mode=Settings.SIMULATION_SIMPLE_MODE,
    )
    engine.reset()
    return engine


def get_engine() -> SimulationEngine:
    global _engine
    if _engine is None:
        _engine = build_default_engine()
    return _engine


def _clock_body(engine: SimulationEngine) -> ClockResponseBody:
    return ClockResponseBody(today=engine.clock.now_iso_date(), now=engine.clock.now().isoformat())


# ==============================================================================
# Clock
# ==============================================================================

@router.get("/clock", response_model=ClockResponseBody)
async def get_clock(engine: SimulationEngine = Depends(get_engine)):
    return _clock_body(engine)


@router.post("/clock", response_model=ClockResponseBody)
async def set_clock(body: SetClockBody, engine: SimulationEngine = Depends(get_engine)):
    try:
        engine.clock.set_from_iso_date(body.date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date: {e}")
    return _clock_body(engine)


@router.post("/clock/advance", response_model=ClockResponseBody)
async def advance_clock(engine: SimulationEngine = Depends(get_engine)):
    engine.clock.advance_day()
    return _clock_body(engine)


@router.post("/clock/reset", response_model=ClockResponseBody)
async def reset_clock(engine: SimulationEngine = Depends(get_engine)):
    engine.clock.reset()
    return _clock_body(engine)


# ==============================================================================
# Stores
# ==============================================================================

@router.get("/training")
async def get_training(engine: SimulationEngine = Depends(get_engine)):
    return [to_wire(entry) for entry in engine.training.get_all()]


@router.get("/recovery")
async def get_recovery(engine: SimulationEngine = Depends(get_engine)):
    return [to_wire(entry) for entry in engine.recovery.get_all()]


@router.get("/recovery/{date}")
async def get_recovery_day(date: str, engine: SimulationEngine = Depends(get_engine)):
    entry = engine.recovery.get_by_date(date)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No recovery entry for {date}")
    return to_wire(entry)


@router.patch("/recovery/{date}")
async def patch_recovery_day(date: str, body: RecoveryPatchBody, engine: SimulationEngine = Depends(get_engine)):
    """Daily check-in: upsert the given fields for the date."""
    entry = engine.recovery.update_by_date(date, body.model_dump(exclude_none=True))
    return to_wire(entry)


@router.get("/confidence")
async def get_confidence(engine: SimulationEngine = Depends(get_engine)):
    return [to_wire(point) for point in engine.confidence.get_all()]


@router.get("/confidence/{paper_id}", response_model=ConfidenceResponseBody)
async def get_paper_confidence(paper_id: str, engine: SimulationEngine = Depends(get_engine)):
    latest = engine.confidence.get_latest_score_for_paper(paper_id)
    return ConfidenceResponseBody(
        paper_id=paper_id,
        latest=latest.score if latest else None,
        badges=confidence_badges(latest),
        history=[to_wire(point) for point in engine.confidence.get_scores_for_paper(paper_id)],
    )


@router.get("/papers")
async def list_papers(goal: Optional[str] = None):
    return [to_wire(paper) for paper in get_papers(goal)]


@router.get("/papers/{paper_id}")
async def get_research_paper(paper_id: str):
    paper = get_paper(paper_id)
    if paper is None:
        raise HTTPException(status_code=404, detail=f"Unknown paper: {paper_id}")
    return to_wire(paper)


@router.get("/scenarios/{scenario_id}")
async def get_recovery_scenario(scenario_id: str, engine: SimulationEngine = Depends(get_engine)):
    scenario = get_scenario(scenario_id)
    if scenario is None:
        raise HTTPException(status_code=404, detail=f"Unknown scenario: {scenario_id}")
    return {
        'id': scenario.id,
        'name': scenario.name,
        'description': scenario.description,
        'characteristics': scenario.characteristics,
        'entries': [to_wire(entry) for entry in get_scenario_entries(engine.recovery, scenario_id)],
    }


# ==============================================================================
# Simulation
# ==============================================================================

@router.post("/run", response_model=RunSimulationResponseBody)
def run_simulation(body: RunSimulationBody, engine: SimulationEngine = Depends(get_engine)):
    """
    Simulate one day, score every paper and advance the clock.
    Plain def: the AI backend call is blocking `requests`, so FastAPI runs
    this in its threadpool instead of on the event loop.
    """
    try:
        outcome = engine.run_simulation(body.trajectory, body.injuries, body.recoveries)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return RunSimulationResponseBody(
        date=outcome.date,
        training=to_wire(outcome.training_entry) if outcome.training_entry else None,
        recovery=to_wire(outcome.recovery_entry) if outcome.recovery_entry else None,
        deltas=outcome.deltas,
        confidence={paper_id: point.score for paper_id, point in outcome.confidence.items()},
        today=engine.clock.now_iso_date(),
    )


@router.get("/ai/health")
def ai_health(engine: SimulationEngine = Depends(get_engine)):
    """Reachability of the configured AI backend (None when running on mocks)."""
    if engine.ai_client is None:
        return {"configured": False, "reachable": None}
    return {"configured": True, "reachable": engine.ai_client.test_connection()}


@router.post("/reset", response_model=ClockResponseBody)
async def reset_all(engine: SimulationEngine = Depends(get_engine)):
    engine.reset()
    return _clock_body(engine)
