"""
Coach Sim - Training/Recovery Simulation & Research Confidence Engine
=====================================================================

In-memory engine behind the coaching demo UI:
- Simulation clock ("today") with subscribers
- Date-ordered stores for training, recovery, confidence and predictions
- Training and recovery simulators driven by UI-selected trajectories/tags
- Training-log scorer whose results accumulate into per-paper confidence

Key Design Principles:
1. Single process, single user, synchronous - no persistence
2. Degenerate input gives a neutral result, numeric drift is clamped
3. Clock, stores and random source are injected (fresh engine per test)
4. The AI backend is a pluggable HTTP collaborator
"""

from coach_sim.clock import SimulationClock
from coach_sim.stores import TrainingStore, RecoveryStore, ConfidenceStore, PredictionStore
from coach_sim.performance_simulation import Trajectory, run_training_simulation
from coach_sim.recovery_simulation import run_recovery_simulation
from coach_sim.scoring import score_training_logs, WEIGHT_PRESETS
from coach_sim.ai_client import AIServiceClient, MockAIClient
from coach_sim.engine import SimulationEngine

__all__ = [
    'SimulationClock',
    'TrainingStore',
    'RecoveryStore',
    'ConfidenceStore',
    'PredictionStore',
    'Trajectory',
    'run_training_simulation',
    'run_recovery_simulation',
    'score_training_logs',
    'WEIGHT_PRESETS',
    'AIServiceClient',
    'MockAIClient',
    'SimulationEngine',
]
