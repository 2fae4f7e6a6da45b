"""
Performance Simulation Tests
============================

Direction of every metric per trajectory, neutral band, and history
handling.
"""

import random
from datetime import datetime

import pytest

from coach_sim.clock import SimulationClock
from coach_sim.models import TrainingLogEntry
from coach_sim.performance_simulation import (
    Trajectory,
    parse_trajectory,
    simulate_training_entry,
    run_training_simulation,
)


def make_entry(date="2025-08-01", **overrides):
    values = dict(
        date=date,
        exercise="Long Run",
        duration=2700,
        distance=8,
        pace=300,
        cadence=168,
        lactate_threshold_pace=270,
        aerobic_decoupling=9.8,
        one_min_hrr=26,
        efficiency_factor=0.65,
    )
    values.update(overrides)
    return TrainingLogEntry(**values)


# ==============================================================================
# Trajectory parsing
# ==============================================================================

class TestParseTrajectory:

    def test_1_accepts_names_and_ui_ids(self):
        assert parse_trajectory("IMPROVED") == Trajectory.IMPROVED
        assert parse_trajectory("declined") == Trajectory.DECLINED
        assert parse_trajectory("performance-neutral") == Trajectory.NEUTRAL
        assert parse_trajectory("PERFORMANCE_INCREASED") == Trajectory.IMPROVED
        assert parse_trajectory(Trajectory.DECLINED) == Trajectory.DECLINED

    def test_2_unknown_rejected(self):
        with pytest.raises(ValueError):
            parse_trajectory("sideways")


# ==============================================================================
# Proportional mode
# ==============================================================================

class TestProportionalMode:

    @pytest.mark.parametrize("seed", [1, 7, 42, 2025])
    def test_1_improved_direction(self, seed):
        base = make_entry()
        sim = simulate_training_entry(base, Trajectory.IMPROVED, rng=random.Random(seed))

        assert sim.duration > base.duration
        assert sim.distance > base.distance
        assert sim.pace < base.pace
        assert sim.lactate_threshold_pace < base.lactate_threshold_pace
        assert sim.cadence > base.cadence
        assert sim.aerobic_decoupling < base.aerobic_decoupling
        assert sim.one_min_hrr > base.one_min_hrr
        assert sim.efficiency_factor > base.efficiency_factor

    @pytest.mark.parametrize("seed", [1, 7, 42, 2025])
    def test_2_declined_direction(self, seed):
        base = make_entry()
        sim = simulate_training_entry(base, Trajectory.DECLINED, rng=random.Random(seed))

        assert sim.duration < base.duration
        assert sim.distance < base.distance
        assert sim.pace > base.pace
        assert sim.lactate_threshold_pace > base.lactate_threshold_pace
        assert sim.cadence < base.cadence
        assert sim.aerobic_decoupling > base.aerobic_decoupling
        assert sim.one_min_hrr < base.one_min_hrr
        assert sim.efficiency_factor < base.efficiency_factor

    def test_3_magnitude_within_range(self):
        base = make_entry()
        for seed in range(50):
            sim = simulate_training_entry(base, Trajectory.IMPROVED, factor=0.05, rng=random.Random(seed))
            # 10-25% magnitude, +/- 2.5% jitter, integer rounding
            assert 2700 * 1.10 * 0.975 - 1 <= sim.duration <= 2700 * 1.25 * 1.025 + 1

    def test_4_non_metric_fields_untouched(self):
        base = make_entry(intensity=7, rep=3)
        sim = simulate_training_entry(base, Trajectory.IMPROVED, rng=random.Random(3))
        assert sim.date == base.date
        assert sim.exercise == "Long Run"
        assert sim.intensity == 7
        assert sim.rep == 3


# ==============================================================================
# Simple mode
# ==============================================================================

class TestSimpleMode:

    def test_1_improved_uses_factor_as_magnitude(self):
        sim = simulate_training_entry(make_entry(), Trajectory.IMPROVED, factor=0.1, simple_mode=True,
                                      rng=random.Random(0))
        assert sim.duration == 2970
        assert sim.distance == pytest.approx(8.8)
        assert sim.pace == 273
        assert sim.lactate_threshold_pace == 245
        assert sim.cadence == 176
        assert sim.aerobic_decoupling == pytest.approx(7.8)
        assert sim.one_min_hrr == 30

    def test_2_declined_mirror(self):
        sim = simulate_training_entry(make_entry(), Trajectory.DECLINED, factor=0.1, simple_mode=True,
                                      rng=random.Random(0))
        assert sim.duration == 2430
        assert sim.pace == 333
        assert sim.cadence == 160
        assert sim.aerobic_decoupling == pytest.approx(12.7)
        assert sim.one_min_hrr == 22

    def test_3_deterministic_regardless_of_seed(self):
        a = simulate_training_entry(make_entry(), "IMPROVED", factor=0.1, simple_mode=True, rng=random.Random(1))
        b = simulate_training_entry(make_entry(), "IMPROVED", factor=0.1, simple_mode=True, rng=random.Random(99))
        assert a == b


# ==============================================================================
# Neutral
# ==============================================================================

class TestNeutral:

    def test_1_small_fluctuation(self):
        base = make_entry()
        for seed in range(30):
            sim = simulate_training_entry(base, Trajectory.NEUTRAL, factor=0.05, rng=random.Random(seed))
            assert abs(sim.duration - 2700) <= 2700 * 0.025 + 1
            assert abs(sim.pace - 300) <= 300 * 0.025 + 1
            assert abs(sim.distance - 8) <= 8 * 0.025 + 0.01

    def test_2_missing_metrics_stay_missing(self):
        base = TrainingLogEntry(date="2025-08-01", pace=300)
        sim = simulate_training_entry(base, Trajectory.NEUTRAL, rng=random.Random(5))
        assert sim.duration is None
        assert sim.efficiency_factor is None
        assert sim.pace is not None


# ==============================================================================
# History
# ==============================================================================

class TestRunTrainingSimulation:

    def test_1_empty_history_unchanged(self):
        assert run_training_simulation([], Trajectory.IMPROVED) == []

    def test_2_appends_row_stamped_with_clock(self):
        clock = SimulationClock(datetime(2025, 8, 22))
        history = [make_entry("2025-08-01")]
        result = run_training_simulation(history, Trajectory.IMPROVED, clock=clock, rng=random.Random(1))

        assert len(result) == 2
        assert result[0] == history[0]
        assert result[-1].date == "2025-08-22"
        assert len(history) == 1

    def test_3_simulates_from_latest_by_date(self):
        clock = SimulationClock(datetime(2025, 8, 22))
        history = [
            make_entry("2025-08-05", pace=250),
            make_entry("2025-08-01", pace=400),
        ]
        result = run_training_simulation(history, Trajectory.NEUTRAL, factor=0.02, clock=clock,
                                         rng=random.Random(1))

        assert [e.date for e in result] == ["2025-08-01", "2025-08-05", "2025-08-22"]
        assert abs(result[-1].pace - 250) <= 5


# ==============================================================================
# Factor bounds
# ==============================================================================

class TestFactorBounds:

    @pytest.mark.parametrize("factor", [0.9, 1.0, 1.5, 5.0])
    def test_1_declined_simple_mode_stays_positive(self, factor):
        clock = SimulationClock(datetime(2025, 8, 2))
        history = [TrainingLogEntry(date="2025-08-01", pace=300, duration=2700)]

        result = run_training_simulation(history, "DECLINED", factor, True, clock=clock, rng=random.Random(1))

        sim = result[-1]
        assert sim.duration == 270
        assert sim.pace == 3000

    @pytest.mark.parametrize("seed", range(10))
    def test_2_large_factor_every_mode(self, seed):
        base = make_entry()
        for trajectory in Trajectory:
            for simple_mode in (True, False):
                sim = simulate_training_entry(base, trajectory, factor=10.0, simple_mode=simple_mode,
                                              rng=random.Random(seed))
                for name, value in sim.metrics().items():
                    assert value > 0, (trajectory, simple_mode, name)

    def test_3_negative_factor_is_no_change(self):
        sim = simulate_training_entry(make_entry(), "DECLINED", factor=-0.5, simple_mode=True,
                                      rng=random.Random(1))
        assert sim.duration == 2700
        assert sim.pace == 300
