"""
Seed data for the in-memory stores.

Stores copy these lists on construction and on reset(); never mutate them.
"""

from coach_sim.models import (
    TrainingLogEntry,
    RecoveryEntry,
    ConfidenceScorePoint,
    ResearchPaper,
)


TRAINING_SEED = [
    TrainingLogEntry(
        date="2025-08-01",
        exercise="Long Run",
        duration=45 * 60,
        distance=8,
        pace=300,
        cadence=168,
        lactate_threshold_pace=270,
        aerobic_decoupling=9.8,
        one_min_hrr=26,
        efficiency_factor=0.65,
    ),
]


RECOVERY_SEED = [
    RecoveryEntry(date="2025-08-10", sleep_duration=8.1, rhr=58, hrv=65, fatigue=2,
                  source="Smartwatch Data", injury=["dislocate left shoulder"]),
    RecoveryEntry(date="2025-08-11", sleep_duration=7.8, rhr=59, hrv=62, fatigue=2,
                  source="Smartwatch Data",
                  injury=["dislocate left shoulder feel a bit better, but still hard to move"]),
    RecoveryEntry(date="2025-08-12", sleep_duration=8.3, rhr=57, hrv=68, fatigue=1,
                  source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-13", sleep_duration=7.5, rhr=62, hrv=45, fatigue=7,
                  soreness=["legs", "glutes"], source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-14", sleep_duration=7.0, rhr=65, hrv=38, fatigue=9,
                  soreness=["legs", "back"], source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-15", sleep_duration=8.5, rhr=63, hrv=48, fatigue=7,
                  soreness=["legs"], source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-16", sleep_duration=8.6, rhr=60, hrv=55, fatigue=5,
                  source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-17", sleep_duration=8.0, rhr=59, hrv=60, fatigue=3,
                  source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-18", sleep_duration=8.2, rhr=58, hrv=63, fatigue=2,
                  source="Smartwatch Data"),
    RecoveryEntry(date="2025-08-19", sleep_duration=7.9, rhr=57, hrv=66, fatigue=2,
                  source="Smartwatch Data"),
]


RESEARCH_PAPERS = [
    ResearchPaper(
        id="1",
        title="High-Intensity Interval Training and Cardiovascular Health",
        authors="Smith, J. et al.",
        journal="Journal of Sports Medicine",
        year=2023,
        abstract=("This study examines the effects of HIIT on cardiovascular health in adults "
                  "aged 25-45. Results show significant improvements in VO2 max and cardiac "
                  "output after 8 weeks of training."),
        goal="endurance",
    ),
    ResearchPaper(
        id="2",
        title="Optimal Rest Intervals for Strength Training",
        authors="Johnson, M. & Williams, K.",
        journal="Strength & Conditioning Research",
        year=2023,
        abstract=("Analysis of rest interval duration on strength gains. Findings suggest "
                  "2-3 minute rest periods optimize performance in compound movements."),
        goal="strength",
    ),
    ResearchPaper(
        id="3",
        title="Exercise Duration and Metabolic Response",
        authors="Davis, L. et al.",
        journal="Exercise Physiology Quarterly",
        year=2022,
        abstract=("Investigation into how exercise duration affects metabolic response and "
                  "fat oxidation rates in trained athletes."),
        goal="endurance",
    ),
    ResearchPaper(
        id="4",
        title="Injury Prevention Through Progressive Overload",
        authors="Brown, R. & Taylor, S.",
        journal="Sports Medicine International",
        year=2023,
        abstract=("Comprehensive review of progressive overload principles and their role in "
                  "injury prevention during resistance training."),
        goal="strength",
    ),
]


# Starting cumulative confidence per paper
CONFIDENCE_SEED = [
    ConfidenceScorePoint(date="2025-08-01", paper_id="1", score=0.85),
    ConfidenceScorePoint(date="2025-08-01", paper_id="2", score=0.78),
    ConfidenceScorePoint(date="2025-08-01", paper_id="3", score=0.82),
    ConfidenceScorePoint(date="2025-08-01", paper_id="4", score=0.79),
]


PREDICTION_SEED = []
