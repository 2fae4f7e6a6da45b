import os
import logging
from dotenv import load_dotenv

# Load .env
load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Application settings and environment variables.
    """
    # External AI backend
    AI_SERVER_BASE_URL = os.getenv("AI_SERVER_BASE_URL", "http://localhost:8000")
    AI_REQUEST_TIMEOUT = os.getenv("AI_REQUEST_TIMEOUT", "10")
    USE_AI_BACKEND = _env_bool("USE_AI_BACKEND")

    # Simulation defaults
    SIMULATION_FACTOR = os.getenv("SIMULATION_FACTOR", "0.05")
    SIMULATION_SIMPLE_MODE = _env_bool("SIMULATION_SIMPLE_MODE")
    SCORING_WEIGHT_PRESET = os.getenv("SCORING_WEIGHT_PRESET", "balanced")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def ai_timeout(cls) -> float:
        return float(cls.AI_REQUEST_TIMEOUT)

    @classmethod
    def simulation_factor(cls) -> float:
        return float(cls.SIMULATION_FACTOR)

    @classmethod
    def validate(cls):
        """
        Checks that numeric settings parse and fall in range.
        """
        problems = []
        try:
            if cls.ai_timeout() <= 0:
                problems.append("AI_REQUEST_TIMEOUT must be > 0")
        except ValueError:
            problems.append(f"AI_REQUEST_TIMEOUT is not a number: {cls.AI_REQUEST_TIMEOUT}")
        try:
            if not 0 < cls.simulation_factor() < 1:
                problems.append("SIMULATION_FACTOR must be between 0 and 1")
        except ValueError:
            problems.append(f"SIMULATION_FACTOR is not a number: {cls.SIMULATION_FACTOR}")
        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            problems.append(f"LOG_LEVEL is invalid: {cls.LOG_LEVEL}")

        if problems:
            raise ValueError(f"Invalid settings: {'; '.join(problems)}")


# Validate settings (runs on import)
try:
    Settings.validate()
except ValueError as e:
    logger.warning(f"WARNING: {e}")
