"""
AI Backend Client Tests
=======================

The HTTP session is mocked; no server is contacted.
"""

from unittest.mock import Mock

import pytest
import requests

from coach_sim.ai_client import (
    AIServiceClient,
    AIServiceResponseError,
    AIServiceUnavailableError,
    MockAIClient,
    apply_prediction,
    build_training_entry,
    map_suggestion_to_prediction,
    to_training_status,
)
from coach_sim.models import TrainingLogEntry
from coach_sim.schemas import DailyTrainingSuggestionResponse, TrainingStatus


LATEST = TrainingLogEntry(
    date="2025-08-19",
    exercise="Long Run",
    duration=2700,
    pace=300,
    lactate_threshold_pace=270,
    one_min_hrr=26,
)

RESPONSE_BODY = {
    'paper_id': 3,
    'daily_suggestions': {
        'date': "2025-08-20",
        'claims': [
            {'type': 'exercise', 'modified_value': "Tempo Run", 'reasoning': "r1", 'reference': "Davis (2022)"},
            {'type': 'duration', 'modified_value': "3000", 'reasoning': "r2", 'reference': "Davis (2022)"},
            {'type': 'intensity', 'modified_value': "hard", 'reasoning': "r3", 'reference': "Davis (2022)"},
            {'type': 'rest_time', 'modified_value': 90, 'reasoning': "r4", 'reference': "Davis (2022)"},
        ],
    },
    'daily_predictions': {
        'date': "2025-08-20",
        'predictions': [{'type': 'duration', 'prediction': 3000}],
    },
}


def make_session(status_code=200, body=None):
    session = Mock()
    session.headers = {}
    response = Mock(ok=200 <= status_code < 300, status_code=status_code)
    response.json = Mock(return_value=body if body is not None else RESPONSE_BODY)
    session.post.return_value = response
    return session


# ==============================================================================
# Request building
# ==============================================================================

class TestRequestBuilding:

    def test_1_training_status_mapping(self):
        assert to_training_status("IMPROVED") == TrainingStatus.PERFORMANCE_INCREASED
        assert to_training_status("performance-down") == TrainingStatus.PERFORMANCE_DECREASED
        assert to_training_status("garbage") == TrainingStatus.PERFORMANCE_NEUTRAL

    def test_2_tags_joined(self):
        entry = build_training_entry("NEUTRAL", ["knee-hurt", "break-ankle"], [])
        assert entry.injury_status == "knee-hurt, break-ankle"
        assert entry.recovery_status is None

    def test_3_post_body_uses_wire_names(self):
        session = make_session()
        client = AIServiceClient("http://ai.local/", timeout=3, session=session)

        client.get_daily_training_suggestion("IMPROVED", ["knee-hurt"], ["sleep-under-6"], latest_training=LATEST)

        args, kwargs = session.post.call_args
        assert args[0] == "http://ai.local/daily-training-suggestion"
        assert kwargs['timeout'] == 3
        body = kwargs['json']
        assert body['user_id'] == "user-001"
        assert body['currentForm']['training_status'] == "PERFORMANCE_INCREASED"
        assert body['currentForm']['injury_status'] == "knee-hurt"
        assert body['latestTraining']['lactaseThresholdPace'] == 270
        assert body['latestTraining']['oneMinHRR'] == 26
        assert 'distance' not in body['latestTraining']
        assert session.headers['Content-Type'] == "application/json"


# ==============================================================================
# Error handling
# ==============================================================================

class TestErrors:

    def test_1_connection_error_is_unavailable(self):
        session = make_session()
        session.post.side_effect = requests.ConnectionError("refused")
        client = AIServiceClient(session=session)

        with pytest.raises(AIServiceUnavailableError) as exc:
            client.get_daily_training_suggestion("NEUTRAL", [], [])
        assert "Unable to connect to AI server" in str(exc.value)

    def test_2_timeout_is_unavailable(self):
        session = make_session()
        session.post.side_effect = requests.Timeout("slow")
        client = AIServiceClient(session=session)

        with pytest.raises(AIServiceUnavailableError):
            client.get_daily_training_suggestion("NEUTRAL", [], [])

    def test_3_non_2xx_carries_status(self):
        client = AIServiceClient(session=make_session(status_code=503))

        with pytest.raises(AIServiceResponseError) as exc:
            client.get_daily_training_suggestion("NEUTRAL", [], [])
        assert exc.value.status_code == 503
        assert "503" in str(exc.value)

    def test_4_invalid_body(self):
        client = AIServiceClient(session=make_session(body={'unexpected': True}))

        with pytest.raises(AIServiceResponseError):
            client.get_daily_training_suggestion("NEUTRAL", [], [])

    def test_5_non_json_body(self):
        session = make_session()
        session.post.return_value.json.side_effect = ValueError("not json")
        client = AIServiceClient(session=session)

        with pytest.raises(AIServiceResponseError):
            client.get_daily_training_suggestion("NEUTRAL", [], [])

    def test_6_test_connection(self):
        session = make_session()
        session.get.return_value = Mock(ok=True)
        assert AIServiceClient(session=session).test_connection() is True

        session.get.side_effect = requests.ConnectionError("refused")
        assert AIServiceClient(session=session).test_connection() is False


# ==============================================================================
# Response mapping
# ==============================================================================

class TestResponseMapping:

    def test_1_claims_to_prediction(self):
        response = DailyTrainingSuggestionResponse.model_validate(RESPONSE_BODY)
        prediction = map_suggestion_to_prediction(response, "2025-08-20")

        assert prediction.paper_id == "3"
        assert prediction.date == "2025-08-20"
        assert prediction.predictions['exercise'].value == "Tempo Run"
        assert prediction.predictions['duration'].value == 3000.0
        assert prediction.predictions['rest_time'].value == 90.0
        assert prediction.predictions['duration'].reference == "Davis (2022)"
        # Non-numeric intensity is dropped
        assert 'intensity' not in prediction.predictions

    def test_2_apply_prediction_overrides_fields(self):
        response = DailyTrainingSuggestionResponse.model_validate(RESPONSE_BODY)
        prediction = map_suggestion_to_prediction(response, "2025-08-20")

        predicted = apply_prediction(LATEST, prediction)

        assert predicted.date == "2025-08-20"
        assert predicted.duration == 3000.0
        assert predicted.exercise == "Tempo Run"
        assert predicted.pace == 300
        assert LATEST.duration == 2700


class TestMockAIClient:

    def test_mock_response_is_well_formed(self):
        client = MockAIClient(paper_id=2, duration_change=1.1)
        response = client.get_daily_training_suggestion("IMPROVED", [], [], latest_training=LATEST)

        prediction = map_suggestion_to_prediction(response, "2025-08-20")
        assert prediction.paper_id == "2"
        assert prediction.predictions['duration'].value == 2970.0
        assert len(client.calls) == 1
        assert client.calls[0].current_form.training_status == TrainingStatus.PERFORMANCE_INCREASED
        assert client.test_connection() is True
