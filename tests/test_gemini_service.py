import asyncio
import json
from types import SimpleNamespace

import pytest
from google.api_core.exceptions import DeadlineExceeded, InternalServerError, PermissionDenied, ResourceExhausted

from idea_validator.core.exceptions import AnalysisFailed
from idea_validator.services.gemini_service import GeminiService

SCHEMA = {"type": "object", "properties": {"score": {"type": "number"}}, "required": ["score"]}


class FakeModel:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def generate_content(self, prompt, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def make_response(text=None, candidates=True, block_reason=None):
    feedback = SimpleNamespace(block_reason=SimpleNamespace(name=block_reason) if block_reason else None)
    return SimpleNamespace(
        candidates=[object()] if candidates else [],
        prompt_feedback=feedback,
        text=text,
    )


@pytest.fixture
def service():
    service = GeminiService(api_key="test-key", model_name="gemini-test")
    return service


def run(service, model):
    service.model = model
    return asyncio.run(service.generate_structured("Analyze this idea", SCHEMA))


def test_returns_decoded_object_and_sends_schema(service):
    model = FakeModel(make_response(json.dumps({"score": 7})))

    assert run(service, model) == {"score": 7}

    config = model.kwargs["generation_config"]
    assert config["response_mime_type"] == "application/json"
    assert config["response_schema"] == SCHEMA
    assert "timeout" in model.kwargs["request_options"]


def test_unconfigured_service_fails_without_calling_model(service):
    with pytest.raises(AnalysisFailed, match="not properly configured"):
        run(service, None)


@pytest.mark.parametrize(
    "error",
    [
        ResourceExhausted("quota"),
        PermissionDenied("bad key"),
        DeadlineExceeded("slow"),
        InternalServerError("boom"),
        RuntimeError("socket closed"),
    ],
)
def test_provider_errors_become_analysis_failed(service, error):
    with pytest.raises(AnalysisFailed) as exc_info:
        run(service, FakeModel(error=error))
    assert exc_info.value.__cause__ is error


def test_blocked_content_is_analysis_failed(service):
    with pytest.raises(AnalysisFailed, match="SAFETY"):
        run(service, FakeModel(make_response(candidates=False, block_reason="SAFETY")))


@pytest.mark.parametrize("text", ["", "   ", "not json", "[1, 2]"])
def test_empty_or_unparseable_output_is_analysis_failed(service, text):
    with pytest.raises(AnalysisFailed):
        run(service, FakeModel(make_response(text)))
