"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Advisory Collaborator
════════════════════════════════════════════════════════════════════════════════════════════════════

Payload builder and the OpenAI-backed client (with a stubbed SDK object).
"""

import json
from types import SimpleNamespace

import pytest

from pecos.advisory import (
    FALLBACK_ANALYSIS,
    OpenAIAdvisoryClient,
    build_advisory_payload,
)
from pecos.errors import AdvisoryConfigurationError
from pecos.feature_flags import FeatureFlags


TREE = {
    "id": "root",
    "name": "Project Decision",
    "type": "decision",
    "children": [
        {"id": "inhouse", "name": "InHouse", "type": "chance", "children": [
            {"id": "s1", "name": "Success", "type": "outcome", "probability": 0.7, "cost": 200000, "value": 500000},
            {"id": "f1", "name": "Failure", "type": "outcome", "probability": 0.3, "cost": 200000, "value": 100000},
        ]},
        {"id": "direct", "name": "Buy Licence", "type": "outcome", "probability": 1.0, "cost": 50000, "value": 120000},
    ],
}


class FakeCompletions:
    """Records the request and replies with a canned message (or raises)."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_sdk(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture(autouse=True)
def fresh_flags():
    FeatureFlags.reset()
    yield
    FeatureFlags.reset()


class TestPayload:
    def test_one_entry_per_option(self):
        payload = build_advisory_payload(TREE)
        assert payload["decision"] == "Project Decision"
        assert [o["name"] for o in payload["options"]] == ["InHouse", "Buy Licence"]

    def test_profiled_option(self):
        inhouse = build_advisory_payload(TREE)["options"][0]
        assert inhouse["expectedValue"] == pytest.approx(180000)
        assert inhouse["successRate"] == pytest.approx(70.0)
        assert inhouse["roi"] == pytest.approx(90.0)
        assert inhouse["riskLevel"] == "Medium"
        assert [o["name"] for o in inhouse["outcomes"]] == ["Success", "Failure"]
        assert inhouse["outcomes"][1]["netValue"] == -100000

    def test_unprofiled_option(self):
        licence = build_advisory_payload(TREE)["options"][1]
        assert licence["expectedValue"] == 70000
        assert licence["successRate"] is None
        assert licence["riskLevel"] == "Unknown"
        assert licence["outcomes"] == [
            {"name": "Buy Licence", "probability": 1.0, "cost": 50000, "value": 120000, "netValue": 70000}
        ]

    def test_payload_is_json_serialisable(self):
        json.dumps(build_advisory_payload(TREE))


class TestOpenAIAdvisoryClient:
    """Client behaviour around the Chat Completions call."""

    def test_parses_structured_reply(self):
        reply = {
            "best_solution": "InHouse",
            "justification_key_points": "Highest EV: 180000 vs 70000.",
            "justification_long": "InHouse leads on expected value.",
        }
        completions = FakeCompletions(content=json.dumps(reply))
        client = OpenAIAdvisoryClient(client=fake_sdk(completions))

        assert client.generate_decision_analysis(build_advisory_payload(TREE)) == reply
        request = completions.calls[0]
        assert request["model"] == "gpt-4o-mini"
        assert request["response_format"] == {"type": "json_object"}
        assert json.loads(request["messages"][1]["content"])["decision"] == "Project Decision"

    def test_missing_fields_become_empty(self):
        client = OpenAIAdvisoryClient(client=fake_sdk(FakeCompletions(content='{"best_solution": "X"}')))
        result = client.generate_decision_analysis({})
        assert result == {"best_solution": "X", "justification_key_points": "", "justification_long": ""}

    def test_unparseable_reply_falls_back(self):
        client = OpenAIAdvisoryClient(client=fake_sdk(FakeCompletions(content="not json")))
        assert client.generate_decision_analysis({}) == FALLBACK_ANALYSIS

    def test_non_object_reply_falls_back(self):
        client = OpenAIAdvisoryClient(client=fake_sdk(FakeCompletions(content="[1, 2]")))
        assert client.generate_decision_analysis({}) == FALLBACK_ANALYSIS

    def test_provider_error_falls_back(self):
        completions = FakeCompletions(error=RuntimeError("rate limited"))
        client = OpenAIAdvisoryClient(client=fake_sdk(completions))
        assert client.generate_decision_analysis({}) == FALLBACK_ANALYSIS

    def test_model_from_flags(self):
        FeatureFlags.set_flag("advisory_model", "gpt-4o")
        completions = FakeCompletions(content="{}")
        OpenAIAdvisoryClient(client=fake_sdk(completions)).generate_decision_analysis({})
        assert completions.calls[0]["model"] == "gpt-4o"

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(AdvisoryConfigurationError):
            OpenAIAdvisoryClient()

    def test_explicit_api_key_builds_sdk_client(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = OpenAIAdvisoryClient(api_key="sk-test", model="gpt-4o-mini")
        assert client.model == "gpt-4o-mini"
        assert client.client is not None
