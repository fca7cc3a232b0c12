"""
Shared fixtures for the cross-cutting tests (orchestration, validation, flags).
"""
import pytest

from pecos.feature_flags import FeatureFlags


@pytest.fixture(autouse=True)
def fresh_flags():
    """Every test starts from the environment defaults."""
    FeatureFlags.reset()
    yield
    FeatureFlags.reset()


@pytest.fixture
def sample_project():
    """Project record as the persistence layer supplies it."""
    return {
        "name": "Sample E-commerce Platform",
        "description": "Storefront with payment integration",
        "teamSize": 5,
        "estimatedLinesOfCode": 10000,
        "timeframeMonths": 12,
        "hourlyRate": 85,
        "riskFactors": {"technical": 0.3, "market": 0.4, "organizational": 0.2},
    }


@pytest.fixture
def expert_estimates():
    return [
        {"expertId": "alice", "optimistic": 80, "mostLikely": 100, "pessimistic": 140, "confidence": 0.9},
        {"expertId": "bob", "optimistic": 90, "mostLikely": 110, "pessimistic": 150, "confidence": 0.6},
        {"expertId": "carol", "optimistic": 70, "mostLikely": 95, "pessimistic": 130, "confidence": 0.8},
    ]


@pytest.fixture
def historical_projects():
    return [
        {"linesOfCode": 10000, "teamSize": 4, "complexity": 3, "actualCost": 100000, "actualDuration": 6},
        {"linesOfCode": 20000, "teamSize": 6, "complexity": 4, "actualCost": 220000, "actualDuration": 9},
        {"linesOfCode": 5000, "teamSize": 2, "complexity": 2, "actualCost": 40000, "actualDuration": 4},
    ]


@pytest.fixture
def decision_tree():
    """InHouse vs Outsource with identical expected values."""
    return {
        "id": "root",
        "name": "Project Decision",
        "type": "decision",
        "cost": 0,
        "children": [
            {"id": "inhouse", "name": "InHouse", "type": "chance", "cost": 0, "children": [
                {"id": "s1", "name": "Success", "type": "outcome", "probability": 0.7, "cost": 200000, "value": 500000},
                {"id": "f1", "name": "Failure", "type": "outcome", "probability": 0.3, "cost": 200000, "value": 100000},
            ]},
            {"id": "outsource", "name": "Outsource", "type": "chance", "cost": 0, "children": [
                {"id": "s2", "name": "Success", "type": "outcome", "probability": 0.8, "cost": 150000, "value": 400000},
                {"id": "f2", "name": "Failure", "type": "outcome", "probability": 0.2, "cost": 150000, "value": 50000},
            ]},
        ],
    }


@pytest.fixture
def sample_tasks():
    return [
        {"id": "design", "name": "Design", "duration": 2,
         "requiredResources": [{"resourceId": "dev", "amount": 1}], "prerequisites": [], "priority": 3},
        {"id": "build", "name": "Build", "duration": 3,
         "requiredResources": [{"resourceId": "dev", "amount": 2}], "prerequisites": ["design"], "priority": 5},
        {"id": "qa", "name": "QA", "duration": 1,
         "requiredResources": [{"resourceId": "qa", "amount": 1}], "prerequisites": ["build"], "priority": 1},
    ]


@pytest.fixture
def sample_resources():
    return [
        {"id": "dev", "name": "Developers", "type": "human", "maxCapacity": 2, "hourlyRate": 80, "availability": [1]},
        {"id": "qa", "name": "Testers", "type": "human", "maxCapacity": 1, "hourlyRate": 60, "availability": []},
    ]


class FakeAdvisor:
    """Advisory collaborator that records what it was asked."""

    def __init__(self):
        self.payloads = []

    def generate_decision_analysis(self, payload):
        self.payloads.append(payload)
        return {
            "best_solution": payload["options"][0]["name"],
            "justification_key_points": "stub",
            "justification_long": "stub",
        }


@pytest.fixture
def fake_advisor():
    return FakeAdvisor()
