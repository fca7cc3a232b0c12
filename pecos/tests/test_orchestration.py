"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Orchestration Surface
════════════════════════════════════════════════════════════════════════════════════════════════════

End-to-end calls with JSON-shaped requests, as a host layer would make them.
"""

import json

import numpy as np
import pytest

from pecos import (
    InvalidRequestError,
    allocate_resources,
    analyze_decision,
    estimate_cost,
    evaluate_project,
)
from pecos.finance import cocomo, function_points


class TestEvaluateProject:
    """Project record enrichment."""

    def test_defaults(self, sample_project):
        record = evaluate_project(sample_project)
        cocomo_cost = cocomo(10000).cost
        fp_cost = function_points(10, 8, 5, 3, 2).cost

        assert record["name"] == sample_project["name"]
        assert record["costEstimations"]["cocomo"] == pytest.approx(cocomo_cost)
        assert record["costEstimations"]["functionPoints"] == pytest.approx(fp_cost)
        assert record["costEstimations"]["expertJudgment"] == pytest.approx((cocomo_cost + fp_cost) / 2)

        metrics = record["budgetingMetrics"]
        assert metrics["totalBudget"] == pytest.approx(cocomo_cost)
        assert metrics["projectedRevenue"] == pytest.approx(cocomo_cost * 1.5)
        assert metrics["roi"] == pytest.approx(50.0)
        assert metrics["paybackPeriod"] == pytest.approx(8.0)
        assert metrics["npv"] > 0
        assert metrics["irr"] > 0

    def test_overrides(self, sample_project):
        sample_project["budgetingMetrics"] = {"totalBudget": 100000, "projectedRevenue": 120000}
        sample_project["costEstimations"] = {"expertJudgment": 99000}
        sample_project["functionPoints"] = {"inputs": 20, "outputs": 0}
        record = evaluate_project(sample_project)

        assert record["budgetingMetrics"]["totalBudget"] == 100000
        assert record["budgetingMetrics"]["roi"] == pytest.approx(20.0)
        assert record["costEstimations"]["expertJudgment"] == 99000
        assert record["costEstimations"]["functionPoints"] == pytest.approx(
            function_points(20, 8, 5, 3, 2).cost
        )

    def test_team_size_and_rate_defaults(self):
        record = evaluate_project({"name": "Tiny", "estimatedLinesOfCode": 0, "timeframeMonths": 1})
        assert record["teamSize"] == 1
        assert record["hourlyRate"] == 85
        assert record["costEstimations"]["cocomo"] == 0

    def test_snake_case_team_size(self):
        record = evaluate_project(
            {"name": "P", "estimatedLinesOfCode": 1000, "timeframeMonths": 3, "team_size": 4}
        )
        assert record["teamSize"] == 4

    def test_invalid_timeframe(self, sample_project):
        sample_project["timeframeMonths"] = 0
        with pytest.raises(InvalidRequestError) as exc:
            evaluate_project(sample_project)
        assert exc.value.details
        assert "timeframeMonths" in exc.value.message


class TestEstimateCost:
    """Delphi and regression requests."""

    def test_delphi_response_shape(self, expert_estimates):
        response = estimate_cost({"method": "delphi", "data": {"estimates": expert_estimates}})
        result = response["result"]

        assert response["method"] == "delphi"
        assert response["timestamp"].endswith("Z")
        assert result["expertCount"] == 3
        assert result["estimateRange"] == {"min": 70, "max": 150, "spread": 80}
        assert len(result["expertAnalysis"]) == 3
        assert result["riskAnalysis"] is None
        assert result["finalEstimate"] == result["confidenceWeightedAverage"]
        assert "PERT" in result["methodology"]["formula"]

    def test_delphi_single_expert(self):
        response = estimate_cost({"method": "delphi", "data": {"estimates": [
            {"expertId": "e1", "optimistic": 80, "mostLikely": 100, "pessimistic": 140, "confidence": 1},
        ]}})
        result = response["result"]
        assert result["finalEstimate"] == pytest.approx(103.33, abs=0.01)
        assert result["pertAverage"] == pytest.approx(103.33, abs=0.01)
        assert result["consensus"] == 1

    def test_delphi_with_risk_factors(self, expert_estimates):
        response = estimate_cost(
            {"method": "delphi", "data": {
                "estimates": expert_estimates,
                "riskFactors": {"technical": 0, "market": 0, "organizational": 0},
            }},
            rng=np.random.default_rng(3),
        )
        result = response["result"]
        assert result["riskAnalysis"]["mean"] == pytest.approx(result["finalEstimate"])
        assert result["riskAnalysis"]["standardDeviation"] == pytest.approx(0.0)

    def test_delphi_rejects_inverted_estimate(self):
        with pytest.raises(InvalidRequestError) as exc:
            estimate_cost({"method": "delphi", "data": {"estimates": [
                {"expertId": "e9", "optimistic": 200, "mostLikely": 100, "pessimistic": 140, "confidence": 1},
            ]}})
        assert "e9" in exc.value.message

    def test_delphi_requires_an_expert(self):
        with pytest.raises(InvalidRequestError):
            estimate_cost({"method": "delphi", "data": {"estimates": []}})

    def test_regression_response_shape(self, historical_projects):
        response = estimate_cost({"method": "regression", "data": {
            "historicalData": historical_projects,
            "newProject": {"linesOfCode": 10000, "teamSize": 4, "complexity": 3},
        }})
        result = response["result"]
        assert result["estimatedCost"] == pytest.approx(100000)
        assert 0 <= result["rSquared"] <= 1
        stats = result["historicalStatistics"]
        assert stats["projectCount"] == 3
        interval = result["costPredictionInterval"]
        assert interval["lower"] == pytest.approx(100000 - 1.96 * stats["costStandardDeviation"])
        assert result["methodology"]["factors"] == ["Lines of Code", "Team Size", "Complexity"]

    def test_regression_needs_two_projects(self, historical_projects):
        with pytest.raises(InvalidRequestError):
            estimate_cost({"method": "regression", "data": {
                "historicalData": historical_projects[:1],
                "newProject": {"linesOfCode": 10000, "teamSize": 4, "complexity": 3},
            }})

    def test_regression_complexity_range(self, historical_projects):
        with pytest.raises(InvalidRequestError):
            estimate_cost({"method": "regression", "data": {
                "historicalData": historical_projects,
                "newProject": {"linesOfCode": 10000, "teamSize": 4, "complexity": 9},
            }})

    def test_unknown_method(self):
        with pytest.raises(InvalidRequestError, match="delphi"):
            estimate_cost({"method": "guess", "data": {}})

    def test_response_is_json(self, expert_estimates):
        json.dumps(estimate_cost({"method": "delphi", "data": {"estimates": expert_estimates}}))


class TestAnalyzeDecision:
    def test_engine_result(self, decision_tree):
        response = analyze_decision({"decisionTree": decision_tree})
        assert response["bestPath"] == ["Project Decision", "Outsource", "Success"]
        assert response["riskAnalysis"]["bestOption"] == "Outsource"
        assert "aiAnalysis" not in response

    def test_injected_advisor(self, decision_tree, fake_advisor):
        response = analyze_decision({"decisionTree": decision_tree}, advisory_client=fake_advisor)
        assert response["aiAnalysis"]["best_solution"] == "InHouse"
        assert response["bestPath"] == ["Project Decision", "Outsource", "Success"]
        [payload] = fake_advisor.payloads
        assert [o["name"] for o in payload["options"]] == ["InHouse", "Outsource"]

    def test_missing_tree(self):
        with pytest.raises(InvalidRequestError, match="No decision tree provided"):
            analyze_decision({})

    def test_probability_out_of_range(self, decision_tree):
        decision_tree["children"][0]["children"][0]["probability"] = 1.7
        with pytest.raises(InvalidRequestError):
            analyze_decision({"decisionTree": decision_tree})

    def test_duplicate_node_ids(self, decision_tree):
        decision_tree["children"][1]["children"][0]["id"] = "s1"
        with pytest.raises(InvalidRequestError, match="Duplicate decision node id: s1"):
            analyze_decision({"decisionTree": decision_tree})

    def test_unknown_node_type(self, decision_tree):
        decision_tree["children"][0]["type"] = "lottery"
        with pytest.raises(InvalidRequestError):
            analyze_decision({"decisionTree": decision_tree})


class TestAllocateResources:
    """optimize / leveling / scenario."""

    def test_optimize(self, sample_tasks, sample_resources):
        result = allocate_resources({"method": "optimize", "data": {
            "tasks": sample_tasks, "resources": sample_resources,
        }})
        periods = {e["taskId"]: (e["startPeriod"], e["endPeriod"]) for e in result["schedule"]}
        assert periods == {"design": (0, 2), "build": (2, 5), "qa": (5, 6)}
        assert result["totalCost"] == pytest.approx(1 * 80 * 2 + 2 * 80 * 3 + 1 * 60 * 1)
        assert result["projectDuration"] == 6
        assert result["conflicts"] == []
        assert len(result["resourceUtilization"]["dev"]) == 100

    def test_optimize_with_deadline(self, sample_tasks, sample_resources):
        result = allocate_resources({"method": "optimize", "data": {
            "tasks": sample_tasks, "resources": sample_resources, "projectDeadline": 5,
        }})
        assert result["conflicts"] == ["Cannot schedule task QA - insufficient resources"]

    def test_leveling(self, sample_tasks, sample_resources):
        schedule = allocate_resources({"method": "optimize", "data": {
            "tasks": sample_tasks, "resources": sample_resources, "projectDeadline": 10,
        }})
        shrunk = [dict(r) for r in sample_resources]
        shrunk[0]["maxCapacity"] = 1

        leveled = allocate_resources({"method": "leveling", "data": {
            "schedule": schedule, "resourcesForLeveling": shrunk,
        }})
        assert leveled["conflicts"] == [
            f"Resource Developers over-allocated in period {p}: 2/1" for p in (2, 3, 4)
        ]
        assert leveled["schedule"] == schedule["schedule"]

    def test_scenario(self, sample_tasks, sample_resources):
        results = allocate_resources({"method": "scenario", "data": {
            "baseTasks": sample_tasks,
            "baseResources": sample_resources,
            "scenarios": [
                {"resourceMultiplier": 1.0},
                {"resourceMultiplier": 0.5, "budgetConstraint": 1000},
            ],
        }})
        assert len(results) == 2
        assert results[0]["result"]["conflicts"] == []
        assert results[0]["metrics"]["efficiency"] == pytest.approx(6 / 700 * 1000)
        assert "withinBudget" not in results[0]["metrics"]
        # half capacity: only design (1 dev) still fits
        assert results[1]["result"]["conflicts"] == [
            "Cannot schedule task Build - insufficient resources",
            "Cannot schedule task QA - insufficient resources",
        ]
        assert results[1]["result"]["totalCost"] == pytest.approx(160)
        assert results[1]["metrics"]["riskLevel"] == pytest.approx(2 / 3)
        assert results[1]["metrics"]["withinBudget"] is True

    def test_optimize_long_chain(self):
        tasks = [
            {"id": f"t{i}", "name": f"T{i}", "duration": 0,
             "prerequisites": [f"t{i - 1}"] if i else []}
            for i in reversed(range(1500))
        ]
        result = allocate_resources({"method": "optimize", "data": {"tasks": tasks, "resources": []}})
        assert len(result["schedule"]) == 1500
        assert result["conflicts"] == []

    def test_invalid_method(self):
        with pytest.raises(InvalidRequestError, match="Invalid resource allocation method"):
            allocate_resources({"method": "teleport", "data": {}})

    def test_invalid_task(self, sample_resources):
        with pytest.raises(InvalidRequestError):
            allocate_resources({"method": "optimize", "data": {
                "tasks": [{"id": "x", "name": "X", "duration": -1}],
                "resources": sample_resources,
            }})

    def test_non_mapping_request(self):
        with pytest.raises(InvalidRequestError):
            allocate_resources(["optimize"])
