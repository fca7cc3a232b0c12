"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    PECOS — ORCHESTRATION SURFACE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Entry points a host layer (HTTP handler, CLI, notebook) calls with the JSON
body it received. Each one validates the request, runs the engines and
returns a JSON-serialisable dict with camelCase keys.

    evaluate_project(project)                     → enriched project record
    estimate_cost({method, data})                 → delphi | regression
    analyze_decision({decisionTree}, client?)     → EV, best path, reasoning (+ aiAnalysis)
    allocate_resources({method, data})            → optimize | leveling | scenario

Invalid requests raise InvalidRequestError; nothing else is raised for
business conditions.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import numpy as np
from pydantic import BaseModel, ValidationError

from .advisory import AdvisoryClient, build_advisory_payload
from .decision import DecisionNode, analyze_decision_tree
from .errors import InvalidRequestError
from .estimation import (
    delphi_estimate,
    estimate_range,
    expert_analysis,
    historical_statistics,
    monte_carlo_simulation,
    prediction_interval,
    regression_estimate,
)
from .finance import CocomoMode, cocomo, function_points, irr, npv, payback_period, roi
from .scheduling import (
    ScheduleResult,
    optimize_resource_allocation,
    perform_resource_leveling,
    perform_scenario_analysis,
)
from .validation import (
    DecisionTreeRequest,
    DelphiRequest,
    LevelingRequest,
    OptimizeRequest,
    ProjectRequest,
    RegressionRequest,
    ScenarioRequest,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

DISCOUNT_RATE = 0.1
REVENUE_MULTIPLIER = 1.5

DELPHI_METHODOLOGY = {
    "description": "Delphi method with PERT estimation and confidence weighting",
    "formula": "PERT = (Optimistic + 4 × Most Likely + Pessimistic) / 6",
    "weightingMethod": "Confidence-weighted average of expert PERT estimates",
}

REGRESSION_METHODOLOGY = {
    "description": "Multiple linear regression based on historical project similarity",
    "factors": ["Lines of Code", "Team Size", "Complexity"],
    "similarityMetric": "Weighted similarity score across all factors",
}


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# HELPERS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _validate(model: Type[R], data: Any) -> R:
    """Parse a request body, turning pydantic errors into InvalidRequestError."""
    if not isinstance(data, Mapping):
        raise InvalidRequestError(f"{model.__name__} body must be an object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors(include_url=False, include_context=False)
        ]
        summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
        logger.debug(f"{model.__name__} rejected: {summary}")
        raise InvalidRequestError(f"Invalid {model.__name__}: {summary}", details) from e


def _method_and_data(request: Any) -> tuple:
    if not isinstance(request, Mapping):
        raise InvalidRequestError("Request body must be an object")
    return request.get("method"), request.get("data") or {}


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# PROJECT EVALUATION
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def evaluate_project(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Cost estimations and budgeting metrics for a project record.

    Budget defaults to the COCOMO cost, revenue to 1.5 × budget; revenue is
    spread evenly over timeframeMonths for NPV (10 %), IRR and payback.
    """
    project = _validate(ProjectRequest, data)

    cocomo_cost = cocomo(project.estimated_lines_of_code, CocomoMode.SEMIDETACHED).cost
    counts = project.function_points
    if counts is None:
        fp_cost = function_points(10, 8, 5, 3, 2).cost
    else:
        fp_cost = function_points(
            counts.inputs, counts.outputs, counts.inquiries, counts.files, counts.interfaces
        ).cost

    overrides = project.budgeting_metrics
    total_budget = (overrides.total_budget if overrides else None) or cocomo_cost
    projected_revenue = (overrides.projected_revenue if overrides else None) or total_budget * REVENUE_MULTIPLIER

    monthly_revenue = projected_revenue / project.timeframe_months
    cash_flows = [monthly_revenue] * project.timeframe_months

    estimations = project.cost_estimations
    expert_judgment = (estimations.expert_judgment if estimations else None) or (cocomo_cost + fp_cost) / 2

    record = dict(data)
    record.update({
        "teamSize": project.team_size,
        "hourlyRate": project.hourly_rate,
        "costEstimations": {
            "cocomo": cocomo_cost,
            "functionPoints": fp_cost,
            "expertJudgment": expert_judgment,
        },
        "budgetingMetrics": {
            "totalBudget": total_budget,
            "projectedRevenue": projected_revenue,
            "roi": roi(projected_revenue, total_budget),
            "npv": npv(cash_flows, DISCOUNT_RATE, total_budget),
            "irr": irr(cash_flows, total_budget),
            "paybackPeriod": payback_period(cash_flows, total_budget),
        },
    })
    logger.info(
        f"Project '{project.name}': budget={total_budget:.2f}, "
        f"revenue={projected_revenue:.2f}, months={project.timeframe_months}"
    )
    return record


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# COST ESTIMATION
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _delphi(data: Mapping[str, Any], rng: Optional[np.random.Generator]) -> Dict[str, Any]:
    request = _validate(DelphiRequest, data)
    estimates = [e.to_wire() for e in request.estimates]
    result = delphi_estimate(estimates, request.iterations)

    risk_analysis = None
    if request.risk_factors is not None:
        risk_analysis = monte_carlo_simulation(
            result.final_estimate, request.risk_factors.to_wire(), rng=rng
        ).to_dict()

    return {
        "finalEstimate": result.final_estimate,
        "consensus": result.consensus,
        "pertAverage": result.pert,
        "confidenceWeightedAverage": result.confidence_weighted_average,
        "expertCount": len(estimates),
        "estimateRange": estimate_range(estimates),
        "expertAnalysis": expert_analysis(estimates),
        "riskAnalysis": risk_analysis,
        "methodology": dict(DELPHI_METHODOLOGY),
    }


def _regression(data: Mapping[str, Any]) -> Dict[str, Any]:
    request = _validate(RegressionRequest, data)
    history = [h.to_wire() for h in request.historical_data]
    result = regression_estimate(history, request.new_project.to_wire())
    statistics = historical_statistics(history)

    payload = result.to_dict()
    payload["costPredictionInterval"] = prediction_interval(
        result.estimated_cost, statistics["costStandardDeviation"]
    )
    payload["historicalStatistics"] = statistics
    payload["methodology"] = dict(REGRESSION_METHODOLOGY)
    return payload


def estimate_cost(
    request: Mapping[str, Any],
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, Any]:
    """
    Cost estimation by expert judgment or historical similarity.

    Args:
        request: {"method": "delphi" | "regression", "data": {...}}
        rng: Generator for the Delphi risk simulation (fresh one when None)

    Returns:
        {"method", "result", "timestamp"}

    Raises:
        InvalidRequestError: Unknown method or invalid data
    """
    method, data = _method_and_data(request)
    if method == "delphi":
        result = _delphi(data, rng)
    elif method == "regression":
        result = _regression(data)
    else:
        raise InvalidRequestError('Invalid method. Use "delphi" or "regression"')

    return {"method": method, "result": result, "timestamp": _timestamp()}


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# DECISION ANALYSIS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def analyze_decision(
    request: Mapping[str, Any],
    advisory_client: Optional[AdvisoryClient] = None,
) -> Dict[str, Any]:
    """
    Expected value, best path and risk reasoning for {"decisionTree": {...}}.

    When an advisory client is given, its recommendation is attached as
    aiAnalysis; the engine's own bestPath and riskAnalysis never depend on it.
    """
    if not isinstance(request, Mapping) or not request.get("decisionTree"):
        raise InvalidRequestError("No decision tree provided")

    tree = _validate(DecisionTreeRequest, request).decision_tree
    root = DecisionNode.from_dict(tree.to_wire())
    response = analyze_decision_tree(root).to_dict()

    if advisory_client is not None:
        response["aiAnalysis"] = advisory_client.generate_decision_analysis(
            build_advisory_payload(root)
        )
    return response


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# RESOURCE ALLOCATION
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def allocate_resources(request: Mapping[str, Any]) -> Any:
    """
    Resource scheduling entry point.

    Methods:
        optimize: {tasks, resources, projectDeadline?} → ScheduleResult dict
        leveling: {schedule, resourcesForLeveling} → ScheduleResult dict
        scenario: {baseTasks, baseResources, scenarios} → list of scenario dicts

    Raises:
        InvalidRequestError: Unknown method or invalid data
    """
    method, data = _method_and_data(request)

    if method == "optimize":
        parsed = _validate(OptimizeRequest, data)
        result = optimize_resource_allocation(
            [t.to_wire() for t in parsed.tasks],
            [r.to_wire() for r in parsed.resources],
            parsed.project_deadline,
        )
        return result.to_dict()

    if method == "leveling":
        parsed = _validate(LevelingRequest, data)
        leveled = perform_resource_leveling(
            ScheduleResult.from_dict(parsed.schedule.to_wire()),
            [r.to_wire() for r in parsed.resources_for_leveling],
        )
        return leveled.to_dict()

    if method == "scenario":
        parsed = _validate(ScenarioRequest, data)
        results: List[Any] = perform_scenario_analysis(
            [t.to_wire() for t in parsed.base_tasks],
            [r.to_wire() for r in parsed.base_resources],
            [s.to_wire() for s in parsed.scenarios],
        )
        return [r.to_dict() for r in results]

    raise InvalidRequestError("Invalid resource allocation method")
