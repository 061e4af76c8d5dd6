"""
Budget Analysis Pattern - Cost Forecast Intelligence

Compares each project's projected cost with its budget and classifies the
result as under budget, at risk or over budget.

Projects without a recorded budget are assumed to carry a 20% margin over
current spend; projects without a projection are assumed to finish 10%
above current spend.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from enum import Enum
import logging

from ..forecasting.series import InvalidSeriesError, parse_cost

logger = logging.getLogger(__name__)


class BudgetStatus(Enum):
    """Budget status of a project."""
    UNDER_BUDGET = "under_budget"
    AT_RISK = "at_risk"
    OVER_BUDGET = "over_budget"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass
class ProjectBudget:
    """Budget position of a single project."""
    project_id: str
    project_name: str
    budgeted_cost: float
    actual_cost: float
    projected_cost: float
    variance: float
    variance_percent: float
    status: BudgetStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "projectName": self.project_name,
            "budgetedCost": self.budgeted_cost,
            "actualCost": self.actual_cost,
            "projectedCost": self.projected_cost,
            "variance": self.variance,
            "variancePercent": self.variance_percent,
            "status": self.status.value
        }


def _project_entry(project: Any) -> Tuple[str, float]:
    """Read a (name, cost) pair or a {name, cost} mapping."""
    if isinstance(project, Mapping):
        if "name" not in project or "cost" not in project:
            raise InvalidSeriesError(f"Project needs 'name' and 'cost': {project!r}")
        return str(project["name"]), parse_cost(project["cost"])
    if isinstance(project, (tuple, list)) and len(project) == 2:
        name, cost = project
        return str(name), parse_cost(cost)
    raise InvalidSeriesError(f"Unrecognised project entry: {project!r}")


class BudgetAnalyzer:
    """
    Classifies projects by projected budget variance.

    Example:
    ```python
    analyzer = BudgetAnalyzer()

    budgets = analyzer.analyze(
        [("Harbor Bridge", 1000.0), ("Depot Roof", 5400.0)],
        project_budgets={"Depot Roof": 6000.0}
    )
    for budget in budgets:
        print(budget.project_name, budget.status.value)
    ```
    """

    def __init__(
        self,
        default_budget_margin: float = 1.2,
        default_projection_factor: float = 1.1,
        at_risk_threshold: float = -10.0
    ):
        """
        Initialize analyzer.

        Args:
            default_budget_margin: Multiplier on actual cost when no budget is known
            default_projection_factor: Multiplier on actual cost when no projection is known
            at_risk_threshold: Variance percent above which a project is at risk
        """
        self.default_budget_margin = default_budget_margin
        self.default_projection_factor = default_projection_factor
        self.at_risk_threshold = at_risk_threshold

    def analyze(
        self,
        projects: Iterable[Any],
        project_budgets: Optional[Mapping[str, float]] = None,
        project_projections: Optional[Mapping[str, float]] = None
    ) -> List[ProjectBudget]:
        """
        Analyze budget position for each project.

        Args:
            projects: (name, actual_cost) pairs or {name, cost} mappings
            project_budgets: Budgeted cost by project name
            project_projections: Projected final cost by project name

        Returns:
            One ProjectBudget per project, in input order
        """
        project_budgets = project_budgets or {}
        project_projections = project_projections or {}

        results = []
        for project in projects:
            name, actual_cost = _project_entry(project)
            results.append(self.evaluate(
                name,
                actual_cost,
                budgeted_cost=project_budgets.get(name),
                projected_cost=project_projections.get(name)
            ))

        return results

    def evaluate(
        self,
        project_name: str,
        actual_cost: float,
        budgeted_cost: Optional[float] = None,
        projected_cost: Optional[float] = None
    ) -> ProjectBudget:
        """Classify a single project."""
        if budgeted_cost is None:
            budgeted_cost = actual_cost * self.default_budget_margin
        else:
            budgeted_cost = parse_cost(budgeted_cost)

        if projected_cost is None:
            projected_cost = actual_cost * self.default_projection_factor
        else:
            projected_cost = parse_cost(projected_cost)

        variance = projected_cost - budgeted_cost
        if budgeted_cost == 0:
            logger.warning(f"Zero budget for {project_name}; variance percent reported as 0")
            variance_percent = 0.0
        else:
            variance_percent = variance * 100 / budgeted_cost

        if variance > 0:
            status = BudgetStatus.OVER_BUDGET
        elif variance_percent > self.at_risk_threshold:
            status = BudgetStatus.AT_RISK
        else:
            status = BudgetStatus.UNDER_BUDGET

        return ProjectBudget(
            project_id=project_name,
            project_name=project_name,
            budgeted_cost=budgeted_cost,
            actual_cost=actual_cost,
            projected_cost=projected_cost,
            variance=variance,
            variance_percent=variance_percent,
            status=status
        )

    @staticmethod
    def trend_projections(
        projects: Iterable[Any],
        growth_factor: float = 1.15
    ) -> Dict[str, float]:
        """Project each project's final cost as current spend times `growth_factor`."""
        projections = {}
        for project in projects:
            name, actual_cost = _project_entry(project)
            projections[name] = actual_cost * growth_factor
        return projections


def status_breakdown(budgets: Iterable[ProjectBudget]) -> Dict[str, int]:
    """Count projects per budget status."""
    counts = {status.value: 0 for status in BudgetStatus}
    for budget in budgets:
        counts[budget.status.value] += 1
    return counts
