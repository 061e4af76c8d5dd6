"""
Risk Classification Pattern - Cost Forecast Intelligence

Converts forecast trend and fit quality into a discrete risk level for
project dashboards.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    """Forecast risk levels with associated display properties."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def priority(self) -> int:
        """Numeric priority (lower = more urgent)."""
        return {
            RiskLevel.HIGH: 1,
            RiskLevel.MEDIUM: 2,
            RiskLevel.LOW: 3
        }[self]

    @property
    def color(self) -> str:
        """Standard color for visualization."""
        return {
            RiskLevel.HIGH: "#dc3545",    # Red
            RiskLevel.MEDIUM: "#ffc107",  # Yellow
            RiskLevel.LOW: "#28a745"      # Green
        }[self]


@dataclass
class ForecastRiskThresholds:
    """Cut-offs used when classifying a cost forecast."""
    trend_change: float = 0.10
    high_risk_change: float = 0.30
    min_accuracy: float = 0.70


class ForecastRiskClassifier:
    """
    Classifies a cost forecast as low, medium or high risk.

    Spend that is climbing steeply is high risk. Spend that is climbing at
    all, or a trend line that explains the history poorly, is medium risk.

    Example:
    ```python
    classifier = ForecastRiskClassifier()
    level = classifier.classify(increasing=True, percent_change=0.42, accuracy=0.9)
    print(level.value)  # "high"
    ```
    """

    def __init__(self, thresholds: Optional[ForecastRiskThresholds] = None):
        self.thresholds = thresholds or ForecastRiskThresholds()

    def classify(self, increasing: bool, percent_change: float, accuracy: float) -> RiskLevel:
        """
        Classify forecast risk.

        Args:
            increasing: Whether the spend trend is increasing
            percent_change: Fractional change between history halves
            accuracy: R-squared of the trend against actuals

        Returns:
            RiskLevel
        """
        if increasing and percent_change > self.thresholds.high_risk_change:
            return RiskLevel.HIGH
        if increasing or accuracy < self.thresholds.min_accuracy:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW
