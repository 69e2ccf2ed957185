"""
Theta Trend Analysis.

Walks the risk trend of a prediction two consecutive points at a time and
asks the geometry model whether the theta between them is problematic.

Any invalid pair or any problematic pair disqualifies the prediction from
being suggested, and that verdict never flips back within one walk. When a
pair is problematic, the later point's collision probability is replaced by
the model's correction, so following pairs are analyzed against the corrected
value. Only the final pair, the one closest to TCA, may push its corrected
probability up to the prediction itself.

The walk rewrites trend points in place. Callers hand it a working copy they
own, never data shared with the store.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, MutableMapping, Optional, Tuple

from thetawatch.core.config import settings
from thetawatch.models.conjunction import COLLISION_PROBABILITY, RISK_TREND, TIME_TO_TCA
from thetawatch.services.geometry import NO_ADJUSTMENT, RiskGeometryModel
from thetawatch.services.trend_validation import has_sufficient_points, is_point_valid

logger = logging.getLogger(__name__)


@dataclass
class RiskTrendAnalysisResult:
    # Whether the newest risk estimation should stay suggested
    should_be_suggested: bool = True
    # Replacement for the prediction's collision_probability, if any
    latest_collision_probability: Optional[float] = None


class PairwiseThetaAnalyzer:
    def __init__(self, model: RiskGeometryModel, pair_uses_first_tca: Optional[bool] = None):
        self.model = model
        if pair_uses_first_tca is None:
            pair_uses_first_tca = settings.THETA_PAIR_USES_FIRST_TCA
        self.pair_uses_first_tca = pair_uses_first_tca

    def analyze(self, risk_trend: List[MutableMapping[str, Any]]) -> RiskTrendAnalysisResult:
        """
        Analyze every consecutive pair of ``risk_trend`` (at least two points,
        ordered by decreasing time_to_tca). Mutates the points in place.
        """
        result = RiskTrendAnalysisResult()
        last_index = len(risk_trend) - 1

        for i in range(1, len(risk_trend)):
            first = risk_trend[i - 1]
            second = risk_trend[i]

            if not (is_point_valid(first) and is_point_valid(second)):
                result.should_be_suggested = False
                continue

            problematic, adjusted = self._analyze_pair(first, second)
            if problematic:
                result.should_be_suggested = False
                if i == last_index and adjusted:
                    result.latest_collision_probability = float(second[COLLISION_PROBABILITY])

        return result

    def _analyze_pair(
        self,
        first: MutableMapping[str, Any],
        second: MutableMapping[str, Any],
    ) -> Tuple[bool, bool]:
        """Returns (theta is problematic, second point was adjusted)."""
        t0 = float(first[TIME_TO_TCA])
        p0 = float(first[COLLISION_PROBABILITY])
        t1 = t0 if self.pair_uses_first_tca else float(second[TIME_TO_TCA])
        p1 = float(second[COLLISION_PROBABILITY])

        theta = self.model.analyze_theta(t0, p0, t1, p1)
        if not self.model.check_theta(theta):
            return False, False

        adjusted = self.model.adjust_collision_probability(t0, p0, t1, p1)
        if adjusted == NO_ADJUSTMENT:
            logger.info(f"Problematic theta {theta} but no adjustment available at time_to_tca {second[TIME_TO_TCA]}")
            return True, False

        second[COLLISION_PROBABILITY] = adjusted
        return True, True


def process_risk_prediction(
    prediction: MutableMapping[str, Any],
    analyzer: PairwiseThetaAnalyzer,
) -> RiskTrendAnalysisResult:
    """
    Run the theta analysis over one risk prediction and apply the terminal
    probability override to it. Trends too short to analyze leave the
    prediction untouched and keep the default (suggested) verdict.
    """
    risk_trend = prediction.get(RISK_TREND)
    if not has_sufficient_points(risk_trend):
        return RiskTrendAnalysisResult()

    result = analyzer.analyze(risk_trend)
    if result.latest_collision_probability is not None:
        prediction[COLLISION_PROBABILITY] = result.latest_collision_probability
    return result
