"""
Suggestion Adjustment Service.

Clears the ``suggested`` flag of a conjunction's newest risk estimation when
the theta analysis of its newest risk prediction finds the trend unstable,
and stores the smoothed collision probabilities alongside.

Three entry points: every eligible conjunction, one conjunction by its
conjunction_id, or a record the caller already fetched. They share one lock
per adjuster, so at most one adjustment runs at a time on an instance.

The adjuster never sets ``suggested`` back to True. A stable trend results
in no write at all.
"""
import copy
import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from thetawatch.core.config import settings
from thetawatch.models.conjunction import (
    ID,
    CONJUNCTION_ID,
    NEWEST_RISK_ESTIMATION,
    NEWEST_RISK_PREDICTION,
    SUGGESTED,
)
from thetawatch.services.conjunction_store import ConjunctionStore, eligibility_criteria
from thetawatch.services.geometry import NativeRiskGeometryModel, RiskGeometryModel
from thetawatch.services.theta_analysis import (
    PairwiseThetaAnalyzer,
    RiskTrendAnalysisResult,
    process_risk_prediction,
)

logger = logging.getLogger(__name__)


@dataclass
class AdjustmentOutcome:
    record_id: Optional[str]
    conjunction_id: Optional[str]
    should_be_suggested: bool
    persisted: bool
    # Collision probability written to the newest risk prediction, if any
    collision_probability: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BatchSummary:
    processed: int = 0
    unsuggested: int = 0
    failed: List[Optional[str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SuggestionAdjuster:
    def __init__(
        self,
        store: ConjunctionStore,
        model: RiskGeometryModel,
        maximum_norad_id: Optional[int] = None,
        pair_uses_first_tca: Optional[bool] = None,
    ):
        if store is None:
            raise ValueError("A conjunction store is required")
        self.store = store
        self.analyzer = PairwiseThetaAnalyzer(model, pair_uses_first_tca=pair_uses_first_tca)
        self.maximum_norad_id = (
            maximum_norad_id if maximum_norad_id is not None else settings.MAXIMUM_NORAD_ID
        )
        self._lock = threading.Lock()

    def adjust_all(self) -> BatchSummary:
        """
        Adjust every conjunction that has both risk documents and whose two
        satellites are below the maximum NORAD id. A record whose analysis
        fails is logged and skipped; the rest of the batch still runs.
        """
        with self._lock:
            logger.info(f"Adjusting suggestions for conjunctions below NORAD id {self.maximum_norad_id}")
            summary = BatchSummary()
            for record in self.store.find(*eligibility_criteria(self.maximum_norad_id)):
                try:
                    working, result = self._evaluate(record)
                except Exception:
                    logger.exception(f"Theta analysis failed for conjunction {record.get(ID)}")
                    summary.failed.append(record.get(ID))
                    continue

                outcome = self._apply(working, result)
                summary.processed += 1
                if outcome.persisted:
                    summary.unsuggested += 1

            logger.info(
                f"Suggestion adjustment complete. Processed {summary.processed}, "
                f"unsuggested {summary.unsuggested}, failed {len(summary.failed)}."
            )
            return summary

    def adjust_by_id(self, conjunction_id: str) -> Optional[AdjustmentOutcome]:
        """
        Adjust the eligible conjunction with ``conjunction_id``. Returns None,
        after logging, when there is no such conjunction.
        """
        with self._lock:
            record = self.store.find_one(*eligibility_criteria(self.maximum_norad_id, conjunction_id))
            if record is None:
                logger.error(f"There is no conjunction with id {conjunction_id}")
                return None
            return self._adjust(record)

    def adjust_record(self, record: Dict[str, Any]) -> AdjustmentOutcome:
        """
        Adjust an already fetched conjunction without re-checking eligibility.
        ``record`` itself is left as it was; the adjusted copy is what gets
        written.
        """
        with self._lock:
            return self._adjust(record)

    def _adjust(self, record: Dict[str, Any]) -> AdjustmentOutcome:
        working, result = self._evaluate(record)
        return self._apply(working, result)

    def _evaluate(self, record: Dict[str, Any]) -> Tuple[Dict[str, Any], RiskTrendAnalysisResult]:
        working = copy.deepcopy(record)
        result = process_risk_prediction(working[NEWEST_RISK_PREDICTION], self.analyzer)
        return working, result

    def _apply(self, working: Dict[str, Any], result: RiskTrendAnalysisResult) -> AdjustmentOutcome:
        persisted = False
        if not result.should_be_suggested:
            working[NEWEST_RISK_ESTIMATION][SUGGESTED] = False
            persisted = self.store.replace_one(working) > 0
            if persisted:
                logger.info(f"Conjunction {working.get(CONJUNCTION_ID)} is no longer suggested")

        return AdjustmentOutcome(
            record_id=working.get(ID),
            conjunction_id=working.get(CONJUNCTION_ID),
            should_be_suggested=result.should_be_suggested,
            persisted=persisted,
            collision_probability=result.latest_collision_probability,
        )


_adjuster: Optional[SuggestionAdjuster] = None
_adjuster_lock = threading.Lock()


def get_suggestion_adjuster() -> SuggestionAdjuster:
    """Process-wide adjuster, so every caller in the process shares its lock."""
    global _adjuster
    if _adjuster is None:
        with _adjuster_lock:
            if _adjuster is None:
                from thetawatch.db.session import SessionLocal

                model = NativeRiskGeometryModel.from_path(settings.GEOMETRY_LIBRARY_PATH)
                _adjuster = SuggestionAdjuster(ConjunctionStore(SessionLocal), model)
    return _adjuster
