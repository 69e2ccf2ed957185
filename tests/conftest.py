"""Pytest fixtures for ThetaWatch tests."""

import copy
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from thetawatch.db.base import Base
from thetawatch.services.conjunction_store import ConjunctionStore

MOCK_THETA = 2.0
MOCK_ADJUSTED_PROBABILITY = 0.5

SCENARIO_TREND = [
    {"time_to_tca": 7200, "collision_probability": 1e-5},
    {"time_to_tca": 3600, "collision_probability": 9e-6},
    {"time_to_tca": 1800, "collision_probability": 8e-6},
    {"time_to_tca": 900, "collision_probability": 7e-6},
]


class ScriptedGeometryModel:
    """Geometry model answering check_theta from a script and counting calls."""

    def __init__(
        self,
        checks: Iterable[bool] = (),
        adjusted: float = MOCK_ADJUSTED_PROBABILITY,
        theta: float = MOCK_THETA,
        fail_on_call: Optional[int] = None,
    ):
        self.checks = list(checks)
        self.adjusted = adjusted
        self.theta = theta
        self.fail_on_call = fail_on_call
        self.analyze_calls: List[tuple] = []
        self.check_calls: List[float] = []
        self.adjust_calls: List[tuple] = []

    def analyze_theta(self, t0, p0, t1, p1):
        self.analyze_calls.append((t0, p0, t1, p1))
        if self.fail_on_call is not None and len(self.analyze_calls) == self.fail_on_call:
            raise RuntimeError("geometry routine failed")
        return self.theta

    def check_theta(self, theta):
        self.check_calls.append(theta)
        return self.checks.pop(0) if self.checks else False

    def adjust_collision_probability(self, t0, p0, t1, p1):
        self.adjust_calls.append((t0, p0, t1, p1))
        return self.adjusted


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> ConjunctionStore:
    # Small batches so that reads page through the table
    return ConjunctionStore(session_factory, batch_size=2)


@pytest.fixture
def make_conjunction() -> Callable[..., Dict[str, Any]]:
    """Build a conjunction document with the four-point scenario trend by default."""

    def _make(
        risk_trend: Optional[List[Dict[str, Any]]] = None,
        sat1_norad_id: int = 0,
        sat2_norad_id: int = 0,
        suggested: bool = True,
        **extra: Any,
    ) -> Dict[str, Any]:
        document = {
            "id": str(uuid.uuid4()),
            "conjunction_id": str(uuid.uuid4()),
            "sat1_norad_id": sat1_norad_id,
            "sat2_norad_id": sat2_norad_id,
            "sat1_name": "test_name1",
            "sat2_name": "test_name2",
            "criticality": "non_critical",
            "newest_risk_estimation": {
                "risk_estimation_id": "550e8400-e29b-11d4-a716-446655440000",
                "collision_probability": 1e-5,
                "miss_distance": 0.135,
                "suggested": suggested,
            },
            "newest_risk_prediction": {
                "collision_probability": 7e-6,
                "risk_trend": copy.deepcopy(SCENARIO_TREND if risk_trend is None else risk_trend),
            },
        }
        document.update(extra)
        return document

    return _make


@pytest.fixture
def model_factory() -> Callable[..., ScriptedGeometryModel]:
    return ScriptedGeometryModel
