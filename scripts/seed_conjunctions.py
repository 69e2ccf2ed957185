"""Create the conjunction table and insert a few sample conjunctions."""
import logging
import uuid

from thetawatch.db.base import Base
from thetawatch.db.session import SessionLocal, engine
from thetawatch.services.conjunction_store import ConjunctionStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def sample_conjunction(sat1_norad_id: int, sat2_norad_id: int) -> dict:
    return {
        "conjunction_id": str(uuid.uuid4()),
        "sat1_norad_id": sat1_norad_id,
        "sat2_norad_id": sat2_norad_id,
        "sat1_name": f"SAT-{sat1_norad_id}",
        "sat2_name": f"SAT-{sat2_norad_id}",
        "criticality": "non_critical",
        "newest_risk_estimation": {
            "suggested": True,
            "collision_probability": 1e-5,
            "miss_distance": 0.135,
        },
        "newest_risk_prediction": {
            "collision_probability": 7e-6,
            "risk_trend": [
                {"time_to_tca": 7200, "collision_probability": 1e-5},
                {"time_to_tca": 3600, "collision_probability": 9e-6},
                {"time_to_tca": 1800, "collision_probability": 8e-6},
                {"time_to_tca": 900, "collision_probability": 7e-6},
            ],
        },
    }


def seed():
    Base.metadata.create_all(bind=engine)
    store = ConjunctionStore(SessionLocal)
    for sat1, sat2 in [(25544, 27386), (20580, 28654), (43013, 25544)]:
        conjunction = sample_conjunction(sat1, sat2)
        store.insert_one(conjunction)
        logger.info(f"Inserted conjunction {conjunction['conjunction_id']} ({sat1} / {sat2})")


if __name__ == "__main__":
    seed()
