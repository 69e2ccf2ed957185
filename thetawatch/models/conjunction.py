"""
Conjunction record model.

A conjunction is stored as a document: the identity and the fields the
eligibility query filters on get their own columns, the two risk documents are
kept as JSON, and every other field of the document rides along in
``attributes`` so a full replace round-trips it untouched.
"""
from sqlalchemy import Column, Integer, String, JSON

from thetawatch.db.base_class import Base

# Document keys
ID = "id"
CONJUNCTION_ID = "conjunction_id"
SAT1_NORAD_ID = "sat1_norad_id"
SAT2_NORAD_ID = "sat2_norad_id"
NEWEST_RISK_ESTIMATION = "newest_risk_estimation"
NEWEST_RISK_PREDICTION = "newest_risk_prediction"
SUGGESTED = "suggested"
RISK_TREND = "risk_trend"
COLLISION_PROBABILITY = "collision_probability"
TIME_TO_TCA = "time_to_tca"


class Conjunction(Base):
    """Persisted conjunction document."""
    id = Column(String, primary_key=True, index=True)
    conjunction_id = Column(String, index=True)
    sat1_norad_id = Column(Integer, index=True)
    sat2_norad_id = Column(Integer, index=True)
    # none_as_null so a missing risk document is SQL NULL and "exists" is IS NOT NULL
    newest_risk_estimation = Column(JSON(none_as_null=True), nullable=True)
    newest_risk_prediction = Column(JSON(none_as_null=True), nullable=True)
    attributes = Column(JSON, nullable=False, default=dict)
