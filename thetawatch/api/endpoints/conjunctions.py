from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from thetawatch.api.deps import get_adjuster
from thetawatch.services.suggestion import SuggestionAdjuster

router = APIRouter()


@router.post("/adjust-suggestions")
def adjust_suggestions(adjuster: SuggestionAdjuster = Depends(get_adjuster)) -> Dict[str, Any]:
    """
    Re-evaluate the suggestion of every eligible conjunction.
    Blocks while another adjustment is running.
    """
    return adjuster.adjust_all().to_dict()


@router.post("/{conjunction_id}/adjust-suggestion")
def adjust_suggestion(
    conjunction_id: str,
    adjuster: SuggestionAdjuster = Depends(get_adjuster),
) -> Dict[str, Any]:
    outcome = adjuster.adjust_by_id(conjunction_id)
    if outcome is None:
        raise HTTPException(status_code=404, detail="Conjunction not found")
    return outcome.to_dict()
