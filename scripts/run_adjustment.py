"""
Run the suggestion adjustment synchronously.

    python scripts/run_adjustment.py                  # every eligible conjunction
    python scripts/run_adjustment.py <conjunction_id> # a single conjunction
"""
import argparse
import logging
import sys

from thetawatch.core.config import settings
from thetawatch.services.suggestion import get_suggestion_adjuster

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def run(conjunction_id=None) -> int:
    adjuster = get_suggestion_adjuster()
    if conjunction_id is None:
        summary = adjuster.adjust_all()
        print(f"Result: {summary.to_dict()}")
        return 1 if summary.failed else 0

    outcome = adjuster.adjust_by_id(conjunction_id)
    if outcome is None:
        return 1
    print(f"Result: {outcome.to_dict()}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Adjust conjunction suggestions based on theta.")
    parser.add_argument("conjunction_id", nargs="?", help="Only adjust this conjunction")
    args = parser.parse_args()
    try:
        sys.exit(run(args.conjunction_id))
    except Exception as e:
        logger.critical(f"Suggestion adjustment crashed: {e}")
        sys.exit(1)
