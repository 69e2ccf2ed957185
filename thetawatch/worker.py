"""
Celery worker for background tasks.
Tasks: suggestion adjustment for all eligible conjunctions or for a single one.
"""
import logging
from celery import Celery
from thetawatch.core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "thetawatch",
    broker=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0",
    backend=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/1",
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    enable_utc=True,
)

@celery_app.on_after_configure.connect
def setup_periodic_tasks(sender, **kwargs):
    sender.add_periodic_task(
        settings.ADJUST_INTERVAL_MINUTES * 60.0,
        adjust_suggestions_task.s(),
        name=f"Adjust suggestions every {settings.ADJUST_INTERVAL_MINUTES} mins"
    )

@celery_app.task(name="adjust_suggestions")
def adjust_suggestions_task():
    """Run the theta-based suggestion adjustment over every eligible conjunction."""
    from thetawatch.services import suggestion

    try:
        summary = suggestion.get_suggestion_adjuster().adjust_all()
        logger.info(f"Suggestion adjustment task done: {summary.to_dict()}")
        return summary.to_dict()
    except Exception as e:
        logger.error(f"Suggestion adjustment task failed: {e}")
        raise

@celery_app.task(name="adjust_conjunction_suggestion")
def adjust_conjunction_suggestion_task(conjunction_id: str):
    """Run the suggestion adjustment for one conjunction."""
    from thetawatch.services import suggestion

    try:
        outcome = suggestion.get_suggestion_adjuster().adjust_by_id(conjunction_id)
    except Exception as e:
        logger.error(f"Suggestion adjustment failed for conjunction {conjunction_id}: {e}")
        raise

    if outcome is None:
        return {"conjunction_id": conjunction_id, "found": False}
    return {"found": True, **outcome.to_dict()}
