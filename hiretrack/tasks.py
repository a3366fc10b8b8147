"""Celery tasks for work that runs after the response has been sent."""
import base64
import logging

from celery import shared_task

from hiretrack import databases
from hiretrack.errors import ApiError
from hiretrack.extensions import db
from hiretrack.services import ats_scoring, evaluation
from hiretrack.services.resume_storage import StorageError, save_resume

logger = logging.getLogger(__name__)


@shared_task(name="hiretrack.tasks.store_uploaded_resume")
def store_uploaded_resume(candidate_id, data_b64, filename):
    """Persist an uploaded resume and attach its reference to the candidate."""
    try:
        reference = save_resume(base64.b64decode(data_b64), filename)
    except StorageError as e:
        logger.error("Resume upload failed for %s: %s", candidate_id, e)
        return None

    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        logger.warning("Candidate %s removed before its resume was stored", candidate_id)
        return None
    candidate.resume_url = reference
    db.session.commit()
    logger.info("Resume stored for %s", candidate_id)
    return reference


@shared_task(name="hiretrack.tasks.evaluate_candidate")
def evaluate_candidate(candidate_id):
    result = evaluation.evaluate_candidate(candidate_id)
    return result.total_score if result is not None else None


@shared_task(name="hiretrack.tasks.score_candidates")
def score_candidates(candidate_ids):
    return evaluation.score_candidates(candidate_ids)


def queue_resume_upload(candidate_id, data: bytes, filename):
    return store_uploaded_resume.delay(candidate_id, base64.b64encode(data).decode("ascii"), filename)


def start_batch_scoring():
    """Queue every unscored candidate for scoring in one sequential task."""
    if not ats_scoring.is_configured():
        raise ApiError("ATS_API_KEY not configured", 503)
    candidate_ids = evaluation.find_unscored_candidate_ids()
    logger.info("Found %d candidates without ATS scores", len(candidate_ids))
    if candidate_ids:
        score_candidates.delay(candidate_ids)
    return len(candidate_ids)
