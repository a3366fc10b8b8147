"""Resume evaluation: resolving resume text, calling the oracle and storing the result."""
import logging
from datetime import datetime
from typing import Optional

from flask import current_app

from hiretrack import databases
from hiretrack.errors import ApiError, NotFoundError, UpstreamError
from hiretrack.extensions import db
from hiretrack.models import Candidate
from hiretrack.schemas import AtsResult
from hiretrack.services import ats_scoring
from hiretrack.services.cv_parser import extract_text
from hiretrack.services.pipeline import valid_stages_for
from hiretrack.services.resume_storage import StorageError, infer_content_format, load_resume

logger = logging.getLogger(__name__)

ATS_ACTOR = "ATS"


def has_enough_text(text) -> bool:
    return bool(text) and len(text.strip()) >= current_app.config["ATS_MIN_RESUME_CHARS"]


def resolve_resume_text(candidate: Candidate) -> str:
    """Cached resume text when usable, otherwise fetch and extract the stored resume."""
    if has_enough_text(candidate.resume_text):
        return candidate.resume_text
    if not candidate.resume_url:
        return candidate.resume_text or ""

    try:
        data = load_resume(candidate.resume_url)
    except StorageError as e:
        logger.warning("Could not load resume for candidate %s: %s", candidate.id, e)
        return candidate.resume_text or ""

    text = extract_text(data, infer_content_format(candidate.resume_url))
    logger.info("Extracted %d chars of resume text for candidate %s", len(text), candidate.id)
    if text:
        candidate.resume_text = text
    return text or candidate.resume_text or ""


def apply_evaluation(candidate: Candidate, result: AtsResult):
    candidate.ats_evaluated_at = datetime.utcnow()
    candidate.ats_total_score = result.total_score
    candidate.ats_decision = result.decision
    candidate.ats_breakdown = dict(result.breakdown)
    candidate.ats_explanation = result.explanation
    candidate.ats_strengths = list(result.strengths)
    candidate.ats_gaps = list(result.gaps)
    candidate.ats_recommended_stage = result.recommended_stage


def evaluate_candidate(candidate_id) -> Optional[AtsResult]:
    """
    Score one candidate and persist the evaluation record.

    Re-reads the candidate before writing so a stage change made in the
    meantime is not overwritten. Failures are logged and leave the candidate
    without an evaluation; nothing is raised for oracle problems.
    """
    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        logger.warning("Candidate %s disappeared before evaluation", candidate_id)
        return None

    job = databases.get_job_by_id(candidate.job_id)
    if job is None:
        logger.warning("Job %s not found for candidate %s", candidate.job_id, candidate_id)
        return None

    resume_text = resolve_resume_text(candidate)
    # persist any freshly extracted text; also expires the candidate so it is re-read below
    db.session.commit()
    if not has_enough_text(resume_text):
        logger.warning(
            "Resume text insufficient for candidate %s - length: %d",
            candidate_id, len((resume_text or "").strip()),
        )
        return None

    result = ats_scoring.score_resume(resume_text, job)
    if result is None:
        return None

    apply_evaluation(candidate, result)
    db.session.commit()
    logger.info("ATS scoring completed for %s - score: %s", candidate_id, result.total_score)
    return result


def _is_advance(pipeline, current, target):
    """True only for a forward move between two stages of the pipeline; Rejected is last."""
    if current not in pipeline or target not in pipeline:
        return False
    return pipeline.index(target) > pipeline.index(current)


def rescore_candidate(candidate_id):
    """
    On-demand re-evaluation. Unlike intake, this fails loudly: the score is
    the whole point of the request. A qualifying score advances the stage
    according to ATS_STAGE_THRESHOLDS, forward only and within the job's
    own pipeline.
    """
    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    job = databases.get_job_by_id(candidate.job_id)
    if job is None:
        raise NotFoundError("Related job not found")
    if not ats_scoring.is_configured():
        raise ApiError("ATS_API_KEY not configured", 503)

    resume_text = resolve_resume_text(candidate)
    if not has_enough_text(resume_text):
        db.session.commit()
        raise ApiError("Insufficient resume text to score this candidate", 422)

    result = ats_scoring.score_resume(resume_text, job)
    if result is None:
        raise UpstreamError("ATS scoring failed")

    apply_evaluation(candidate, result)

    thresholds = ats_scoring.parse_stage_thresholds(current_app.config["ATS_STAGE_THRESHOLDS"])
    pipeline = valid_stages_for(job)
    previous = candidate.stage
    # only the job's own stages between Applied and Rejected can be reached by score
    next_stage = ats_scoring.stage_for_score(
        result.total_score, thresholds, result.recommended_stage, stages=pipeline[1:-1],
    )
    moved = next_stage is not None and _is_advance(pipeline, previous, next_stage)
    if moved:
        candidate.stage = next_stage
        candidate.record_transition(previous, next_stage, actor=ATS_ACTOR)

    db.session.commit()
    if moved:
        databases.record_pipeline_log(candidate.id, previous, next_stage)
        logger.info("ATS moved candidate %s from %s to %s", candidate.id, previous, next_stage)
    return candidate, result


def find_unscored_candidate_ids():
    candidates = (
        Candidate.query.filter(Candidate.ats_total_score.is_(None))
        .filter(db.or_(Candidate.resume_url.isnot(None), Candidate.resume_text.isnot(None)))
        .order_by(Candidate.created_at)
        .all()
    )
    return [c.id for c in candidates]


def score_candidates(candidate_ids):
    """Sequentially score candidates. Counters are logged and then discarded."""
    results = {"total": len(candidate_ids), "success": 0, "failed": 0}
    for candidate_id in candidate_ids:
        try:
            if evaluate_candidate(candidate_id) is not None:
                results["success"] += 1
            else:
                results["failed"] += 1
        except Exception as e:
            db.session.rollback()
            logger.error("Error scoring candidate %s: %s", candidate_id, e)
            results["failed"] += 1
    logger.info("Batch scoring complete. Success: %d, Failed: %d", results["success"], results["failed"])
    return results

