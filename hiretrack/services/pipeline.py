"""Stage transitions and the admin override escape hatch."""
import logging
from datetime import datetime

from hiretrack import databases
from hiretrack.errors import NotFoundError, ValidationError
from hiretrack.extensions import db
from hiretrack.models import Candidate, DEFAULT_PIPELINE_STAGES, INITIAL_STAGE, REJECTED_STAGE
from hiretrack.schemas import BREAKDOWN_KEYS, OverrideIn, clamp_score

logger = logging.getLogger(__name__)

ADMIN_ACTOR = "Admin"
OVERRIDE_ACTOR = "Admin Override"

# override decision that keeps a candidate in the process; any other label rejects
OVERRIDE_CONTINUE_STAGE = "Screening"


def valid_stages_for(job):
    stages = job.pipeline_stages if job is not None and job.pipeline_stages is not None else DEFAULT_PIPELINE_STAGES
    return [INITIAL_STAGE, *stages, REJECTED_STAGE]


def _get_candidate(candidate_id) -> Candidate:
    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    return candidate


def move_stage(candidate_id, to_stage) -> Candidate:
    """
    Validated transition. The target must be Applied, one of the job's
    configured stages, or Rejected; the order of stages is advisory and any
    valid stage may be reached from any other.
    """
    if not to_stage:
        raise ValidationError('Target stage "to" is required')

    candidate = _get_candidate(candidate_id)
    job = databases.get_job_by_id(candidate.job_id)
    valid = valid_stages_for(job)
    if to_stage not in valid:
        raise ValidationError(f"Invalid stage: {to_stage}. Valid stages for this job: {', '.join(valid)}")

    previous = candidate.stage
    if previous == to_stage:
        return candidate

    candidate.stage = to_stage
    candidate.record_transition(previous, to_stage, actor=ADMIN_ACTOR)
    db.session.commit()
    logger.info("Candidate %s moved from %s to %s", candidate.id, previous, to_stage)

    databases.record_pipeline_log(candidate.id, previous, to_stage)
    return candidate


def _override_stage(candidate: Candidate, to_stage, transitions):
    previous = candidate.stage
    if previous == to_stage:
        return
    candidate.stage = to_stage
    candidate.record_transition(previous, to_stage, actor=OVERRIDE_ACTOR)
    transitions.append((previous, to_stage))


def _patch_evaluation(candidate: Candidate, patch):
    if patch.total_score is not None:
        try:
            candidate.ats_total_score = clamp_score(patch.total_score)
        except ValueError:
            raise ValidationError("ats.totalScore must be a finite number")
    if patch.decision is not None:
        candidate.ats_decision = patch.decision
    if patch.breakdown is not None:
        breakdown = dict(candidate.ats_breakdown or {})
        for key in BREAKDOWN_KEYS:
            if key in patch.breakdown:
                try:
                    breakdown[key] = clamp_score(patch.breakdown[key])
                except (TypeError, ValueError):
                    raise ValidationError(f"ats.breakdown.{key} must be a number")
        candidate.ats_breakdown = breakdown
    if patch.explanation is not None:
        candidate.ats_explanation = patch.explanation
    candidate.ats_evaluated_at = datetime.utcnow()


def override_candidate(candidate_id, payload: OverrideIn) -> Candidate:
    """
    Human correction of the evaluation and/or stage.

    Deliberately skips the stage validation of move_stage: an admin may put a
    candidate in any stage, and every resulting stage change is recorded with
    the "Admin Override" actor.
    """
    candidate = _get_candidate(candidate_id)
    transitions = []

    if payload.decision:
        candidate.ats_decision = payload.decision
        candidate.ats_evaluated_at = datetime.utcnow()
        if payload.reason:
            candidate.ats_explanation = f"Manual override: {payload.reason}"
        elif not candidate.ats_explanation:
            candidate.ats_explanation = "Manual override"
        next_stage = OVERRIDE_CONTINUE_STAGE if payload.decision == OVERRIDE_CONTINUE_STAGE else REJECTED_STAGE
        _override_stage(candidate, next_stage, transitions)

    if payload.ats is not None:
        _patch_evaluation(candidate, payload.ats)

    if payload.stage:
        _override_stage(candidate, payload.stage, transitions)

    db.session.commit()
    for previous, new_stage in transitions:
        logger.info("Override moved candidate %s from %s to %s", candidate.id, previous, new_stage)
        databases.record_pipeline_log(candidate.id, previous, new_stage)
    return candidate
