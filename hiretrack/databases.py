import logging

from hiretrack.extensions import db
from hiretrack.models import Job, Candidate, PipelineLog

logger = logging.getLogger(__name__)


def _iso(value):
    return value.isoformat() if value else None


def get_job_by_id(job_id):
    """Return the Job object, or None for unknown ids."""
    if not job_id:
        return None
    return db.session.get(Job, job_id)


def get_candidate_by_id(candidate_id):
    if not candidate_id:
        return None
    return db.session.get(Candidate, candidate_id)


def get_all_jobs():
    jobs = Job.query.order_by(Job.posted_date.desc()).all()
    return [job_to_dict(j) for j in jobs]


def get_candidates(job_id=None):
    """All candidates (optionally for one job), newest first."""
    query = Candidate.query
    if job_id:
        query = query.filter_by(job_id=job_id)
    return query.order_by(Candidate.created_at.desc()).all()


def get_pipeline_logs(candidate_id):
    logs = (
        PipelineLog.query.filter_by(candidate_id=candidate_id)
        .order_by(PipelineLog.time.desc())
        .all()
    )
    return [pipeline_log_to_dict(log) for log in logs]


def record_pipeline_log(candidate_id, old_stage, new_stage):
    """
    Write one PipelineLog entry in its own commit.

    Best-effort: a failure is logged and swallowed so the transition that
    triggered it still stands.
    """
    try:
        log = PipelineLog(candidate_id=str(candidate_id), old_stage=old_stage or "", new_stage=new_stage)
        db.session.add(log)
        db.session.commit()
        return log
    except Exception as e:
        db.session.rollback()
        logger.warning("PipelineLog create failed: %s", e)
        return None


# ==================== HELPER FUNCTIONS ====================

def job_to_dict(job: Job):
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "department": job.department,
        "location": job.location,
        "type": job.employment_type,
        "skills": job.skills_json or [],
        "requirements": job.requirements_json or [],
        "postedDate": _iso(job.posted_date),
        "status": job.status,
        "pipelineStages": list(job.pipeline_stages or []),
        "createdAt": _iso(job.created_at),
        "updatedAt": _iso(job.updated_at),
    }


def ats_to_dict(c: Candidate):
    # an unevaluated candidate has no record at all, never a zero score
    if c.ats_evaluated_at is None and c.ats_decision is None and c.ats_total_score is None:
        return None
    return {
        "evaluatedAt": _iso(c.ats_evaluated_at),
        "totalScore": c.ats_total_score,
        "decision": c.ats_decision,
        "breakdown": c.ats_breakdown,
        "explanation": c.ats_explanation,
        "strengths": c.ats_strengths or [],
        "gaps": c.ats_gaps or [],
        "recommendedStage": c.ats_recommended_stage,
    }


def candidate_to_dict(c: Candidate, include_resume_text=True):
    data = {
        "id": c.id,
        "name": c.name,
        "email": c.email,
        "phone": c.phone,
        "resumeUrl": c.resume_url,
        "jobId": c.job_id,
        "stage": c.stage,
        "coverNote": c.cover_note,
        "ats": ats_to_dict(c),
        "history": [
            {
                "from": h.from_stage,
                "to": h.to_stage,
                "time": _iso(h.time),
                "by": h.actor,
            }
            for h in c.history
        ],
        "createdAt": _iso(c.created_at),
        "updatedAt": _iso(c.updated_at),
    }
    if include_resume_text:
        data["resumeText"] = c.resume_text
    return data


def pipeline_log_to_dict(log: PipelineLog):
    return {
        "id": log.id,
        "candidateId": log.candidate_id,
        "oldStage": log.old_stage,
        "newStage": log.new_stage,
        "time": _iso(log.time),
    }
