from sqlalchemy import func

from hiretrack.extensions import db
from hiretrack.models import Candidate, Job, PipelineLog

RECENT_ACTIVITY_LIMIT = 10


def _activity_message(log, candidate, job):
    if candidate is None:
        return f"Candidate moved from {log.old_stage} to {log.new_stage}"
    if not log.old_stage:
        if job is not None:
            return f"{candidate.name} applied for {job.title}"
        return f"{candidate.name} applied"
    message = f"{candidate.name} moved from {log.old_stage} to {log.new_stage}"
    if job is not None:
        message += f" ({job.title})"
    return message


def get_dashboard_stats():
    """Counts and recent activity, recomputed on every call."""
    total_jobs = db.session.query(func.count(Job.id)).scalar()
    open_jobs = db.session.query(func.count(Job.id)).filter(Job.status == "open").scalar()
    total_candidates = db.session.query(func.count(Candidate.id)).scalar()

    stage_rows = db.session.query(Candidate.stage, func.count(Candidate.id)).group_by(Candidate.stage).all()
    stage_map = {stage: count for stage, count in stage_rows}

    recent_logs = PipelineLog.query.order_by(PipelineLog.time.desc()).limit(RECENT_ACTIVITY_LIMIT).all()
    recent_activity = []
    for log in recent_logs:
        candidate = db.session.get(Candidate, log.candidate_id)
        job = db.session.get(Job, candidate.job_id) if candidate is not None else None
        recent_activity.append({
            "id": log.id,
            "candidateId": log.candidate_id,
            "message": _activity_message(log, candidate, job),
            "time": log.time.isoformat() if log.time else None,
        })

    return {
        "totalJobs": total_jobs,
        "openJobs": open_jobs,
        "totalCandidates": total_candidates,
        "stageMap": stage_map,
        "recentActivity": recent_activity,
    }
