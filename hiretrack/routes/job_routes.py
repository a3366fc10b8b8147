import logging

from flask import Blueprint, request, jsonify

from hiretrack import databases
from hiretrack.errors import NotFoundError
from hiretrack.extensions import db
from hiretrack.models import Job, DEFAULT_PIPELINE_STAGES
from hiretrack.schemas import JobIn, JobUpdate
from hiretrack.services.auth import admin_required

logger = logging.getLogger(__name__)

jobs_bp = Blueprint("jobs_api", __name__, url_prefix="/api/jobs")

# payload field -> Job column
_JOB_FIELDS = {
    "title": "title",
    "description": "description",
    "department": "department",
    "location": "location",
    "employment_type": "employment_type",
    "skills": "skills_json",
    "requirements": "requirements_json",
    "status": "status",
    "posted_date": "posted_date",
    "pipeline_stages": "pipeline_stages",
}


def _get_job_or_404(job_id):
    job = databases.get_job_by_id(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return job


@jobs_bp.route("", methods=["GET"])
def get_jobs_list():
    """Public job board, newest posting first."""
    return jsonify(databases.get_all_jobs())


@jobs_bp.route("/<job_id>", methods=["GET"])
def get_job(job_id):
    return jsonify(databases.job_to_dict(_get_job_or_404(job_id)))


@jobs_bp.route("", methods=["POST"])
@admin_required
def create_job():
    payload = JobIn.model_validate(request.get_json(silent=True) or {})

    job = Job(
        title=payload.title,
        description=payload.description,
        department=payload.department,
        location=payload.location,
        employment_type=payload.employment_type,
        skills_json=payload.skills,
        requirements_json=payload.requirements,
        status=payload.status,
        pipeline_stages=(
            payload.pipeline_stages if payload.pipeline_stages is not None else list(DEFAULT_PIPELINE_STAGES)
        ),
    )
    if payload.posted_date is not None:
        job.posted_date = payload.posted_date

    db.session.add(job)
    db.session.commit()
    logger.info("Job created: %s (%s)", job.title, job.id)
    return jsonify(databases.job_to_dict(job)), 201


@jobs_bp.route("/<job_id>", methods=["PUT"])
@admin_required
def update_job(job_id):
    job = _get_job_or_404(job_id)
    payload = JobUpdate.model_validate(request.get_json(silent=True) or {})

    for field in payload.model_fields_set:
        value = getattr(payload, field)
        if value is None:
            continue
        setattr(job, _JOB_FIELDS[field], value)

    db.session.commit()
    logger.info("Job updated: %s", job.id)
    return jsonify(databases.job_to_dict(job))


@jobs_bp.route("/<job_id>", methods=["DELETE"])
@admin_required
def delete_job(job_id):
    job = _get_job_or_404(job_id)
    # candidates keep their (now dangling) job reference
    db.session.delete(job)
    db.session.commit()
    logger.info("Job deleted: %s", job_id)
    return jsonify({"message": "Job deleted successfully", "id": job_id})
