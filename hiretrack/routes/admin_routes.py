import logging

from flask import Blueprint, request, jsonify

from hiretrack import databases, tasks
from hiretrack.errors import NotFoundError, ValidationError
from hiretrack.extensions import db
from hiretrack.models import Job
from hiretrack.schemas import OverrideIn, ScoreRequest
from hiretrack.services import evaluation
from hiretrack.services.auth import admin_required
from hiretrack.services.pipeline import override_candidate

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin_api", __name__)


@admin_bp.route("/api/candidates", methods=["GET"])
@admin_required
def list_candidates():
    return jsonify([databases.candidate_to_dict(c) for c in databases.get_candidates()])


@admin_bp.route("/api/candidates/<job_id>", methods=["GET"])
@admin_required
def list_candidates_for_job(job_id):
    return jsonify([databases.candidate_to_dict(c) for c in databases.get_candidates(job_id)])


@admin_bp.route("/api/candidates/<candidate_id>", methods=["DELETE"])
@admin_required
def delete_candidate(candidate_id):
    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    # pipeline logs only reference the candidate and are kept
    db.session.delete(candidate)
    db.session.commit()
    logger.info("Candidate deleted: %s", candidate_id)
    return jsonify({"message": "Candidate deleted", "id": candidate_id})


@admin_bp.route("/api/admin/candidates", methods=["GET"])
@admin_required
def list_candidates_with_jobs():
    """All candidates joined with the title of their job (null when the job is gone)."""
    candidates = databases.get_candidates()
    job_ids = {c.job_id for c in candidates if c.job_id}
    jobs = Job.query.filter(Job.id.in_(job_ids)).all() if job_ids else []
    job_map = {j.id: {"id": j.id, "title": j.title} for j in jobs}

    result = []
    for c in candidates:
        data = databases.candidate_to_dict(c, include_resume_text=False)
        data["job"] = job_map.get(c.job_id)
        result.append(data)
    return jsonify(result)


@admin_bp.route("/api/admin/candidates/<candidate_id>/override", methods=["PATCH"])
@admin_required
def override(candidate_id):
    payload = OverrideIn.model_validate(request.get_json(silent=True) or {})
    candidate = override_candidate(candidate_id, payload)
    return jsonify({"ok": True, "candidate": databases.candidate_to_dict(candidate)})


@admin_bp.route("/api/admin/candidates/score-all", methods=["POST"])
@admin_required
def score_all():
    found = tasks.start_batch_scoring()
    return jsonify({
        "message": "ATS scoring initiated in background",
        "candidatesFound": found,
    })


@admin_bp.route("/api/ats/score", methods=["POST"])
@admin_required
def score_candidate():
    payload = ScoreRequest.model_validate(request.get_json(silent=True) or {})
    if not payload.candidate_id:
        raise ValidationError("candidateId is required")

    candidate, result = evaluation.rescore_candidate(payload.candidate_id)
    return jsonify({
        "ok": True,
        "candidate": databases.candidate_to_dict(candidate),
        "scoring": result.model_dump(by_alias=True),
    })
