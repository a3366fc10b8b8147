import logging

from flask import Blueprint, request, jsonify, redirect, send_file

from hiretrack import databases
from hiretrack.errors import ApiError, NotFoundError, ValidationError
from hiretrack.schemas import ApplicationIn
from hiretrack.services.intake import ApplicationService
from hiretrack.services.resume_storage import StorageError, is_allowed_mimetype, save_resume, stored_resume_path

logger = logging.getLogger(__name__)

apply_bp = Blueprint("apply_api", __name__)


@apply_bp.route("/api/apply", methods=["POST"])
def submit_application():
    """
    Public application endpoint. Accepts either multipart/form-data with a
    'resume' file, or JSON carrying a pre-uploaded 'resumeUrl'.
    """
    content_type = request.content_type or ""
    logger.info("Apply endpoint hit (Content-Type: %s)", content_type)

    if content_type.startswith("multipart/form-data"):
        payload = ApplicationIn.model_validate(request.form.to_dict())
        upload = request.files.get("resume")
        if upload is None or not upload.filename:
            raise ValidationError("Resume is required")
        candidate = ApplicationService.submit(payload, upload=upload)
    elif request.is_json:
        payload = ApplicationIn.model_validate(request.get_json(silent=True) or {})
        candidate = ApplicationService.submit(payload)
    else:
        raise ValidationError("Invalid content type. Expected multipart/form-data or application/json.")

    return jsonify({
        "message": "Application submitted successfully",
        "candidateId": candidate.id,
    }), 201


@apply_bp.route("/api/upload-resume", methods=["POST"])
def upload_resume():
    """
    Store a resume ahead of applying. The returned resumeUrl is what a JSON
    application sends as its pre-uploaded reference.
    """
    upload = request.files.get("resume")
    if upload is None or not upload.filename:
        raise ValidationError("Resume is required")
    if not is_allowed_mimetype(upload.mimetype):
        raise ValidationError("Invalid file type. Only PDF, DOCX, and TXT files are allowed.")
    data = upload.read()
    if not data:
        raise ValidationError("Resume is required")

    try:
        reference = save_resume(data, upload.filename)
    except StorageError as e:
        logger.error("Resume pre-upload failed: %s", e)
        raise ApiError("Failed to store resume", 500)

    return jsonify({"resumeUrl": reference, "filename": upload.filename}), 201


@apply_bp.route("/api/resume/<candidate_id>", methods=["GET"])
def download_resume(candidate_id):
    candidate = databases.get_candidate_by_id(candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    if not candidate.resume_url:
        raise NotFoundError("Resume not found")
    return redirect(candidate.resume_url)


@apply_bp.route("/uploads/resumes/<name>", methods=["GET"])
def stored_resume(name):
    path = stored_resume_path(name)
    if path is None:
        raise NotFoundError("Resume not found")
    return send_file(path)
