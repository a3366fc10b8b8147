import logging

from flask import current_app

from hiretrack import databases, tasks
from hiretrack.errors import NotFoundError, ValidationError
from hiretrack.extensions import db
from hiretrack.models import Candidate, INITIAL_STAGE
from hiretrack.schemas import ApplicationIn
from hiretrack.services.cv_parser import extract_text
from hiretrack.services.evaluation import evaluate_candidate
from hiretrack.services.resume_storage import infer_content_format, is_allowed_mimetype

logger = logging.getLogger(__name__)


class ApplicationService:
    """
    Application intake for both entry paths:

    - multipart upload: text is extracted from the uploaded buffer, the
      candidate is created first and the resume is stored by a Celery task;
    - JSON with a pre-uploaded resume reference: the resume is fetched from
      the reference when it is scored.

    Scoring runs before the response (ATS_SCORING_MODE=sync) or as a
    Celery task (ATS_SCORING_MODE=background). Scoring problems never fail
    the application.
    """

    @staticmethod
    def submit(payload: ApplicationIn, upload=None) -> Candidate:
        if upload is None and not payload.resume_url:
            raise ValidationError("Resume is required")
        if payload.missing_fields():
            raise ValidationError("Missing required fields")

        resume_bytes = None
        resume_text = None
        if upload is not None:
            if not is_allowed_mimetype(upload.mimetype):
                raise ValidationError("Invalid file type. Only PDF, DOCX, and TXT files are allowed.")
            resume_bytes = upload.read()
            if not resume_bytes:
                raise ValidationError("Resume is required")

        job = databases.get_job_by_id(payload.job_id)
        if job is None:
            raise NotFoundError("Job not found")

        if resume_bytes is not None:
            content_format = infer_content_format(upload.filename, upload.mimetype)
            resume_text = extract_text(resume_bytes, content_format)
            logger.info("Extracted resume text length: %d chars", len(resume_text))

        candidate = Candidate(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            job_id=job.id,
            cover_note=payload.cover_note,
            resume_url=payload.resume_url if upload is None else None,
            resume_text=resume_text or None,
            stage=INITIAL_STAGE,
        )
        candidate.record_transition("", INITIAL_STAGE)
        db.session.add(candidate)
        db.session.commit()
        logger.info("Candidate saved successfully: %s", candidate.id)

        databases.record_pipeline_log(candidate.id, "", INITIAL_STAGE)

        if resume_bytes is not None:
            tasks.queue_resume_upload(candidate.id, resume_bytes, upload.filename)

        ApplicationService._schedule_scoring(candidate.id)
        return candidate

    @staticmethod
    def _schedule_scoring(candidate_id):
        if current_app.config["ATS_SCORING_MODE"] == "background":
            tasks.evaluate_candidate.delay(candidate_id)
            return

        try:
            evaluate_candidate(candidate_id)
        except Exception as e:
            # the application itself is already saved
            db.session.rollback()
            logger.error("ATS scoring failed for %s: %s", candidate_id, e, exc_info=True)

