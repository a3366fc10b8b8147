from hiretrack.extensions import db
from datetime import datetime
import uuid

# "Applied" is implicit and never stored in a job's pipeline
DEFAULT_PIPELINE_STAGES = ["Screening", "Interview", "Offer"]


class Job(db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    department = db.Column(db.String(255), default="General")
    location = db.Column(db.String(255), default="Remote")
    employment_type = db.Column(db.String(100), default="Full-time")
    skills_json = db.Column(db.JSON, default=list)
    requirements_json = db.Column(db.JSON, default=list)
    posted_date = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.Enum("open", "closed", name="job_status"), default="open", nullable=False)
    pipeline_stages = db.Column(db.JSON, default=lambda: list(DEFAULT_PIPELINE_STAGES))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Job {self.title}>"
