from hiretrack.extensions import db
from datetime import datetime
import uuid


class PipelineLog(db.Model):
    """Dashboard activity record. References a candidate by id without owning it."""

    __tablename__ = "pipeline_logs"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    candidate_id = db.Column(db.String(36), nullable=False, index=True)
    old_stage = db.Column(db.String(100), nullable=False, default="")
    new_stage = db.Column(db.String(100), nullable=False)
    time = db.Column(db.DateTime, default=datetime.utcnow, index=True)
