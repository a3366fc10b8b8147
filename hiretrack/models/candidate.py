from hiretrack.extensions import db
from datetime import datetime
import uuid

INITIAL_STAGE = "Applied"
REJECTED_STAGE = "Rejected"


class Candidate(db.Model):
    __tablename__ = "candidates"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # plain reference: deleting a job leaves its candidates in place
    job_id = db.Column(db.String(36), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=False)
    resume_url = db.Column(db.String(1024))
    stage = db.Column(db.String(100), default=INITIAL_STAGE, nullable=False)
    cover_note = db.Column(db.Text, nullable=False)
    resume_text = db.Column(db.Text, nullable=True)

    # evaluation record, all empty until the ATS oracle has scored the resume
    ats_evaluated_at = db.Column(db.DateTime, nullable=True)
    ats_total_score = db.Column(db.Integer, nullable=True)
    ats_decision = db.Column(db.String(50), nullable=True)
    ats_breakdown = db.Column(db.JSON, nullable=True)
    ats_explanation = db.Column(db.Text, nullable=True)
    ats_strengths = db.Column(db.JSON, nullable=True)
    ats_gaps = db.Column(db.JSON, nullable=True)
    ats_recommended_stage = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    history = db.relationship(
        "StageHistory",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="StageHistory.id",
    )

    def record_transition(self, from_stage, to_stage, actor=None):
        """Append one entry to the stage history. Entries are never edited."""
        entry = StageHistory(from_stage=from_stage or "", to_stage=to_stage, actor=actor, time=datetime.utcnow())
        self.history.append(entry)
        return entry

    def __repr__(self):
        return f"<Candidate {self.email} stage={self.stage}>"


class StageHistory(db.Model):
    __tablename__ = "candidate_history"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    candidate_id = db.Column(db.String(36), db.ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False)
    from_stage = db.Column(db.String(100), nullable=False, default="")
    to_stage = db.Column(db.String(100), nullable=False)
    time = db.Column(db.DateTime, default=datetime.utcnow)
    actor = db.Column(db.String(100), nullable=True)

    candidate = db.relationship("Candidate", back_populates="history")
