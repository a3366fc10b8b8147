import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hiretrack.models import INITIAL_STAGE, REJECTED_STAGE

ATS_DECISIONS = ("Recommended", "Maybe", "Rejected")
BREAKDOWN_KEYS = ("skill_match", "experience_match", "education_match", "keyword_match")
RECOMMENDED_STAGES = ("Applied", "Screening", "Interview", "Offer")


def _clean_string_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple)):
        raise ValueError("must be a list of strings")
    return [str(item).strip() for item in value if str(item).strip()]


def _validate_pipeline(stages):
    if stages is None:
        return None
    cleaned = []
    for stage in stages:
        name = str(stage).strip()
        if not name:
            raise ValueError("pipeline stage names must not be blank")
        if name in (INITIAL_STAGE, REJECTED_STAGE):
            raise ValueError(f"'{name}' is implicit and cannot be a configured pipeline stage")
        if name in cleaned:
            raise ValueError(f"duplicate pipeline stage '{name}'")
        cleaned.append(name)
    return cleaned


# Job posting payloads
class JobIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    department: str = "General"
    location: str = "Remote"
    employment_type: str = Field(default="Full-time", alias="type")
    skills: List[str] = []
    requirements: List[str] = []
    status: str = "open"
    posted_date: Optional[datetime] = Field(default=None, alias="postedDate")
    pipeline_stages: Optional[List[str]] = Field(default=None, alias="pipelineStages")

    @field_validator("skills", "requirements", mode="before")
    @classmethod
    def _lists(cls, value):
        return _clean_string_list(value)

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value):
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("status")
    @classmethod
    def _known_status(cls, value):
        if value not in ("open", "closed"):
            raise ValueError("status must be 'open' or 'closed'")
        return value

    @field_validator("pipeline_stages")
    @classmethod
    def _pipeline(cls, value):
        return _validate_pipeline(value)


class JobUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = Field(default=None, alias="type")
    skills: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    status: Optional[str] = None
    posted_date: Optional[datetime] = Field(default=None, alias="postedDate")
    pipeline_stages: Optional[List[str]] = Field(default=None, alias="pipelineStages")

    @field_validator("skills", "requirements", mode="before")
    @classmethod
    def _lists(cls, value):
        return None if value is None else _clean_string_list(value)

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value.strip() if value is not None else value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value):
        if value is not None and value not in ("open", "closed"):
            raise ValueError("status must be 'open' or 'closed'")
        return value

    @field_validator("pipeline_stages")
    @classmethod
    def _pipeline(cls, value):
        return _validate_pipeline(value)


# Application intake
class ApplicationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_id: Optional[str] = Field(default=None, alias="jobId")
    cover_note: Optional[str] = Field(default=None, alias="coverNote")
    resume_url: Optional[str] = Field(default=None, alias="resumeUrl")

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def missing_fields(self):
        required = ("name", "email", "phone", "job_id", "cover_note")
        return [field for field in required if not getattr(self, field)]


# Admin actions
class MoveStageIn(BaseModel):
    to: Optional[str] = None


class AtsPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_score: Optional[float] = Field(default=None, alias="totalScore")
    decision: Optional[str] = None
    breakdown: Optional[Dict[str, Any]] = None
    explanation: Optional[str] = None


class OverrideIn(BaseModel):
    decision: Optional[str] = None
    reason: Optional[str] = None
    stage: Optional[str] = None
    ats: Optional[AtsPatch] = None


class ScoreRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    candidate_id: Optional[str] = Field(default=None, alias="candidateId")


# Normalized ATS oracle output
def clamp_score(value) -> int:
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("score must be a finite number")
    return max(0, min(100, int(round(number))))


def decision_for_score(score: int) -> str:
    if score >= 75:
        return "Recommended"
    if score >= 50:
        return "Maybe"
    return "Rejected"


class AtsResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_score: int = Field(alias="totalScore")
    decision: str = Field(default="", validate_default=True)
    breakdown: Dict[str, int] = Field(default_factory=dict, validate_default=True)
    explanation: str = ""
    strengths: List[str] = []
    gaps: List[str] = []
    recommended_stage: Optional[str] = Field(default=None, alias="recommendedStage")

    @field_validator("total_score", mode="before")
    @classmethod
    def _clamp_total(cls, value):
        return clamp_score(value)

    @field_validator("breakdown", mode="before")
    @classmethod
    def _clamp_breakdown(cls, value):
        value = value if isinstance(value, dict) else {}
        breakdown = {}
        for key in BREAKDOWN_KEYS:
            try:
                breakdown[key] = clamp_score(value.get(key, 0))
            except (TypeError, ValueError, OverflowError):
                breakdown[key] = 0
        return breakdown

    @field_validator("explanation", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)

    @field_validator("strengths", "gaps", mode="before")
    @classmethod
    def _capped_list(cls, value):
        if not isinstance(value, list):
            return []
        return [str(item) for item in value][:25]

    @field_validator("recommended_stage", mode="before")
    @classmethod
    def _known_stage(cls, value):
        return value if value in RECOMMENDED_STAGES else None

    @field_validator("decision", mode="after")
    @classmethod
    def _known_decision(cls, value, info):
        for label in ATS_DECISIONS:
            if str(value).strip().lower() == label.lower():
                return label
        score = info.data.get("total_score")
        return decision_for_score(score if score is not None else 0)

    @field_validator("decision", mode="before")
    @classmethod
    def _decision_text(cls, value):
        return "" if value is None else str(value)
