# filename: ats_scoring.py
# location: hiretrack/services/

import json
import logging
import re
from typing import Dict, List, Optional

from flask import current_app
from openai import OpenAI
from pydantic import ValidationError

from hiretrack.schemas import AtsResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an ATS (Applicant Tracking System) that evaluates resumes against job descriptions. Return ONLY a JSON object with:
{
  "totalScore": <number 0-100>,
  "decision": "Recommended" | "Maybe" | "Rejected",
  "breakdown": {
    "skill_match": <number 0-100>,
    "experience_match": <number 0-100>,
    "education_match": <number 0-100>,
    "keyword_match": <number 0-100>
  },
  "explanation": "<brief explanation>",
  "strengths": ["concrete skill or experience matches"],
  "gaps": ["missing key requirements or skills"],
  "recommendedStage": "Applied" | "Screening" | "Interview" | "Offer"
}
Weight the total as skill 40%, experience 30%, education 20%, keyword 10%."""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def is_configured() -> bool:
    return bool(current_app.config.get("ATS_API_KEY"))


def build_prompt(resume_text: str, job) -> str:
    limit = current_app.config["ATS_RESUME_CHAR_LIMIT"]
    excerpt = resume_text[:limit] if resume_text else "NO_EXTRACTED_TEXT"
    skills = ", ".join(job.skills_json or []) or "N/A"
    requirements = ", ".join(job.requirements_json or []) or "N/A"
    return (
        f"Job Title: {job.title}\n"
        f"Description: {job.description}\n"
        f"Skills: {skills}\n"
        f"Requirements: {requirements}\n"
        f"\n"
        f"Resume Text:\n"
        f"{excerpt}\n"
        f"\n"
        f"Evaluate this resume."
    )


def request_completion(system_prompt: str, user_prompt: str) -> str:
    """Send one chat completion request and return the raw reply text. No retries."""
    client = OpenAI(
        api_key=current_app.config["ATS_API_KEY"],
        base_url=current_app.config["ATS_API_BASE"],
        timeout=current_app.config["ATS_TIMEOUT"],
        max_retries=0,
    )
    completion = client.chat.completions.create(
        model=current_app.config["ATS_MODEL"],
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        temperature=0.3,
        max_tokens=500,
        response_format={"type": "json_object"},
    )
    return completion.choices[0].message.content or ""


def parse_reply(raw: str) -> Optional[dict]:
    """Parse the oracle reply, tolerating prose around the JSON object."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Initial JSON parse failed, attempting extraction")
        match = _JSON_OBJECT.search(raw)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            logger.error("Failed to parse extracted JSON from oracle reply")
            return None
    return parsed if isinstance(parsed, dict) else None


def normalize(parsed: Optional[dict]) -> Optional[AtsResult]:
    if not parsed or "totalScore" not in parsed:
        return None
    try:
        return AtsResult.model_validate(parsed)
    except ValidationError as e:
        logger.error("Oracle reply has an invalid shape: %s", e)
        return None


def score_resume(resume_text: str, job) -> Optional[AtsResult]:
    """
    Score a resume against a job with the external LLM.

    Returns None (never raises) when the credential is unset, the call fails
    or times out, or the reply cannot be coerced into an AtsResult.
    """
    if not is_configured():
        logger.warning("ATS_API_KEY not set, skipping ATS scoring")
        return None

    try:
        logger.info("Calling ATS oracle for job '%s'", job.title)
        raw = request_completion(SYSTEM_PROMPT, build_prompt(resume_text, job))
    except Exception as e:
        logger.error("ATS oracle request failed: %s", e)
        return None

    result = normalize(parse_reply(raw))
    if result is None:
        logger.error("ATS parsing failed - invalid structure. Received: %s", (raw or "")[:200])
        return None

    logger.info("ATS scoring successful - score=%s decision=%s", result.total_score, result.decision)
    return result


# ==================== STAGE THRESHOLDS ====================

def parse_stage_thresholds(raw: str) -> Dict[str, int]:
    """Parse 'Screening:60,Interview:75,Offer:90' into {stage: minimum score}."""
    thresholds = {}
    for pair in (raw or "").split(","):
        if not pair.strip():
            continue
        stage, sep, value = pair.partition(":")
        try:
            if not sep or not stage.strip():
                raise ValueError(pair)
            thresholds[stage.strip()] = int(value.strip())
        except ValueError:
            logger.warning("Ignoring malformed stage threshold '%s'", pair.strip())
    return thresholds


def stage_for_score(
    score: int,
    thresholds: Dict[str, int],
    recommended_stage: Optional[str] = None,
    stages: Optional[List[str]] = None,
) -> Optional[str]:
    """
    Stage a score qualifies for, or None when it qualifies for none.

    When `stages` is given only those names are eligible; a recommended stage
    outside them is ignored and the thresholds decide.
    """
    if stages is not None:
        thresholds = {stage: minimum for stage, minimum in thresholds.items() if stage in stages}
        if recommended_stage not in stages:
            recommended_stage = None

    if recommended_stage:
        return recommended_stage if score >= thresholds.get(recommended_stage, 0) else None

    best = None
    for stage, minimum in sorted(thresholds.items(), key=lambda item: item[1]):
        if score >= minimum:
            best = stage
    return best
