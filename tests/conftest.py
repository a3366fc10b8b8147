import io
import json

import fitz
import pytest

from config import TestingConfig
from hiretrack import create_app
from hiretrack.extensions import db
from hiretrack.models import Candidate, Job, INITIAL_STAGE
from hiretrack.services import ats_scoring

ADMIN_EMAIL = TestingConfig.ADMIN_EMAIL
ADMIN_PASSWORD = TestingConfig.ADMIN_PASSWORD

RESUME_TEXT = (
    "Jane Doe - Backend Engineer. Six years building Python and Flask services, "
    "PostgreSQL schema design, Docker and Kubernetes deployments, and REST API design. "
    "BSc Computer Science."
)

GOOD_REPLY = {
    "totalScore": 82,
    "decision": "Recommended",
    "breakdown": {
        "skill_match": 85,
        "experience_match": 80,
        "education_match": 75,
        "keyword_match": 90,
    },
    "explanation": "Strong backend background.",
    "strengths": ["Python", "Flask"],
    "gaps": ["No Go experience"],
}


class FakeOracle:
    """Stands in for the chat completion call and records every prompt."""

    def __init__(self):
        self.reply = json.dumps(GOOD_REPLY)
        self.error = None
        self.calls = []

    def __call__(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "resumes")

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def oracle(monkeypatch):
    fake = FakeOracle()
    monkeypatch.setattr(ats_scoring, "request_completion", fake)
    return fake


@pytest.fixture
def auth_headers(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.get_json()['token']}"}


@pytest.fixture
def job_id(app):
    with app.app_context():
        job = Job(
            title="Backend Engineer",
            description="Build and run Python services.",
            skills_json=["Python", "Flask"],
            requirements_json=["3+ years backend experience"],
            pipeline_stages=["Screening", "Interview", "Offer"],
        )
        db.session.add(job)
        db.session.commit()
        return job.id


@pytest.fixture
def make_candidate(app, job_id):
    def _make(stage=INITIAL_STAGE, **fields):
        with app.app_context():
            candidate = Candidate(
                name=fields.pop("name", "Jane Doe"),
                email=fields.pop("email", "jane@example.com"),
                phone=fields.pop("phone", "555-0100"),
                cover_note=fields.pop("cover_note", "Hello"),
                job_id=fields.pop("job_id", job_id),
                stage=stage,
                **fields,
            )
            candidate.record_transition("", INITIAL_STAGE)
            db.session.add(candidate)
            db.session.commit()
            return candidate.id
    return _make


def get_candidate(app, candidate_id):
    with app.app_context():
        candidate = db.session.get(Candidate, candidate_id)
        if candidate is not None:
            # load the history while the session is open
            list(candidate.history)
            db.session.expunge(candidate)
        return candidate


def make_pdf(text):
    doc = fitz.open()
    page = doc.new_page()
    page.insert_textbox(fitz.Rect(72, 72, 540, 720), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs):
    import docx

    document = docx.Document()
    for para in paragraphs:
        document.add_paragraph(para)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def application_form(job_id, **overrides):
    form = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0100",
        "jobId": job_id,
        "coverNote": "I would love to join.",
    }
    form.update(overrides)
    return form
