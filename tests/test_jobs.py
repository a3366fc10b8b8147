from hiretrack.extensions import db
from hiretrack.models import Candidate, Job

from tests.conftest import get_candidate

JOB = {
    "title": "Backend Engineer",
    "description": "Build and run Python services.",
    "department": "Engineering",
    "type": "Contract",
    "skills": ["Python", "Flask"],
    "requirements": ["3+ years backend experience"],
    "pipelineStages": ["Screening", "Interview", "Offer"],
}


def test_create_and_fetch_job(client, auth_headers):
    res = client.post("/api/jobs", json=JOB, headers=auth_headers)
    assert res.status_code == 201
    created = res.get_json()
    assert created["id"]
    assert created["status"] == "open"
    assert created["location"] == "Remote"
    assert created["type"] == "Contract"

    res = client.get(f"/api/jobs/{created['id']}")
    assert res.status_code == 200
    fetched = res.get_json()
    assert fetched["title"] == "Backend Engineer"
    assert fetched["skills"] == ["Python", "Flask"]
    assert fetched["pipelineStages"] == ["Screening", "Interview", "Offer"]


def test_default_pipeline_stages(client, auth_headers):
    res = client.post("/api/jobs", json={"title": "Designer", "description": "Design things."}, headers=auth_headers)
    assert res.get_json()["pipelineStages"] == ["Screening", "Interview", "Offer"]


def test_create_job_requires_title_and_description(client, auth_headers):
    res = client.post("/api/jobs", json={"title": "No description"}, headers=auth_headers)
    assert res.status_code == 400
    assert "description" in res.get_json()["error"]


def test_create_job_rejects_implicit_stage_names(client, auth_headers):
    res = client.post(
        "/api/jobs",
        json={**JOB, "pipelineStages": ["Applied", "Interview"]},
        headers=auth_headers,
    )
    assert res.status_code == 400


def test_create_job_rejects_unknown_status(client, auth_headers):
    res = client.post("/api/jobs", json={**JOB, "status": "archived"}, headers=auth_headers)
    assert res.status_code == 400


def test_pipeline_stages_round_trip_in_order(client, auth_headers, job_id):
    stages = ["Phone Screen", "Take-home", "Onsite", "Offer"]
    res = client.put(f"/api/jobs/{job_id}", json={"pipelineStages": stages}, headers=auth_headers)
    assert res.status_code == 200

    fetched = client.get(f"/api/jobs/{job_id}").get_json()
    assert fetched["pipelineStages"] == stages
    # untouched fields survive a partial update
    assert fetched["title"] == "Backend Engineer"


def test_update_job_status(client, auth_headers, job_id):
    res = client.put(f"/api/jobs/{job_id}", json={"status": "closed"}, headers=auth_headers)
    assert res.get_json()["status"] == "closed"


def test_unknown_job_is_404(client, auth_headers):
    assert client.get("/api/jobs/does-not-exist").status_code == 404
    assert client.put("/api/jobs/does-not-exist", json={"title": "x"}, headers=auth_headers).status_code == 404
    assert client.delete("/api/jobs/does-not-exist", headers=auth_headers).status_code == 404


def test_list_jobs_is_public(client, job_id):
    res = client.get("/api/jobs")
    assert res.status_code == 200
    assert [j["id"] for j in res.get_json()] == [job_id]


def test_job_writes_require_token(client, job_id):
    assert client.put(f"/api/jobs/{job_id}", json={"title": "x"}).status_code == 401
    assert client.delete(f"/api/jobs/{job_id}").status_code == 401


def test_delete_job_keeps_candidates(app, client, auth_headers, job_id, make_candidate):
    candidate_id = make_candidate()

    res = client.delete(f"/api/jobs/{job_id}", headers=auth_headers)
    assert res.status_code == 200
    assert client.get(f"/api/jobs/{job_id}").status_code == 404

    candidate = get_candidate(app, candidate_id)
    assert candidate is not None
    assert candidate.job_id == job_id

    listing = client.get("/api/admin/candidates", headers=auth_headers).get_json()
    assert listing[0]["job"] is None


def test_seed_command_is_idempotent(app):
    runner = app.test_cli_runner()
    first = runner.invoke(args=["seed-all"])
    assert first.exit_code == 0
    second = runner.invoke(args=["seed-all"])
    assert "already exists" in second.output

    with app.app_context():
        assert Job.query.count() == 3
        assert db.session.query(Candidate).count() == 0


def test_skills_must_be_a_list(client, auth_headers, job_id):
    res = client.post("/api/jobs", json={**JOB, "skills": 5}, headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["error"] == "skills: must be a list of strings"

    res = client.put(f"/api/jobs/{job_id}", json={"requirements": {"years": 3}}, headers=auth_headers)
    assert res.status_code == 400


def test_comma_separated_skills_are_split(client, auth_headers):
    res = client.post("/api/jobs", json={**JOB, "skills": "Python, Flask ,,SQL"}, headers=auth_headers)
    assert res.get_json()["skills"] == ["Python", "Flask", "SQL"]
