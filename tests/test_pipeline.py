from hiretrack import databases

from tests.conftest import get_candidate


def _move(client, headers, candidate_id, to):
    return client.patch(f"/api/movestage/{candidate_id}", json={"to": to}, headers=headers)


def test_move_to_valid_stage(app, client, auth_headers, make_candidate):
    candidate_id = make_candidate()

    res = _move(client, auth_headers, candidate_id, "Interview")
    assert res.status_code == 200
    body = res.get_json()
    assert body["stage"] == "Interview"
    assert [(h["from"], h["to"], h["by"]) for h in body["history"]] == [
        ("", "Applied", None),
        ("Applied", "Interview", "Admin"),
    ]

    logs = client.get(f"/api/pipeline-logs/{candidate_id}", headers=auth_headers).get_json()
    assert [(log["oldStage"], log["newStage"]) for log in logs] == [("Applied", "Interview")]


def test_stages_can_be_revisited(client, auth_headers, make_candidate):
    candidate_id = make_candidate(stage="Offer")
    assert _move(client, auth_headers, candidate_id, "Screening").get_json()["stage"] == "Screening"
    assert _move(client, auth_headers, candidate_id, "Rejected").get_json()["stage"] == "Rejected"
    assert _move(client, auth_headers, candidate_id, "Applied").get_json()["stage"] == "Applied"


def test_invalid_stage_leaves_candidate_unchanged(app, client, auth_headers, make_candidate):
    candidate_id = make_candidate()

    res = _move(client, auth_headers, candidate_id, "Hired")
    assert res.status_code == 400
    assert res.get_json()["error"] == (
        "Invalid stage: Hired. Valid stages for this job: Applied, Screening, Interview, Offer, Rejected"
    )

    candidate = get_candidate(app, candidate_id)
    assert candidate.stage == "Applied"
    assert len(candidate.history) == 1
    assert client.get(f"/api/pipeline-logs/{candidate_id}", headers=auth_headers).get_json() == []


def test_custom_pipeline_stages_are_enforced(client, auth_headers, job_id, make_candidate):
    client.put(f"/api/jobs/{job_id}", json={"pipelineStages": ["Phone Screen", "Onsite"]}, headers=auth_headers)
    candidate_id = make_candidate()

    assert _move(client, auth_headers, candidate_id, "Interview").status_code == 400
    assert _move(client, auth_headers, candidate_id, "Onsite").get_json()["stage"] == "Onsite"


def test_missing_target_stage(client, auth_headers, make_candidate):
    candidate_id = make_candidate()
    res = client.patch(f"/api/movestage/{candidate_id}", json={}, headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["error"] == 'Target stage "to" is required'


def test_unknown_candidate(client, auth_headers):
    res = _move(client, auth_headers, "missing", "Interview")
    assert res.status_code == 404
    assert res.get_json()["error"] == "Candidate not found"


def test_move_to_current_stage_is_a_no_op(app, client, auth_headers, make_candidate):
    candidate_id = make_candidate(stage="Screening")

    res = _move(client, auth_headers, candidate_id, "Screening")
    assert res.status_code == 200
    assert res.get_json()["stage"] == "Screening"
    assert len(get_candidate(app, candidate_id).history) == 1
    assert client.get(f"/api/pipeline-logs/{candidate_id}", headers=auth_headers).get_json() == []


def test_pipeline_log_failure_does_not_undo_move(app, client, auth_headers, make_candidate, monkeypatch):
    candidate_id = make_candidate()

    def broken_log(**kwargs):
        raise RuntimeError("log table unavailable")

    monkeypatch.setattr(databases, "PipelineLog", broken_log)

    res = _move(client, auth_headers, candidate_id, "Offer")
    assert res.status_code == 200
    assert get_candidate(app, candidate_id).stage == "Offer"


def test_move_requires_token(client, make_candidate):
    candidate_id = make_candidate()
    assert client.patch(f"/api/movestage/{candidate_id}", json={"to": "Offer"}).status_code == 401
