import pytest
from fastapi.testclient import TestClient

from blockqueue.app import create_app
from blockqueue.config import AppConfig, LoggingConfig

@pytest.fixture
def client(tmp_path):
    config = AppConfig(
        logging=LoggingConfig(log_dir=str(tmp_path / "logs")),
        jobs=["deploy", "build"],
        conditions=[
            {"jobName": "deploy", "defineBlockingParams": {"blockingParams": [{"name": "env", "value": "prod"}]}},
            {"jobName": ""},
        ],
    )
    with TestClient(create_app(config)) as client:
        yield client

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["jobs"] == 2
    # Condition without a job name is skipped at startup
    assert len(data["conditions"]) == 1

def test_check_job_name(client):
    assert client.get("/conditions/check-job-name", params={"jobName": "deploy"}).json()["kind"] == "ok"
    assert client.get("/conditions/check-job-name").json()["message"] == "Job must be specified"
    assert client.get("/conditions/check-job-name", params={"jobName": "x"}).json()["message"] == "Job: 'x' not found"

def test_autocomplete(client):
    assert client.get("/conditions/autocomplete", params={"value": "de"}).json() == {"values": ["deploy"]}

def test_add_condition(client):
    response = client.post("/conditions", json={
        "jobName": "build",
        "defineBlockingParams": {"blockingParams": {"name": "region", "value": "eu"}},
    })
    assert response.status_code == 200
    assert response.json()["blocking_params"] == [{"name": "region", "value": "eu"}]
    assert len(client.get("/conditions").json()["conditions"]) == 2

def test_add_condition_requires_job_name(client):
    assert client.post("/conditions", json={"jobName": " "}).status_code == 400

def test_queue_item_is_held_while_target_runs(client):
    client.post("/jobs/deploy/running", json={"running": True})

    held = client.post("/queue", json={"job_name": "build", "parameters": {"env": "prod", "build": "42"}}).json()
    free = client.post("/queue", json={"job_name": "build", "parameters": [{"name": "env", "value": "dev"}]}).json()

    assert held["status"] == "blocked"
    assert held["why"] == "deploy is currently running and parameters are matched."
    assert free["status"] == "running"

    client.post("/jobs/deploy/running", json={"running": False})
    assert client.get(f"/queue/{held['item_id']}").json()["status"] == "running"

    decisions = client.get("/admin/decisions").json()["decisions"]
    assert [d["blocked"] for d in decisions] == [True, False, False]

def test_complete_item(client):
    item = client.post("/queue", json={"job_name": "deploy"}).json()
    assert client.get("/jobs").json()["jobs"][1] == {"name": "deploy", "running": True}

    response = client.post(f"/queue/{item['item_id']}/complete")
    assert response.json()["status"] == "completed"
    assert client.post(f"/queue/{item['item_id']}/complete").status_code == 404

def test_unknown_job_and_item(client):
    assert client.post("/jobs/missing/running", json={"running": True}).status_code == 404
    assert client.get("/queue/nope").status_code == 404

def test_invalid_parameters_rejected(client):
    assert client.post("/queue", json={"job_name": "build", "parameters": "env=prod"}).status_code == 400

def test_register_job(client):
    assert client.post("/jobs/nightly").json() == {"name": "nightly", "running": False}
    assert "nightly" in [j["name"] for j in client.get("/jobs").json()["jobs"]]

def test_padded_job_name_is_normalized(client):
    item = client.post("/queue", json={"job_name": " build"}).json()
    assert item["job_name"] == "build"
    assert item["status"] == "running"
    assert {"name": "build", "running": True} in client.get("/jobs").json()["jobs"]

    assert client.post(f"/queue/{item['item_id']}/complete").json()["status"] == "completed"
    assert {"name": "build", "running": False} in client.get("/jobs").json()["jobs"]

@pytest.mark.parametrize("job_name", ["", "   "])
def test_blank_job_name_rejected(client, job_name):
    assert client.post("/queue", json={"job_name": job_name}).status_code == 400
    assert client.get("/queue").json()["items"] == []
