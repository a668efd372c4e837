"""
HTTP tests for the FastAPI app with the model client faked out.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeClientFactory
from examgen import app as app_module
from examgen.core.model_invoker import MODEL_PRIORITY, ModelInvoker

CONFIG = {"level": "High School", "gradeLevel": "Grade 10", "examType": "45 minutes"}
EXAM_JSON = (
    '{"examTitle":"Test","duration":"45m","content":[{"section":"I","text":"Passage",'
    '"questions":[{"id":"Question 1","text":"Q?","points":0.5}]}],'
    '"answers":[{"questionId":"Question 1","answer":"A","pointsDetail":"0.5 pts"}]}'
)


class InvokerRecorder:
    """Replaces ``build_invoker``; every invoker gets a scripted fake client."""

    def __init__(self):
        self.outcomes = []
        self.factories = []

    def __call__(self, context):
        factory = FakeClientFactory(self.outcomes)
        self.factories.append((context, factory))
        return ModelInvoker(context, client_factory=factory)


@pytest.fixture
def fake_factory(monkeypatch, no_env_credentials):
    recorder = InvokerRecorder()
    monkeypatch.setattr(app_module, "build_invoker", recorder)
    return recorder


@pytest.fixture
def client():
    return TestClient(app_module.app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_models_lists_catalog_in_priority_order(client):
    models = client.get("/models").json()

    assert [m["id"] for m in models] == list(MODEL_PRIORITY)
    assert all(m["name"] and m["description"] for m in models)


def test_generate_exam_success(client, fake_factory):
    fake_factory.outcomes = ["PLAN_X", f"```json\n{EXAM_JSON}\n```"]

    resp = client.post(
        "/generate_exam",
        json=CONFIG,
        headers={"X-Api-Key": "sk-session", "X-Preferred-Model": MODEL_PRIORITY[2]},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["progress"] == [
        "Step 1/2: Analyzing Matrix & Training Data...",
        "Step 2/2: Generating Exam Content (Be patient)...",
    ]
    assert body["exam"]["examTitle"] == "Test"
    assert body["exam"]["answers"][0]["questionId"] == "Question 1"
    assert body["exam"]["content"][0]["questions"][0]["points"] == 0.5

    context, factory = fake_factory.factories[0]
    assert context.session_api_key == "sk-session"
    assert factory.models_called == [MODEL_PRIORITY[2], MODEL_PRIORITY[2]]


def test_generate_exam_without_key_is_401(client, fake_factory):
    resp = client.post("/generate_exam", json=CONFIG)

    assert resp.status_code == 401
    assert resp.json()["status"] == "error"
    assert "API Key" in resp.json()["message"]
    assert fake_factory.factories[0][1].calls == []


def test_generate_exam_truncated_output_is_422(client, fake_factory):
    fake_factory.outcomes = ["plan", '{"examTitle":"Test"']

    resp = client.post("/generate_exam", json=CONFIG, headers={"X-Api-Key": "sk"})

    assert resp.status_code == 422
    assert "too large" in resp.json()["message"]


def test_generate_exam_all_models_failed_is_502(client, fake_factory):
    fake_factory.outcomes = [RuntimeError(f"down {i}") for i in range(len(MODEL_PRIORITY))]

    resp = client.post("/generate_exam", json=CONFIG, headers={"X-Api-Key": "sk"})

    assert resp.status_code == 502
    assert resp.json()["message"] == f"All AI models failed. Last error: down {len(MODEL_PRIORITY) - 1}"


def test_invalid_config_is_rejected(client):
    resp = client.post("/generate_exam", json={"level": "Primary"})

    assert resp.status_code == 422
    assert resp.json()["status"] == "error"
