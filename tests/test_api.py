from fastapi.testclient import TestClient

from log_injector.api import app
from conftest import WIDGET_SERVICE_IMPL, write

client = TestClient(app)


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_preview_instruments_in_memory():
    resp = client.post("/api/preview", json={"code": WIDGET_SERVICE_IMPL, "filename": "WidgetServiceImpl.java"})
    assert resp.status_code == 200

    data = resp.json()
    assert data["changed"] is True
    assert data["filename"] == "WidgetServiceImpl.java"
    assert data["loggers_added"] == ["WidgetServiceImpl"]
    assert data["instrumented"][0]["action"] == "WRITE"
    assert data["instrumented"][0]["params"] == ["widgetId"]
    assert 'log.info("LPS"' in data["code"]


def test_preview_rejects_invalid_java():
    resp = client.post("/api/preview", json={"code": "class Broken {"})
    assert resp.status_code == 400
    assert "Preview.java" in resp.json()["detail"]


def test_instrument_missing_project_is_a_client_error(tmp_path):
    resp = client.post(
        "/api/instrument",
        json={"original": str(tmp_path / "missing"), "target": str(tmp_path / "out")},
    )
    assert resp.status_code == 400
    assert "pom.xml" in resp.json()["detail"]


def test_instrument_refuses_a_foreign_non_empty_target(sample_project, tmp_path):
    target = tmp_path / "home"
    keep = write(target, "notes.txt", "do not delete")

    resp = client.post("/api/instrument", json={"original": str(sample_project), "target": str(target)})

    assert resp.status_code == 400
    assert "refusing" in resp.json()["detail"]
    assert keep.read_text(encoding="utf-8") == "do not delete"


def test_instrument_replaces_its_own_earlier_output(sample_project, tmp_path):
    target = tmp_path / "out"
    first = client.post("/api/instrument", json={"original": str(sample_project), "target": str(target)})
    assert first.status_code == 200
    assert (target / ".log-injector").is_file()

    second = client.post("/api/instrument", json={"original": str(sample_project), "target": str(target)})
    assert second.status_code == 200
    assert second.json()["instrumented"][0]["method"] == "createWidget"
