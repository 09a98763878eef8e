"""Tests for daily_text.api (FastAPI TestClient; background tasks run before the response returns)"""

import json

import pytest
from fastapi.testclient import TestClient

from daily_text import api


@pytest.fixture
def client():
    api.store.jobs.clear()
    api.store.results.clear()
    return TestClient(api.app)


def upload(client, path, **form):
    with open(path, "rb") as fh:
        return client.post("/api/process", files={"epub": (path.name, fh, "application/epub+zip")}, data=form)


# ─── POST /api/process ─────────────────────────────────────────────────────

class TestProcess:
    def test_full_job(self, client, sample_epub):
        r = upload(client, sample_epub)
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "started"

        status = client.get(f"/api/status/{body['job_id']}").json()
        assert status["status"] == "completed"
        assert status["progress"] == 100
        assert status["count"] == 3
        assert status["year"] == "2025"

        download = client.get(f"/api/download/{status['result_id']}")
        assert download.status_code == 200
        assert download.headers["content-disposition"] == 'attachment; filename="daily-texts-2025.json"'
        data = json.loads(download.content.decode("utf-8"))
        assert [d["date"] for d in data] == ["2025-01-01", "2025-01-02", "2025-01-03"]

    def test_year_override(self, client, sample_epub):
        job_id = upload(client, sample_epub, year="2030").json()["job_id"]
        status = client.get(f"/api/status/{job_id}").json()
        assert status["year"] == "2030"

    def test_no_file(self, client):
        r = client.post("/api/process", data={"year": "2025"})
        assert r.status_code == 400
        assert r.json()["detail"] == "No file uploaded"

    def test_wrong_extension(self, client, tmp_path):
        txt = tmp_path / "notes.txt"
        txt.write_text("hola")
        r = upload(client, txt)
        assert r.status_code == 400
        assert r.json()["detail"] == "Only EPUB/ZIP files are allowed"

    def test_bad_year(self, client, sample_epub):
        r = upload(client, sample_epub, year="abc")
        assert r.status_code == 400
        assert "Invalid year" in r.json()["detail"]

    def test_broken_archive_marks_error(self, client, tmp_path):
        bad = tmp_path / "broken.epub"
        bad.write_text("not a zip")
        job_id = upload(client, bad).json()["job_id"]
        status = client.get(f"/api/status/{job_id}").json()
        assert status["status"] == "error"
        assert status["error"]


# ─── Lookups ───────────────────────────────────────────────────────────────

class TestLookups:
    def test_unknown_job(self, client):
        r = client.get("/api/status/job-0-0")
        assert r.status_code == 404
        assert r.json()["detail"] == "Job not found"

    def test_unknown_result(self, client):
        assert client.get("/api/download/result-nope").status_code == 404

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["version"] == api.__version__


# ─── JobStore ──────────────────────────────────────────────────────────────

class TestJobStore:
    def test_prune_old_entries(self):
        store = api.JobStore(max_age=60)
        job = store.new_job("a.epub")
        store.update(job.job_id, status="completed", completed_at=1000.0)
        store.add_result("result-a", api.Result(year="2025", data=[], generated_at=1000.0))
        running = store.new_job("b.epub")

        store.prune(now=1061.0)
        assert store.get(job.job_id) is None
        assert store.get_result("result-a") is None
        assert store.get(running.job_id) is not None

    def test_recent_entries_kept(self):
        store = api.JobStore(max_age=60)
        job = store.new_job("a.epub")
        store.update(job.job_id, status="completed", completed_at=1000.0)
        store.prune(now=1030.0)
        assert store.get(job.job_id) is not None

    def test_unique_ids(self):
        store = api.JobStore()
        assert store.new_job("a").job_id != store.new_job("b").job_id
