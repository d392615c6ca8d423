import pytest

from src.core.config import ConfigurationError, Settings
from src.jobs import preview_server


@pytest.fixture
def settings(tmp_path):
    return Settings(
        supabase_url="https://abc.supabase.co",
        supabase_key="key",
        output_path=str(tmp_path / "docs" / "index.html"),
    )


@pytest.fixture(autouse=True)
def dummy_executor(monkeypatch, settings):
    submitted = {}

    class DummyExecutor:
        def submit(self, fn, *args):
            submitted["fn"] = fn

    monkeypatch.setattr(preview_server, "_executor", DummyExecutor())
    monkeypatch.setattr(preview_server, "get_settings", lambda: settings)
    yield submitted


def test_health_endpoint(settings):
    client = preview_server.app.test_client()
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "output_path": settings.output_path}


def test_health_reports_missing_config(monkeypatch):
    def missing():
        raise ConfigurationError("SUPABASE_URL must be set")

    monkeypatch.setattr(preview_server, "get_settings", missing)
    response = preview_server.app.test_client().get("/healthz")
    assert response.status_code == 503
    assert response.get_json()["status"] == "misconfigured"


def test_index_404_before_generation():
    response = preview_server.app.test_client().get("/")
    assert response.status_code == 404


def test_index_serves_generated_page(tmp_path, settings):
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.html").write_text("<html>mapa</html>", encoding="utf-8")

    response = preview_server.app.test_client().get("/")

    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert b"mapa" in response.data
    response.close()


def test_generate_enqueues_job(dummy_executor):
    response = preview_server.app.test_client().post("/generate")
    assert response.status_code == 202
    assert response.get_json()["data"]["status"] == "queued"
    assert dummy_executor["fn"] is preview_server._run_job_safe


def test_run_job_safe_logs_fetch_error(monkeypatch, caplog):
    from src.vendors.supabase_rest import FetchError

    def boom():
        raise FetchError("down")

    monkeypatch.setattr(preview_server, "generate_map", boom)
    with caplog.at_level("ERROR"):
        preview_server._run_job_safe()
    assert "Map generation failed: down" in caplog.messages
