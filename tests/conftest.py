import pytest
from fastapi.testclient import TestClient

from backend import db as db_module
from backend import settings as settings_module
from timeline.model import SENTINEL_TOPIC, Project, Task, Topic

BACKEND_SECRET = "test-secret"


@pytest.fixture
def sample_project():
    topics = (
        SENTINEL_TOPIC,
        Topic("design", "Design", "#ff0000"),
        Topic("build", "Build", "#00aa00"),
    )
    tasks = (
        Task("t1", "design", "Wireframes", "2024-01-10", "2024-01-12"),
        Task("t2", "design", "Kickoff", "2024-01-05", "2024-01-05"),
    )
    return Project(name="Launch", topics=topics, tasks=tasks)


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'gantt.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", BACKEND_SECRET)
    monkeypatch.setenv("ALLOWED_EMAILS", "")
    monkeypatch.setattr(settings_module, "_settings", None)
    monkeypatch.setattr(db_module, "_engine", None)
    monkeypatch.setattr(db_module, "_session_factory", None)

    from backend.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-User-Email": "Planner@Example.com", "X-Backend-Token": BACKEND_SECRET}
