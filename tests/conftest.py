import os
import tempfile
from pathlib import Path

# Must be set before importing app — load_dotenv() does not override existing env vars,
# so a developer's real todos.json is never the default during a test run.
os.environ.setdefault("TODOS_FILE", str(Path(tempfile.gettempdir()) / "todos-test.json"))

import pytest
from fastapi.testclient import TestClient

from app import app, get_store
from store import TaskStore


@pytest.fixture
def todos_file(tmp_path):
    return tmp_path / "todos.json"


@pytest.fixture
def store(todos_file):
    """A store backed by a fresh file under the test's tmp_path."""
    return TaskStore(todos_file)


@pytest.fixture
def client(store):
    """
    A TestClient whose get_store dependency is overridden to use the per-test
    store, so every test starts from an empty file and nothing leaks between
    tests.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=True)
    app.dependency_overrides.clear()


@pytest.fixture
def unwritable_store(tmp_path):
    """
    A store whose parent "directory" is a regular file. Loading sees no file;
    every write fails with an OSError (running as root doesn't help).
    """
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return TaskStore(blocker / "todos.json")
