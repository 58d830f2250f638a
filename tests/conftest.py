import json

import pytest

from snipdeck import app


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setitem(app.config, "DATA_DIR", str(tmp_path))
    monkeypatch.setitem(app.config, "TESTING", True)
    return tmp_path


@pytest.fixture
def client(data_dir):
    return app.test_client()


@pytest.fixture
def seed(data_dir):
    """Write a snippets.json into the data dir and return its contents."""
    def _seed(snippets):
        (data_dir / "snippets.json").write_text(json.dumps(snippets), encoding="utf-8")
        return snippets
    return _seed
