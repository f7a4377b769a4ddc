import logging

import pytest

import progress


@pytest.fixture(autouse=True)
def _isolated_run_state(tmp_path, monkeypatch):
    state = tmp_path / "collider_state.json"
    monkeypatch.setattr(progress, "STATE_FILE", state)
    monkeypatch.setattr(progress, "STATE_FILE_TMP", state.with_name(state.name + ".tmp"))
    monkeypatch.setattr(progress, "_LAST_STATE_MTIME", 0.0)

    handler = logging.FileHandler(tmp_path / "collider_runs.log", encoding="utf-8")
    monkeypatch.setattr(progress.RUN_LOGGER, "handlers", [handler])
    progress.RUN_LOGGER.setLevel(logging.INFO)
    yield
    handler.close()
