import importlib

import config


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TC_OVERLAP", "Allowed")
    monkeypatch.setenv("TC_CELL_SIZE", "0.25")
    monkeypatch.setenv("TC_CONTAINER_NAME", "Boxes")
    monkeypatch.setenv("TC_MAX_CELLS", "64")
    try:
        cfg = importlib.reload(config).CFG
        assert cfg.OVERLAP == "Allowed"
        assert cfg.CELL_SIZE == 0.25
        assert cfg.CONTAINER_NAME == "Boxes"
        assert cfg.MAX_CELLS == 64
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_defaults(monkeypatch):
    for name in ("TC_OVERLAP", "TC_TARGET", "TC_CONTAINER_NAME", "TC_CELL_SIZE"):
        monkeypatch.delenv(name, raising=False)
    try:
        cfg = importlib.reload(config).CFG
        assert cfg.OVERLAP == "NotAllowed"
        assert cfg.TARGET == "UseHostObject"
        assert cfg.CONTAINER_NAME == "ColliderContainer"
        assert cfg.CELL_SIZE == 1.0
    finally:
        monkeypatch.undo()
        importlib.reload(config)
