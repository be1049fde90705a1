import os
import importlib

import pytest

from salvo import config


@pytest.fixture
def reload_config(monkeypatch):
    def _reload(**env):
        for key in [k for k in os.environ if k.startswith("SALVO_")]:
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults(reload_config):
    cfg = reload_config()
    assert cfg.BOARD_SIZE == 10
    assert cfg.PLACEMENT_ATTEMPTS == 500
    assert cfg.PROBABILITY_CACHE_SIZE == 100
    assert cfg.SPACE_CACHE_SIZE == 1000
    assert sum(cfg.PLACEMENT_PATTERNS.values()) == pytest.approx(1.0)


def test_environment_overrides(reload_config):
    cfg = reload_config(SALVO_PLACEMENT_ATTEMPTS="50", SALVO_SEED="42", SALVO_DEBUG="1")
    assert cfg.PLACEMENT_ATTEMPTS == 50
    assert cfg.SEED == 42
    assert cfg.DEBUG is True


def test_bad_values_fail_loudly(reload_config):
    with pytest.raises(ValueError):
        reload_config(SALVO_BOARD_SIZE="ten")
