"""Shared test fixtures for the logtee test suite."""

import io
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from logtee import manager as _manager_mod
from logtee.manager import TeeLogger


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: spawns a subprocess (deselect with -m 'not slow')")


# ---------------------------------------------------------------------------
# Logger fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def buf():
    """A StringIO buffer usable as a sink."""
    return io.StringIO()


@pytest.fixture
def tee():
    """A fresh, sink-less TeeLogger; reset afterwards to close any files."""
    logger = TeeLogger()
    yield logger
    logger.reset()


@pytest.fixture(autouse=True)
def _restore_singleton():
    """Keep the process-wide TeeLogger isolated between tests."""
    old = _manager_mod._tee
    _manager_mod._tee = None
    yield
    if _manager_mod._tee is not None and _manager_mod._tee is not old:
        _manager_mod._tee.reset()
    _manager_mod._tee = old


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.logtee/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def subprocess_env():
    """Environment for running logtee in a child interpreter from source."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(SRC_DIR), env.get("PYTHONPATH")) if p)
    return env
