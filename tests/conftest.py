"""Pytest configuration and shared fixtures."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from cardmate.config.env import EnvConfig
from cardmate.config.logging import ColoredFormatter
from cardmate.config.logging import JsonFormatter
from cardmate.config.settings import ConfigurationManager
from cardmate.models.course import Course
from cardmate.models.course import Hole
from cardmate.models.player import Player
from cardmate.services.auth_service import Session
from cardmate.store.sqlite_store import SqliteStore


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path):
    """Point configuration at a temporary directory and drop CARDMATE_* overrides."""
    for env_var in EnvConfig.ENV_MAPPING:
        monkeypatch.delenv(env_var, raising=False)
    config_dir = tmp_path / "config"
    monkeypatch.setenv("CARDMATE_CONFIG_DIR", str(config_dir))
    ConfigurationManager._instance = None
    root = logging.getLogger()
    level = root.level

    yield config_dir

    ConfigurationManager._instance = None
    # Drop handlers installed by setup_logging
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (ColoredFormatter, JsonFormatter)) or isinstance(handler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

@pytest.fixture
def config_dir(setup_test_env):
    return setup_test_env

@pytest.fixture
def store():
    """In-memory SQLite store."""
    store = SqliteStore(':memory:')
    yield store
    store.close()

@pytest.fixture
def session(store):
    """Session signed in as user-1."""
    return Session(store, 'user-1')

@pytest.fixture
def nine_hole_course():
    """Nine hole course, pars 3 3 4 3 3 3 5 3 3 (par 30)."""
    pars = [3, 3, 4, 3, 3, 3, 5, 3, 3]
    return Course.new('Maple Hill', 9, [Hole(i + 1, par) for i, par in enumerate(pars)], course_id='course-9')

@pytest.fixture
def alice():
    return Player(id='player-a', name='Alice', user_id='user-1')

@pytest.fixture
def bob():
    return Player(id='player-b', name='Bob', user_id='user-1')
