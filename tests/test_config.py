"""Tests for configuration loading."""

import logging
import tempfile
from pathlib import Path

import pytest

from cmsync.config import Config, load_config


def test_defaults():
    config = Config()
    assert config.space_id == "default"
    assert config.environment == "master"
    assert config.store_dir == ".cmsync"
    assert config.level == logging.WARNING


def test_from_env(monkeypatch):
    monkeypatch.setenv("CMSYNC_SPACE_ID", "blog")
    monkeypatch.setenv("CMSYNC_LOG_LEVEL", "debug")
    monkeypatch.delenv("CMSYNC_ENVIRONMENT", raising=False)

    config = Config.from_env(Config(environment="staging"))
    assert config.space_id == "blog"
    assert config.environment == "staging"
    assert config.level == logging.DEBUG


def test_overrides_skip_empty_values():
    config = Config().with_overrides(space_id="blog", environment=None, store_dir="")
    assert config.space_id == "blog"
    assert config.environment == "master"
    assert config.store_dir == ".cmsync"


def test_unknown_log_level_falls_back():
    assert Config(log_level="chatty").level == logging.WARNING


def test_load_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "cmsync.yaml"
        path.write_text("space_id: blog\nstore_dir: /tmp/remote\n")
        config = load_config(path)
    assert config.space_id == "blog"
    assert config.store_dir == "/tmp/remote"
    assert config.environment == "master"


def test_load_config_rejects_unknown_keys():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "cmsync.yaml"
        path.write_text("space: blog\n")
        with pytest.raises(ValueError):
            load_config(path)
