# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""Configuration loading tests."""

import pytest

from deskcontext.config.config_manager import DEFAULT_CONFIG, ConfigManager, merge_config
from deskcontext.config.global_config import CONFIG_PATH_ENV, GlobalConfig, get_config


@pytest.fixture(autouse=True)
def fresh_global_config():
    GlobalConfig.reset()
    yield
    GlobalConfig.reset()


def _write(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_env_substitution_and_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("DC_TEST_WEBHOOK", "https://collector.example.com/hook")
    monkeypatch.delenv("DC_TEST_MISSING", raising=False)
    path = _write(
        tmp_path,
        """
storage:
  data_dir: ${DC_TEST_MISSING:/tmp/deskcontext}
webhook:
  url: ${DC_TEST_WEBHOOK}
  max_attempts: 5
capture:
  clipboard:
    enabled: ${DC_TEST_MISSING:false}
""",
    )

    manager = ConfigManager()
    manager.load_config(path)
    config = manager.get_config()

    assert config["storage"]["data_dir"] == "/tmp/deskcontext"
    assert config["storage"]["db_name"] == "deskcontext.db"
    assert config["webhook"]["url"] == "https://collector.example.com/hook"
    assert config["webhook"]["max_attempts"] == 5
    assert config["webhook"]["retry_delay"] == 1.0
    assert config["capture"]["clipboard"]["enabled"] is False
    assert config["capture"]["clipboard"]["max_length"] == 10000
    assert manager.get_config_path() == path


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager().load_config(str(tmp_path / "nope.yaml"))


def test_defaults_are_not_mutated(tmp_path):
    path = _write(tmp_path, "capture:\n  browser_tabs:\n    max_tabs: 5\n")

    manager = ConfigManager()
    manager.load_config(path)

    assert manager.get_config()["capture"]["browser_tabs"]["max_tabs"] == 5
    assert DEFAULT_CONFIG["capture"]["browser_tabs"]["max_tabs"] == 50


def test_global_config_dotted_paths(tmp_path, monkeypatch):
    path = _write(tmp_path, "scheduler:\n  webhook_outbox:\n    interval: 60\n")
    monkeypatch.setenv(CONFIG_PATH_ENV, path)

    assert get_config("scheduler.webhook_outbox.interval") == 60
    assert get_config("scheduler.capture_cleanup.retention_days") == 30
    assert get_config("scheduler.nope") is None
    assert GlobalConfig.get_instance().is_enabled("scheduler") is True


def test_global_config_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_PATH_ENV, str(tmp_path / "missing.yaml"))

    assert get_config("webhook.user_agent") == "DeskContext/1.0"
    assert GlobalConfig.get_instance().is_initialized()


def test_merge_config_copies_values():
    overrides = {"capture": {"browser_tabs": {"browsers": ["Safari"]}}, "extra": {"k": [1]}}

    merged = merge_config(DEFAULT_CONFIG, overrides)
    merged["capture"]["browser_tabs"]["browsers"].append("Chrome")
    merged["extra"]["k"].append(2)

    assert overrides == {"capture": {"browser_tabs": {"browsers": ["Safari"]}}, "extra": {"k": [1]}}
    assert DEFAULT_CONFIG["capture"]["browser_tabs"]["browsers"] == ["Chrome", "Safari", "Firefox", "Edge"]
    assert merged["capture"]["browser_tabs"]["timeout"] == 1.0
