from __future__ import annotations

import logging

import pytest

from eq_controller.controller import dialog_config
from eq_controller.controller import logging_setup as controller


@pytest.fixture(autouse=True)
def reset_controller_logger(monkeypatch, tmp_path):
    monkeypatch.setenv("EQ_FOCUS_LOG_DIR", str(tmp_path / "logs"))
    controller.set_log_level_hint(None, None)
    controller._CONTROLLER_LOGGER = None
    yield
    controller.set_log_level_hint(None, None)
    controller._CONTROLLER_LOGGER = None


def test_controller_logger_uses_hint(monkeypatch, tmp_path):
    controller.set_log_level_hint(10, "DEBUG")
    logger = controller.ensure_controller_logger(tmp_path)
    assert logger is not None
    assert logger.level == 10
    assert logger.propagate is False


def test_controller_logger_defaults_without_env(monkeypatch, tmp_path):
    monkeypatch.setattr(controller, "_ENV_LOG_LEVEL_VALUE", None, raising=False)
    monkeypatch.setattr(controller, "_ENV_LOG_LEVEL_NAME", None, raising=False)
    logger = controller.ensure_controller_logger(tmp_path)
    assert logger.level == (logging.DEBUG if dialog_config.DEBUG_CONFIG_ENABLED else logging.INFO)


def test_controller_logger_dev_override_clamps_env(monkeypatch, tmp_path):
    monkeypatch.setattr(dialog_config, "DEBUG_CONFIG_ENABLED", True, raising=False)
    monkeypatch.setattr(controller, "_ENV_LOG_LEVEL_VALUE", logging.INFO, raising=False)
    monkeypatch.setattr(controller, "_ENV_LOG_LEVEL_NAME", "INFO", raising=False)
    controller.set_log_level_hint(None, None)
    logger = controller.ensure_controller_logger(tmp_path)
    assert logger.level == logging.DEBUG


def test_controller_logger_name_hint_only(monkeypatch, tmp_path):
    monkeypatch.setattr(dialog_config, "DEBUG_CONFIG_ENABLED", False, raising=False)
    controller.set_log_level_hint(None, "warning")
    logger = controller.ensure_controller_logger(tmp_path)
    assert logger.level == logging.WARNING


def test_controller_log_file_lands_in_override_dir(tmp_path):
    path = controller.resolve_controller_log_path(tmp_path)
    assert path == tmp_path / "logs" / "EQFocus" / "eq_controller.log"
    logger = controller.ensure_controller_logger(tmp_path)
    handler = logger.handlers[0]
    assert handler.baseFilename == str(path)
