"""Controller logger wiring (rotating file, env/dev level hints)."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

from eq_controller.controller import dialog_config
from eq_controller.logging_utils import build_rotating_file_handler, resolve_log_level, resolve_logs_dir

LOGGER_NAME = "EQFocus.Controller"
LOG_FILENAME = "eq_controller.log"
LOG_RETENTION = 5
LOG_MAX_BYTES = 512 * 1024
PACKAGE_ROOT = Path(__file__).resolve().parents[1]

_CONTROLLER_LOGGER: Optional[logging.Logger] = None


def _resolve_env_log_level_hint() -> Tuple[Optional[int], Optional[str]]:
    raw_value = os.getenv("EQ_FOCUS_LOG_LEVEL")
    raw_name = os.getenv("EQ_FOCUS_LOG_LEVEL_NAME")
    level_value: Optional[int]
    try:
        level_value = int(raw_value) if raw_value is not None else None
    except (TypeError, ValueError):
        level_value = None
    level_name = None
    if raw_name:
        level_name = raw_name.strip() or None
    if level_name is None and level_value is not None:
        level_name = logging.getLevelName(level_value)
    return level_value, level_name


_ENV_LOG_LEVEL_VALUE, _ENV_LOG_LEVEL_NAME = _resolve_env_log_level_hint()
_LOG_LEVEL_OVERRIDE_VALUE: Optional[int] = None
_LOG_LEVEL_OVERRIDE_NAME: Optional[str] = None
_LOG_LEVEL_OVERRIDE_SOURCE: Optional[str] = None


def _coerce_candidate(value: Optional[int], name: Optional[str]) -> tuple[Optional[int], Optional[str]]:
    candidate = value
    candidate_name = name
    if candidate is None and candidate_name:
        attr = getattr(logging, candidate_name.upper(), None)
        if isinstance(attr, int):
            candidate = int(attr)
    if candidate is not None and candidate_name is None:
        candidate_name = logging.getLevelName(candidate)
    return candidate, candidate_name


def resolve_controller_log_path(root_path: Path) -> Path:
    return resolve_logs_dir(root_path) / LOG_FILENAME


def ensure_controller_logger(root_path: Path = PACKAGE_ROOT) -> Optional[logging.Logger]:
    global _CONTROLLER_LOGGER
    if _CONTROLLER_LOGGER is not None:
        return _CONTROLLER_LOGGER
    try:
        log_dir = resolve_logs_dir(root_path)
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")
        handler = build_rotating_file_handler(
            log_dir,
            LOG_FILENAME,
            retention=LOG_RETENTION,
            max_bytes=LOG_MAX_BYTES,
            formatter=formatter,
        )
        logger = logging.getLogger(LOGGER_NAME)
        debug_enabled = dialog_config.DEBUG_CONFIG_ENABLED
        resolved_level = resolve_log_level(debug_enabled)
        level_source = "default"

        if _LOG_LEVEL_OVERRIDE_VALUE is not None or _LOG_LEVEL_OVERRIDE_NAME:
            candidate, _name = _coerce_candidate(_LOG_LEVEL_OVERRIDE_VALUE, _LOG_LEVEL_OVERRIDE_NAME)
            if candidate is not None:
                resolved_level = int(candidate)
                level_source = _LOG_LEVEL_OVERRIDE_SOURCE or "override"
        elif _ENV_LOG_LEVEL_VALUE is not None or _ENV_LOG_LEVEL_NAME:
            candidate, _name = _coerce_candidate(_ENV_LOG_LEVEL_VALUE, _ENV_LOG_LEVEL_NAME)
            if candidate is not None:
                resolved_level = int(candidate)
                level_source = "env"

        original_level = resolved_level
        if debug_enabled and resolved_level > logging.DEBUG:
            resolved_level = logging.DEBUG

        logger.setLevel(resolved_level)
        logger.propagate = False
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.debug(
            "Controller logger initialised: path=%s level=%s retention=%d max_bytes=%d",
            getattr(handler, "baseFilename", log_dir / LOG_FILENAME),
            logging.getLevelName(logger.level),
            LOG_RETENTION,
            LOG_MAX_BYTES,
        )
        if resolved_level != original_level:
            logger.info(
                "Controller logger level forced to DEBUG via dev-mode override (original=%s from %s)",
                logging.getLevelName(original_level),
                level_source,
            )
        elif level_source in {"env", "override"}:
            logger.log(
                max(resolved_level, logging.INFO),
                "Controller logger level forced to %s via %s",
                logging.getLevelName(resolved_level),
                level_source,
            )
        _CONTROLLER_LOGGER = logger
        return logger
    except Exception:
        return None


def controller_debug(message: str, *args: object) -> None:
    logger = ensure_controller_logger()
    if logger is not None:
        logger.debug(message, *args)
    else:
        try:
            sys.stderr.write((message % args) + "\n")
        except Exception:
            pass


def set_log_level_hint(value: Optional[int], name: Optional[str] = None, source: str = "override") -> None:
    """Test hook to override the controller log level without relying on env."""

    global _LOG_LEVEL_OVERRIDE_VALUE, _LOG_LEVEL_OVERRIDE_NAME, _LOG_LEVEL_OVERRIDE_SOURCE, _CONTROLLER_LOGGER
    _LOG_LEVEL_OVERRIDE_VALUE = value
    _LOG_LEVEL_OVERRIDE_NAME = name
    _LOG_LEVEL_OVERRIDE_SOURCE = source
    _CONTROLLER_LOGGER = None


__all__ = [
    "LOGGER_NAME",
    "controller_debug",
    "ensure_controller_logger",
    "resolve_controller_log_path",
    "set_log_level_hint",
]
