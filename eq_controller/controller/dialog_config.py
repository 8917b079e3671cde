"""Dialog settings loader for the EQ focus controller."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from eq_controller.controller.layouts import FADER_MODES, LAYOUTS

DEV_MODE_ENV_VAR = "EQ_FOCUS_DEV_MODE"
READOUT_MS_MIN = 100
READOUT_MS_MAX = 10000
INITIAL_FOCUS_DELAY_MAX = 2000
FADER_LIMIT = 96


def is_dev_build() -> bool:
    value = os.getenv(DEV_MODE_ENV_VAR)
    if value is None:
        return False
    token = value.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    return False


DEBUG_CONFIG_ENABLED = is_dev_build()


@dataclass(frozen=True)
class DialogConfig:
    layout: str = "grouped"
    fader_mode: str = "nested"
    fader_min: int = -20
    fader_max: int = 20
    readout_ms: int = 1500
    initial_focus_delay_ms: int = 100
    emulate_platform_tab: bool = True


def _coerce_int(raw: Any, fallback: int, *, minimum: int, maximum: int) -> int:
    if raw is None or isinstance(raw, bool):
        return fallback
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return max(minimum, min(maximum, value))


def _coerce_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off"}:
            return False
    return fallback


def _coerce_choice(raw: Any, fallback: str, choices: tuple[str, ...]) -> str:
    if isinstance(raw, str) and raw.strip().lower() in choices:
        return raw.strip().lower()
    return fallback


def parse_dialog_config(data: Mapping[str, Any], *, base: Optional[DialogConfig] = None) -> DialogConfig:
    """Build a config from a mapping, ignoring unknown keys and bad values."""

    base = base or DialogConfig()
    fader_min = _coerce_int(data.get("fader_min"), base.fader_min, minimum=-FADER_LIMIT, maximum=FADER_LIMIT)
    fader_max = _coerce_int(data.get("fader_max"), base.fader_max, minimum=-FADER_LIMIT, maximum=FADER_LIMIT)
    if fader_min >= fader_max:
        fader_min, fader_max = base.fader_min, base.fader_max
    return replace(
        base,
        layout=_coerce_choice(data.get("layout"), base.layout, LAYOUTS),
        fader_mode=_coerce_choice(data.get("fader_mode"), base.fader_mode, FADER_MODES),
        fader_min=fader_min,
        fader_max=fader_max,
        readout_ms=_coerce_int(data.get("readout_ms"), base.readout_ms, minimum=READOUT_MS_MIN, maximum=READOUT_MS_MAX),
        initial_focus_delay_ms=_coerce_int(
            data.get("initial_focus_delay_ms"),
            base.initial_focus_delay_ms,
            minimum=0,
            maximum=INITIAL_FOCUS_DELAY_MAX,
        ),
        emulate_platform_tab=_coerce_bool(data.get("emulate_platform_tab"), base.emulate_platform_tab),
    )


def load_dialog_config(path: Path) -> DialogConfig:
    """Read dialog_settings.json; a missing or broken file yields the defaults."""

    try:
        raw_text = path.read_text(encoding="utf-8")
        data = json.loads(raw_text)
    except (FileNotFoundError, OSError, json.JSONDecodeError):
        data = {}
    if not isinstance(data, dict):
        data = {}
    return parse_dialog_config(data)


__all__ = [
    "DEBUG_CONFIG_ENABLED",
    "DEV_MODE_ENV_VAR",
    "DialogConfig",
    "is_dev_build",
    "load_dialog_config",
    "parse_dialog_config",
]
