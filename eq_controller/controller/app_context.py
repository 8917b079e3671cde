from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from eq_controller.controller.dialog_config import DialogConfig, load_dialog_config
from eq_controller.input_bindings import BindingConfig

KEYBINDINGS_ENV_VAR = "EQ_FOCUS_KEYBINDINGS_PATH"


@dataclass
class AppContext:
    root: Path
    settings_path: Path
    keybindings_path: Path
    dialog_config: DialogConfig
    binding_config: BindingConfig


def build_app_context(
    *,
    root: Path,
    logger: Optional[Callable[..., None]] = None,
) -> AppContext:
    settings_path = root / "dialog_settings.json"
    keybindings_raw = os.environ.get(KEYBINDINGS_ENV_VAR, root / "keybindings.json")
    keybindings_path = Path(keybindings_raw)

    dialog_config = load_dialog_config(settings_path)
    try:
        binding_config = BindingConfig.load(keybindings_path)
    except (OSError, json.JSONDecodeError) as exc:
        if logger is not None:
            try:
                logger("Keybindings unreadable at %s (%s); using defaults", keybindings_path, exc)
            except Exception:
                pass
        binding_config = BindingConfig.default()

    return AppContext(
        root=root,
        settings_path=settings_path,
        keybindings_path=keybindings_path,
        dialog_config=dialog_config,
        binding_config=binding_config,
    )
