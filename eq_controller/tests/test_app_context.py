from __future__ import annotations

import json

from eq_controller.controller import build_app_context
from eq_controller.input_bindings import DEFAULT_CONFIG


def test_build_app_context_paths_and_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("EQ_FOCUS_KEYBINDINGS_PATH", raising=False)
    (tmp_path / "dialog_settings.json").write_text(json.dumps({"layout": "standard"}), encoding="utf-8")

    ctx = build_app_context(root=tmp_path, logger=lambda *_args, **_kwargs: None)

    assert ctx.root == tmp_path
    assert ctx.settings_path == tmp_path / "dialog_settings.json"
    assert ctx.keybindings_path == tmp_path / "keybindings.json"
    assert ctx.keybindings_path.exists()
    assert ctx.dialog_config.layout == "standard"
    assert ctx.binding_config.active_scheme == DEFAULT_CONFIG["active_scheme"]


def test_build_app_context_keybindings_override(tmp_path, monkeypatch):
    custom = tmp_path / "custom-keys.json"
    payload = {
        "active_scheme": "minimal",
        "schemes": {"minimal": {"bindings": {"Tab": ["<Tab>"]}}},
    }
    custom.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setenv("EQ_FOCUS_KEYBINDINGS_PATH", str(custom))

    ctx = build_app_context(root=tmp_path, logger=None)

    assert ctx.keybindings_path == custom
    assert ctx.binding_config.get_scheme().bindings == {"Tab": ["<Tab>"]}
    assert ctx.dialog_config.layout == "grouped"


def test_build_app_context_unreadable_keybindings_fall_back(tmp_path, monkeypatch):
    broken = tmp_path / "keys.json"
    broken.write_text("{oops", encoding="utf-8")
    monkeypatch.setenv("EQ_FOCUS_KEYBINDINGS_PATH", str(broken))
    messages: list[str] = []

    ctx = build_app_context(root=tmp_path, logger=lambda msg, *args: messages.append(msg % args))

    assert ctx.binding_config.active_scheme == "keyboard_default"
    assert messages and "using defaults" in messages[0]
