from __future__ import annotations

import json

from eq_controller.controller.dialog_config import DialogConfig, is_dev_build, load_dialog_config, parse_dialog_config


def test_defaults_match_canonical_dialog() -> None:
    config = DialogConfig()
    assert config.layout == "grouped"
    assert config.fader_mode == "nested"
    assert (config.fader_min, config.fader_max) == (-20, 20)
    assert config.readout_ms == 1500
    assert config.initial_focus_delay_ms == 100
    assert config.emulate_platform_tab is True


def test_parse_clamps_and_normalises() -> None:
    config = parse_dialog_config(
        {
            "layout": " Standard ",
            "fader_mode": "FLAT",
            "readout_ms": 5,
            "initial_focus_delay_ms": 99999,
            "fader_min": -200,
            "fader_max": "12",
            "emulate_platform_tab": "off",
            "unknown": 1,
        }
    )
    assert config.layout == "standard"
    assert config.fader_mode == "flat"
    assert config.readout_ms == 100
    assert config.initial_focus_delay_ms == 2000
    assert (config.fader_min, config.fader_max) == (-96, 12)
    assert config.emulate_platform_tab is False


def test_parse_ignores_bad_values() -> None:
    config = parse_dialog_config(
        {"layout": "compact", "fader_mode": 3, "readout_ms": True, "initial_focus_delay_ms": "soon"}
    )
    assert config == DialogConfig()


def test_inverted_fader_range_reverts_to_base() -> None:
    base = DialogConfig(fader_min=-12, fader_max=12)
    config = parse_dialog_config({"fader_min": 10, "fader_max": 10}, base=base)
    assert (config.fader_min, config.fader_max) == (-12, 12)


def test_load_reads_settings_file(tmp_path) -> None:
    path = tmp_path / "dialog_settings.json"
    path.write_text(json.dumps({"fader_mode": "roving", "readout_ms": 900}), encoding="utf-8")

    config = load_dialog_config(path)

    assert config.fader_mode == "roving"
    assert config.readout_ms == 900


def test_load_falls_back_on_missing_or_broken_files(tmp_path) -> None:
    assert load_dialog_config(tmp_path / "missing.json") == DialogConfig()
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_dialog_config(broken) == DialogConfig()
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    assert load_dialog_config(listing) == DialogConfig()


def test_dev_build_flag(monkeypatch) -> None:
    monkeypatch.setenv("EQ_FOCUS_DEV_MODE", "yes")
    assert is_dev_build() is True
    monkeypatch.setenv("EQ_FOCUS_DEV_MODE", "0")
    assert is_dev_build() is False
    monkeypatch.delenv("EQ_FOCUS_DEV_MODE")
    assert is_dev_build() is False
