import json
import math

import pytest

from config_io import load_json_config
from config_parsing import load_app_config, parse_app_config
from models import AppConfig, EndlessConfig, MovementCapability, ValidationLimits
from utils import clamp, deep_get


def test_empty_config_is_all_defaults():
    assert parse_app_config({}) == AppConfig()


def test_sections_are_parsed():
    cfg = parse_app_config(
        {
            "capability": {"max_jump_height": 180, "dash_distance": 0},
            "validation": {"max_bpm": 220},
            "endless": {"base_gap": [100, 50], "max_iterations": 50},
            "store_file": "data/ch.json",
        }
    )
    assert cfg.capability == MovementCapability(max_jump_height=180, dash_distance=0)
    assert cfg.validation.max_bpm == 220
    assert cfg.validation.min_bpm == ValidationLimits().min_bpm
    assert cfg.endless.base_gap == (50, 100)
    assert cfg.endless.max_iterations == 50
    assert cfg.store_file == "data/ch.json"
    assert cfg.levels_dir == "levels"


def test_malformed_values_fall_back():
    cfg = parse_app_config(
        {
            "capability": {"max_jump_height": "high", "dash_distance": -40},
            "endless": {"hard_gap": "wide", "max_iterations": 0},
            "store_file": "",
            "validation": [],
        }
    )
    assert cfg.capability.max_jump_height == 150
    assert cfg.capability.dash_distance == 0
    assert cfg.endless.hard_gap == EndlessConfig().hard_gap
    assert cfg.endless.max_iterations == 1
    assert cfg.store_file == AppConfig().store_file
    assert cfg.validation == ValidationLimits()


def test_load_json_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_json_config(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text('{"store_file": }', encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        load_json_config(bad)
    assert "could not be parsed as JSON (line 1" in str(exc.value)


def test_load_app_config_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"levels_dir": "my_levels"}), encoding="utf-8")
    assert load_app_config(path).levels_dir == "my_levels"


def test_default_path_may_be_absent(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_app_config() == AppConfig()


def test_load_json_config_rejects_non_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        load_json_config(path)
    assert "must hold a JSON object" in str(exc.value)
    assert "not list" in str(exc.value)


def test_deep_get_follows_dotted_paths():
    cfg = {"endless": {"max_iterations": 50, "base_gap": None}, "store_file": "x.json"}
    assert deep_get(cfg, "endless.max_iterations", 0) == 50
    assert deep_get(cfg, "endless.base_gap", "dflt") is None
    assert deep_get(cfg, "store_file.name", "dflt") == "dflt"
    assert deep_get(cfg, "validation.max_bpm", 300) == 300


def test_clamp_keeps_nan():
    assert clamp(5, 1, 3) == 3
    assert clamp(-1.5, 0.0, 1.0) == 0.0
    assert math.isnan(clamp(float("nan"), 0.0, 1.0))
