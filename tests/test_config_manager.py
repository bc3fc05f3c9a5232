import json

import pytest

from Calculator import config_manager, error as E


@pytest.fixture
def config_paths(tmp_path, monkeypatch):
    config_json = tmp_path / "config.json"
    ui_strings = tmp_path / "ui_strings.json"
    monkeypatch.setattr(config_manager, "config_json", config_json)
    monkeypatch.setattr(config_manager, "ui_strings", ui_strings)
    return config_json, ui_strings


def test_missing_file_falls_back_to_defaults(config_paths):
    assert config_manager.load_setting_value("all") == config_manager.DEFAULT_SETTINGS
    assert config_manager.load_setting_value("precision") == 32


def test_corrupt_file_falls_back_to_defaults(config_paths):
    config_json, _ = config_paths
    config_json.write_text("{not json", encoding="utf-8")
    assert config_manager.load_setting_value("darkmode") is False


def test_partial_file_is_merged_with_defaults(config_paths):
    config_json, _ = config_paths
    config_json.write_text('{"precision": 5}', encoding="utf-8")
    settings = config_manager.load_setting_value("all")
    assert settings["precision"] == 5
    assert settings["live_evaluation"] is True


def test_unknown_key(config_paths):
    assert config_manager.load_setting_value("no_such_key") == 0


def test_save_and_reload(config_paths):
    config_json, _ = config_paths
    settings = dict(config_manager.DEFAULT_SETTINGS, darkmode=True, precision=8)
    assert config_manager.save_setting(settings) == settings
    assert json.loads(config_json.read_text(encoding="utf-8"))["darkmode"] is True
    assert config_manager.load_precision() == 8


def test_save_failure_returns_empty_dict(tmp_path, monkeypatch):
    monkeypatch.setattr(config_manager, "config_json", tmp_path / "missing_dir" / "config.json")
    assert config_manager.save_setting({"precision": 1}) == {}


def test_descriptions(config_paths):
    _, ui_strings = config_paths
    ui_strings.write_text('{"precision": "Result precision"}', encoding="utf-8")
    assert config_manager.load_setting_description("precision") == "Result precision"
    assert config_manager.load_setting_description("debug") == "debug"
    assert config_manager.load_setting_description("all") == {"precision": "Result precision"}


@pytest.mark.parametrize("value", ['-1', '"12"', 'true', '1.5'])
def test_invalid_precision(config_paths, value):
    config_json, _ = config_paths
    config_json.write_text('{"precision": %s}' % value, encoding="utf-8")
    with pytest.raises(E.MathError) as info:
        config_manager.load_precision()
    assert info.value.code == "6000"


def test_shipped_files_cover_every_setting():
    shipped = json.loads(config_manager.config_json.read_text(encoding="utf-8"))
    descriptions = json.loads(config_manager.ui_strings.read_text(encoding="utf-8"))
    assert set(shipped) == set(config_manager.DEFAULT_SETTINGS)
    assert set(descriptions) == set(config_manager.DEFAULT_SETTINGS)
