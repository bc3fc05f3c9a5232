# config_manager.py
import json
import logging
from pathlib import Path

from . import error as E

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent / "config.json"
ui_strings = Path(__file__).resolve().parent / "ui_strings.json"


# Used whenever config.json is missing, corrupt or lacks a key
DEFAULT_SETTINGS = {
    "precision": 32,
    "live_evaluation": True,
    "debug": False,
    "darkmode": False,
    "copy_expression_on_shift": True,
}


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}


def load_setting_value(key_value):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    settings_dict = _read_json(ui_strings)

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, key_value)


def save_setting(settings_dict):
    try:
        with open(config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError as e:
        logger.error("Could not save settings to %s: %s", config_json, e)
        return {}


def load_precision():
    """Return the configured result precision as a non-negative int."""
    value = load_setting_value("precision")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise E.MathError(f"Invalid precision: {value!r}", code="6000")
    return value
