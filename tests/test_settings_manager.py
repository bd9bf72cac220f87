"""
Tests for the settings manager
"""

import json

from tomb.core.settings_manager import DEFAULT_SETTINGS, SettingsManager


def test_defaults_when_no_file(tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    assert settings.get("dungeon", "width") == DEFAULT_SETTINGS["dungeon"]["width"]
    assert settings.get("pursuer", "randomize_ties") is False
    assert settings.get("missing", "key") is None


def test_defaults_not_shared(tmp_path):
    """Changing one manager's settings leaves the defaults untouched."""
    settings = SettingsManager(str(tmp_path / "settings.json"))
    settings.settings["dungeon"]["width"] = 99
    assert DEFAULT_SETTINGS["dungeon"]["width"] != 99


def test_partial_file_merges_with_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"dungeon": {"seed": 1234}}))

    settings = SettingsManager(str(path))
    assert settings.get("dungeon", "seed") == 1234
    assert settings.get("dungeon", "artifact_count") == DEFAULT_SETTINGS["dungeon"]["artifact_count"]


def test_set_saves(tmp_path):
    path = tmp_path / "settings.json"
    settings = SettingsManager(str(path))
    settings.set("pursuer", "speed_multiplier", 2.0)

    saved = json.loads(path.read_text())
    assert saved["pursuer"]["speed_multiplier"] == 2.0
    assert SettingsManager(str(path)).get("pursuer", "speed_multiplier") == 2.0


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{oops")

    settings = SettingsManager(str(path))
    assert settings.get("dungeon", "height") == DEFAULT_SETTINGS["dungeon"]["height"]
