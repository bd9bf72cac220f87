import copy
import json
import os
from typing import Any, Dict, Optional

from tomb.core.constants import (
    ARTIFACT_COUNT, CATCH_RADIUS, DUNGEON_HEIGHT, DUNGEON_WIDTH, LOOP_CHANCE,
    SETTINGS_FILE
)
from tomb.core.logger import get_logger

DEFAULT_SETTINGS = {
    "dungeon": {
        "width": DUNGEON_WIDTH,
        "height": DUNGEON_HEIGHT,
        "artifact_count": ARTIFACT_COUNT,
        "seed": None,  # None = time-derived
        "loop_chance": LOOP_CHANCE
    },
    "pursuer": {
        "speed_multiplier": 1.0,
        "catch_radius": CATCH_RADIUS,
        "randomize_ties": False
    }
}


class SettingsManager:
    def __init__(self, path: Optional[str] = None):
        self.path = path or SETTINGS_FILE
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.load()

    def load(self):
        """Load settings from file."""
        if not os.path.exists(self.path):
            return

        try:
            with open(self.path, 'r') as f:
                saved = json.load(f)
            # Merge with defaults to ensure all keys exist
            self._recursive_update(self.settings, saved)
            get_logger().info(f"Settings loaded from {self.path}")
        except (OSError, json.JSONDecodeError) as e:
            get_logger().error(f"Failed to load settings from {self.path}: {e}")

    def save(self):
        """Save settings to file."""
        try:
            with open(self.path, 'w') as f:
                json.dump(self.settings, f, indent=4)
            get_logger().info(f"Settings saved to {self.path}")
        except OSError as e:
            get_logger().error(f"Failed to save settings to {self.path}: {e}")

    def _recursive_update(self, base: Dict, update: Dict):
        """Update dictionary recursively, preserving structure."""
        for k, v in update.items():
            if k in base and isinstance(base[k], dict) and isinstance(v, dict):
                self._recursive_update(base[k], v)
            else:
                base[k] = v

    def get(self, category: str, key: str) -> Any:
        return self.settings.get(category, {}).get(key)

    def set(self, category: str, key: str, value: Any):
        if category not in self.settings:
            self.settings[category] = {}
        self.settings[category][key] = value
        self.save()
