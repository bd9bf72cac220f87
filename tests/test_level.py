"""
Tests for the Dungeon level
"""

import json
import os

import pytest

from tomb.ai.distance_field import UNREACHABLE, compute_distances
from tomb.core.settings_manager import SettingsManager
from tomb.levels.layout import Grid
from tomb.levels.level import Dungeon, find_pursuer_spawn


@pytest.fixture
def dungeon():
    return Dungeon.generate(15, 15, seed=3)


def test_dungeon_creation(dungeon):
    """Test basic dungeon creation."""
    assert dungeon.width == 15
    assert dungeon.height == 15
    assert dungeon.seed == 3
    assert dungeon.entrance == (0, 7)
    assert len(dungeon.objectives) == 3


def test_objectives_are_dead_ends(dungeon):
    for x, y in dungeon.objectives:
        assert dungeon.is_dead_end(x, y)
        assert y != dungeon.entrance[1]


def test_pursuer_spawns_farthest_from_entrance(dungeon):
    """Pursuer starts on the reachable cell farthest from the way in."""
    ex, ey = dungeon.entrance
    field = compute_distances(dungeon.grid, ex + 1, ey)
    sx, sy = dungeon.pursuer_spawn

    assert dungeon.grid.is_floor(sx, sy)
    assert field[sy, sx] == field[field != UNREACHABLE].max()


def test_find_pursuer_spawn_corridor():
    rows = [
        "111111",
        "000001",
        "111111",
    ]
    grid = Grid.from_rows(rows, (0, 1))
    assert find_pursuer_spawn(grid) == (4, 1)


def test_find_pursuer_spawn_east_entrance():
    """The search starts one step inside the entrance, whichever edge it is on."""
    rows = [
        "11111",
        "10000",
        "11110",
        "11110",
        "11111",
    ]
    grid = Grid.from_rows(rows, (4, 1))
    # From (3, 1) the branch end is three steps away and the west end two
    assert find_pursuer_spawn(grid) == (4, 3)


def test_find_pursuer_spawn_north_entrance():
    rows = [
        "11011",
        "11011",
        "10001",
        "11111",
    ]
    grid = Grid.from_rows(rows, (2, 0))
    assert find_pursuer_spawn(grid) == (1, 2)


def test_same_seed_same_dungeon():
    a = Dungeon.generate(21, 21, seed=77)
    b = Dungeon.generate(21, 21, seed=77)
    assert a.grid == b.grid
    assert a.objectives == b.objectives
    assert a.pursuer_spawn == b.pursuer_spawn


def test_artifact_count_respected():
    dungeon = Dungeon.generate(21, 21, seed=5, artifact_count=5)
    assert len(dungeon.objectives) == 5


def test_from_settings(tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    settings.settings["dungeon"].update({"width": 11, "height": 13, "seed": 8, "artifact_count": 2})

    dungeon = Dungeon.from_settings(settings)
    assert (dungeon.width, dungeon.height) == (11, 13)
    assert dungeon.seed == 8
    assert len(dungeon.objectives) == 2


def test_dungeon_save_load(tmp_path, dungeon):
    """Test dungeon save and load."""
    save_path = os.path.join(tmp_path, "crypt.json")
    dungeon.name = "Test Crypt"
    dungeon.save_to_file(save_path)

    assert os.path.exists(save_path)

    loaded = Dungeon.load_from_file(save_path)

    assert loaded.grid == dungeon.grid
    assert loaded.objectives == dungeon.objectives
    assert loaded.pursuer_spawn == dungeon.pursuer_spawn
    assert loaded.seed == dungeon.seed
    assert loaded.name == "Test Crypt"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Dungeon.load_from_file(os.path.join(tmp_path, "missing.json"))


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        Dungeon.load_from_file(str(path))


def test_load_missing_rows(tmp_path):
    path = tmp_path / "norows.json"
    path.write_text(json.dumps({"entrance": [0, 1]}))
    with pytest.raises(KeyError):
        Dungeon.load_from_file(str(path))


def test_render_marks(dungeon):
    text = dungeon.render()
    lines = text.splitlines()

    assert len(lines) == dungeon.height
    assert all(len(line) == dungeon.width for line in lines)
    ex, ey = dungeon.entrance
    assert lines[ey][ex] == 'E'
    px, py = dungeon.pursuer_spawn
    assert lines[py][px] == 'P'
    # The pursuer may start on top of an artifact
    shown = set(dungeon.objectives) - {dungeon.pursuer_spawn}
    assert text.count('A') == len(shown)


def test_str_summary(dungeon):
    summary = str(dungeon)
    assert "15x15" in summary
    assert "seed=3" in summary


@pytest.mark.parametrize("field,value", [
    ("pursuer_spawn", [40, 40]),
    ("pursuer_spawn", [0, 0]),
    ("objectives", [[-1, 3]]),
])
def test_load_rejects_positions_off_the_floor(tmp_path, dungeon, field, value):
    data = dungeon.to_dict()
    data[field] = value
    path = tmp_path / "bad_positions.json"
    path.write_text(json.dumps(data))

    with pytest.raises(ValueError):
        Dungeon.load_from_file(str(path))
