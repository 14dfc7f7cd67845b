import json
from datetime import datetime

import pytest

from clock import FixedClock, epoch_ms
from level_library import (
    LevelFormatError,
    LevelLibrary,
    create_new_level,
    level_from_json,
    level_to_json,
)
from level_validator import validate_level

NOW = datetime(2024, 8, 1, 10, 0)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def library(tmp_path, clock):
    return LevelLibrary(tmp_path / "levels", clock)


def test_new_level_is_playable(clock):
    level = create_new_level("First", "me", clock)
    assert level.id.startswith(f"level_{epoch_ms(NOW)}_")
    assert level.bpm == 128
    assert len(level.platforms) == 2
    assert level.created_at == level.updated_at == epoch_ms(NOW)
    # the starter gap is wide, so the editor shows warnings but no errors
    assert validate_level(level).valid


def test_export_import_round_trip(clock):
    level = create_new_level("Shared", "me", clock)
    imported = level_from_json(level_to_json(level), clock)
    assert imported.name == "Shared (Imported)"
    assert imported.id != level.id
    assert imported.platforms == level.platforms
    assert imported.goal == level.goal
    assert imported.player_start == level.player_start


def test_import_defaults_coins(clock):
    text = json.dumps(
        {
            "name": "No Coins",
            "platforms": [],
            "playerStart": {"x": 1, "y": 2},
            "goal": {"x": 300, "y": 380, "width": 60, "height": 80},
            "coins": "lots",
        }
    )
    level = level_from_json(text, clock)
    assert level.coins == []
    assert level.platforms == []


@pytest.mark.parametrize(
    "text",
    [
        "{broken",
        "[1, 2]",
        json.dumps({"name": "x", "platforms": []}),
        json.dumps({"platforms": [], "playerStart": {}, "goal": {}}),
    ],
)
def test_import_rejects_malformed(text, clock):
    with pytest.raises(LevelFormatError):
        level_from_json(text, clock)


def test_save_load_list_delete(library, clock):
    first = library.save(create_new_level("A", clock=clock))
    clock.moment = datetime(2024, 8, 2)
    second = library.save(create_new_level("B", clock=clock))

    assert library.load(first.id).name == "A"
    # case-insensitive lookup
    assert library.load(second.id.upper()).name == "B"
    assert [lvl.name for lvl in library.list_levels()] == ["B", "A"]

    assert library.delete(first.id)
    assert not library.delete(first.id)
    with pytest.raises(FileNotFoundError):
        library.load(first.id)


def test_duplicate(library, clock):
    original = library.save(create_new_level("Orig", clock=clock))
    clock.moment = datetime(2024, 9, 1)
    copy = library.duplicate(original.id)
    assert copy.name == "Orig (Copy)"
    assert copy.id != original.id
    assert copy.created_at == epoch_ms(datetime(2024, 9, 1))
    assert len(library.list_levels()) == 2


def test_list_skips_corrupt_files(library, clock):
    library.save(create_new_level("Good", clock=clock))
    (library.levels_dir / "bad.json").write_text("{nope", encoding="utf-8")
    assert [lvl.name for lvl in library.list_levels()] == ["Good"]


def test_list_empty_dir(tmp_path):
    assert LevelLibrary(tmp_path / "missing").list_levels() == []


def test_import_into_library(library, clock):
    text = level_to_json(create_new_level("Friend's", clock=clock))
    level = library.import_level(text)
    assert library.load(level.id).name == "Friend's (Imported)"
    assert json.loads(library.export_level(level.id))["name"] == "Friend's (Imported)"
