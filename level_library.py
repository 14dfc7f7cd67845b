from __future__ import annotations

import json
import logging
import random
import string
from pathlib import Path
from typing import Any, Dict, List, Optional

from clock import Clock, SystemClock, epoch_ms
from game_types import PlatformType
from models import CustomLevel, Goal, PlatformSpec

logger = logging.getLogger(__name__)

SCREEN_HEIGHT = 540
STARTER_BPM = 128
IMPORTED_SUFFIX = " (Imported)"
COPY_SUFFIX = " (Copy)"

_ID_ALPHABET = string.ascii_lowercase + string.digits


class LevelFormatError(ValueError):
    """An authored level document is not valid JSON or lacks a required part."""


def generate_level_id(clock: Optional[Clock] = None) -> str:
    now_ms = epoch_ms((clock or SystemClock()).now())
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"level_{now_ms}_{suffix}"


def create_new_level(
    name: str = "Untitled Level", author: str = "Player", clock: Optional[Clock] = None
) -> CustomLevel:
    """Starter level: a ground platform under the start and one under the goal."""
    clock = clock or SystemClock()
    ground_y = SCREEN_HEIGHT - 40
    now_ms = epoch_ms(clock.now())
    return CustomLevel(
        id=generate_level_id(clock),
        name=name,
        author=author,
        bpm=STARTER_BPM,
        player_start=(100.0, ground_y - 50.0),
        goal=Goal(x=2000, y=ground_y - 80, width=60, height=80),
        platforms=[
            PlatformSpec(x=0, y=ground_y, width=400, height=40, type=PlatformType.SOLID),
            PlatformSpec(x=1900, y=ground_y, width=200, height=40, type=PlatformType.SOLID),
        ],
        coins=[],
        created_at=now_ms,
        updated_at=now_ms,
    )


def level_to_json(level: CustomLevel) -> str:
    return json.dumps(level.to_dict(), indent=2)


def _require_parts(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise LevelFormatError("Level document must be a JSON object")
    missing = []
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        missing.append("name")
    if not isinstance(raw.get("platforms"), list):
        missing.append("platforms")
    if not isinstance(raw.get("playerStart"), dict):
        missing.append("playerStart")
    if not isinstance(raw.get("goal"), dict):
        missing.append("goal")
    if missing:
        raise LevelFormatError(f"Invalid level format: missing {', '.join(missing)}")
    return raw


def level_from_json(text: str, clock: Optional[Clock] = None) -> CustomLevel:
    """Import a shared level document.

    The imported level gets a fresh id and timestamps, and " (Imported)" is
    appended to its name so it never collides with the author's original.

    Raises:
        LevelFormatError: If the text is not JSON or a required part is missing.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise LevelFormatError(
            f"Level is not valid JSON (line {e.lineno}, col {e.colno}): {e.msg}"
        ) from e

    level = CustomLevel.from_dict(_require_parts(raw))

    clock = clock or SystemClock()
    now_ms = epoch_ms(clock.now())
    level.id = generate_level_id(clock)
    level.created_at = now_ms
    level.updated_at = now_ms
    level.name = f"{level.name}{IMPORTED_SUFFIX}"
    return level


def read_level_file(path: Path) -> CustomLevel:
    """Parse a level file as-is (no import renaming); used by the validator CLI."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LevelFormatError(
            f"{path} is not valid JSON (line {e.lineno}, col {e.colno}): {e.msg}"
        ) from e
    if not isinstance(raw, dict):
        raise LevelFormatError(f"{path} does not contain a level object")
    return CustomLevel.from_dict(raw)


class LevelLibrary:
    """Authored levels kept as one JSON file per level id in a directory."""

    def __init__(self, levels_dir: Path, clock: Optional[Clock] = None) -> None:
        self.levels_dir = levels_dir
        self.clock = clock or SystemClock()

    def _path_for(self, level_id: str) -> Path:
        return self.levels_dir / f"{level_id}.json"

    def resolve(self, level_id: str) -> Optional[Path]:
        """Find the file for a level id (case-insensitive)."""
        exact = self._path_for(level_id)
        if exact.exists():
            return exact
        if self.levels_dir.exists():
            for f in self.levels_dir.glob("*.json"):
                if f.stem.lower() == level_id.lower():
                    return f
        return None

    def save(self, level: CustomLevel) -> CustomLevel:
        if not level.id:
            level.id = generate_level_id(self.clock)
        now_ms = epoch_ms(self.clock.now())
        if not level.created_at:
            level.created_at = now_ms
        level.updated_at = now_ms

        self.levels_dir.mkdir(parents=True, exist_ok=True)
        path = self._path_for(level.id)
        path.write_text(level_to_json(level), encoding="utf-8")
        logger.info("saved level %s (%r) to %s", level.id, level.name, path)
        return level

    def load(self, level_id: str) -> CustomLevel:
        path = self.resolve(level_id)
        if path is None:
            raise FileNotFoundError(
                f"Level '{level_id}' not found.\n"
                f"- Looked for file: {self._path_for(level_id)}"
            )
        return read_level_file(path)

    def list_levels(self) -> List[CustomLevel]:
        """All readable levels, most recently updated first."""
        if not self.levels_dir.exists():
            return []
        levels: List[CustomLevel] = []
        for f in sorted(self.levels_dir.glob("*.json")):
            try:
                levels.append(read_level_file(f))
            except (OSError, LevelFormatError) as e:
                logger.warning("skipping unreadable level %s: %s", f, e)
        levels.sort(key=lambda lvl: lvl.updated_at, reverse=True)
        return levels

    def delete(self, level_id: str) -> bool:
        path = self.resolve(level_id)
        if path is None:
            return False
        path.unlink()
        logger.info("deleted level %s", level_id)
        return True

    def duplicate(self, level_id: str) -> CustomLevel:
        original = self.load(level_id)
        copy = CustomLevel.from_dict(original.to_dict())
        copy.id = generate_level_id(self.clock)
        copy.name = f"{original.name}{COPY_SUFFIX}"
        copy.created_at = 0
        return self.save(copy)

    def import_level(self, text: str) -> CustomLevel:
        return self.save(level_from_json(text, self.clock))

    def export_level(self, level_id: str) -> str:
        return level_to_json(self.load(level_id))
