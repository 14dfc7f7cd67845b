from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from models import ChallengeData

logger = logging.getLogger(__name__)


class ChallengeStore(Protocol):
    def load(self) -> ChallengeData:
        ...

    def save(self, data: ChallengeData) -> None:
        ...


class MemoryChallengeStore:
    """In-process store; keeps a private copy so callers can't mutate it behind our back."""

    def __init__(self, data: Optional[ChallengeData] = None) -> None:
        self._data = data.copy() if data is not None else ChallengeData()
        self.saves = 0

    def load(self) -> ChallengeData:
        return self._data.copy()

    def save(self, data: ChallengeData) -> None:
        self._data = data.copy()
        self.saves += 1


class JsonChallengeStore:
    """Challenge record kept in a single local JSON file (single writer)."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> ChallengeData:
        if not self.path.exists():
            return ChallengeData()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("failed to load challenge data from %s: %s", self.path, e)
            return ChallengeData()
        return ChallengeData.from_dict(raw)

    def save(self, data: ChallengeData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data.to_dict(), indent=2), encoding="utf-8")
        tmp.replace(self.path)
        logger.debug("saved challenge data to %s", self.path)
