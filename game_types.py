from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, Tuple

Point = Tuple[float, float]


class PlatformType(str, Enum):
    SOLID = "solid"
    BOUNCE = "bounce"
    CRUMBLE = "crumble"
    MOVING = "moving"
    ICE = "ice"
    LAVA = "lava"
    PHASE = "phase"
    SPIKE = "spike"
    CONVEYOR = "conveyor"
    GRAVITY = "gravity"
    STICKY = "sticky"
    GLASS = "glass"
    SLOWMO = "slowmo"
    WALL = "wall"
    SECRET = "secret"

    @classmethod
    def parse(cls, raw: Any) -> "PlatformType":
        """Coerce an authored value into a PlatformType (unknown -> solid)."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.SOLID

    @property
    def lethal(self) -> bool:
        return self in LETHAL_PLATFORM_TYPES


LETHAL_PLATFORM_TYPES: FrozenSet[PlatformType] = frozenset(
    {PlatformType.LAVA, PlatformType.SPIKE}
)


class ChallengeType(str, Enum):
    SPRINT = "dailySprint"
    COIN_RUSH = "dailyCoinRush"
    ENDURANCE = "weeklyEndurance"
    GAUNTLET = "weeklyGauntlet"

    @property
    def is_weekly(self) -> bool:
        return self in (ChallengeType.ENDURANCE, ChallengeType.GAUNTLET)
