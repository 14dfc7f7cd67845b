"""
platform_generator.py

Seeded, finite platform sequences for challenge runs and gauntlet stages.

For each platform the stream is drawn in a fixed order:
    width, gap, height offset, type
Changing that order changes every layout for every existing seed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from game_types import PlatformType
from models import GauntletStage, PlatformSpec
from seeded_rng import RandomStream
from utils import as_int, clamp, is_finite_number

logger = logging.getLogger(__name__)

GROUND_Y = 460
PLATFORM_HEIGHT = 20
GAUNTLET_STAGE_COUNT = 5

CHALLENGE_PLATFORM_TYPES: Tuple[PlatformType, ...] = (
    PlatformType.SOLID,
    PlatformType.SOLID,
    PlatformType.SOLID,
    PlatformType.BOUNCE,
    PlatformType.CRUMBLE,
    PlatformType.MOVING,
    PlatformType.PHASE,
)


@dataclass(frozen=True)
class PlatformRanges:
    min_width: float
    max_width: float
    min_gap: float
    max_gap: float
    max_offset: float
    height: float = PLATFORM_HEIGHT

    @staticmethod
    def for_difficulty(
        factor: float, max_offset: Optional[float] = None
    ) -> "PlatformRanges":
        """Narrower platforms, wider gaps and taller steps as factor goes 0 -> 1."""
        if not is_finite_number(factor):
            factor = 0.0
        factor = clamp(factor, 0.0, 1.0)
        return PlatformRanges(
            min_width=max(60, 100 - factor * 30),
            max_width=max(80, 150 - factor * 40),
            min_gap=100 + factor * 30,
            max_gap=200 + factor * 40,
            max_offset=60 + factor * 75 if max_offset is None else max_offset,
        )

    @staticmethod
    def for_stage(stage_number: int) -> "PlatformRanges":
        return PlatformRanges.for_difficulty(
            stage_number / GAUNTLET_STAGE_COUNT, max_offset=60 + stage_number * 15
        )


CHALLENGE_RANGES = PlatformRanges(
    min_width=80, max_width=150, min_gap=120, max_gap=220, max_offset=80
)


@dataclass(frozen=True)
class StageTemplate:
    name: str
    types: Tuple[PlatformType, ...]
    target_distance: int
    speed: float


GAUNTLET_STAGES: Tuple[StageTemplate, ...] = (
    StageTemplate(
        "The Warm-Up",
        (PlatformType.SOLID, PlatformType.SOLID, PlatformType.BOUNCE),
        300,
        1.0,
    ),
    StageTemplate(
        "Shifting Ground",
        (PlatformType.SOLID, PlatformType.MOVING, PlatformType.PHASE, PlatformType.CRUMBLE),
        350,
        1.1,
    ),
    StageTemplate(
        "Hazard Run",
        (
            PlatformType.SOLID,
            PlatformType.BOUNCE,
            PlatformType.ICE,
            PlatformType.CONVEYOR,
            PlatformType.CRUMBLE,
        ),
        400,
        1.2,
    ),
    StageTemplate(
        "The Gauntlet",
        (
            PlatformType.SOLID,
            PlatformType.MOVING,
            PlatformType.PHASE,
            PlatformType.ICE,
            PlatformType.GRAVITY,
            PlatformType.BOUNCE,
        ),
        450,
        1.3,
    ),
    StageTemplate(
        "Final Stand",
        (
            PlatformType.SOLID,
            PlatformType.CRUMBLE,
            PlatformType.PHASE,
            PlatformType.MOVING,
            PlatformType.ICE,
            PlatformType.GRAVITY,
            PlatformType.BOUNCE,
        ),
        500,
        1.4,
    ),
)


def generate_platforms(
    seed: int,
    start_x: float,
    count: int,
    allowed_types: Sequence[PlatformType],
    ranges: PlatformRanges,
) -> List[PlatformSpec]:
    """Emit `count` platforms left to right starting after `start_x`.

    Successive x coordinates strictly increase (every gap is positive).
    """
    if not is_finite_number(start_x):
        logger.warning("non-finite start_x %r replaced with 0", start_x)
        start_x = 0
    count = max(0, as_int(count, 0))
    types = list(allowed_types) or [PlatformType.SOLID]

    rng = RandomStream(seed + start_x)
    platforms: List[PlatformSpec] = []
    current_x = start_x

    for _ in range(count):
        width = rng.next_int(ranges.min_width, ranges.max_width)
        gap = rng.next_int(ranges.min_gap, ranges.max_gap)
        height_offset = rng.next_int(0, ranges.max_offset)
        kind = rng.pick(types)

        platforms.append(
            PlatformSpec(
                x=current_x + gap,
                y=GROUND_Y - height_offset,
                width=width,
                height=ranges.height,
                type=kind,
            )
        )
        current_x += gap + width

    logger.debug(
        "generated %s platforms seed=%s start_x=%s frontier=%s",
        len(platforms),
        seed,
        start_x,
        current_x,
    )
    return platforms


def generate(
    seed: int,
    start_x: float,
    count: int,
    allowed_types: Sequence[PlatformType],
    difficulty_factor: float,
) -> List[PlatformSpec]:
    return generate_platforms(
        seed, start_x, count, allowed_types, PlatformRanges.for_difficulty(difficulty_factor)
    )


def generate_challenge_platforms(seed: int, start_x: float, count: int) -> List[PlatformSpec]:
    return generate_platforms(seed, start_x, count, CHALLENGE_PLATFORM_TYPES, CHALLENGE_RANGES)


def generate_gauntlet_stages(seed: int) -> List[GauntletStage]:
    """Five stages, each with its own seed offset drawn from a `seed + 9999` stream."""
    rng = RandomStream(seed + 9999)
    stages: List[GauntletStage] = []
    for i, template in enumerate(GAUNTLET_STAGES):
        stages.append(
            GauntletStage(
                stage_number=i + 1,
                seed=seed + rng.next_int(1000, 9999),
                target_distance=template.target_distance,
                allowed_types=template.types,
                speed_multiplier=template.speed,
                name=template.name,
            )
        )
    return stages


def generate_gauntlet_platforms(
    stage: GauntletStage, start_x: float, count: int
) -> List[PlatformSpec]:
    return generate_platforms(
        stage.seed,
        start_x,
        count,
        stage.allowed_types,
        PlatformRanges.for_stage(stage.stage_number),
    )


def frontier(platforms: Sequence[PlatformSpec]) -> float:
    """Rightmost x reached by a sequence (0 when empty)."""
    return max((p.right for p in platforms), default=0.0)


def is_monotonic(platforms: Sequence[PlatformSpec]) -> bool:
    return all(b.x > a.x for a, b in zip(platforms, platforms[1:]))


def all_finite(platforms: Sequence[PlatformSpec]) -> bool:
    return all(
        math.isfinite(v) for p in platforms for v in (p.x, p.y, p.width, p.height)
    )
