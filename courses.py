from __future__ import annotations

from typing import List, Tuple

from coin_generator import generate_challenge_coins, generate_coin_rush_coins
from game_types import ChallengeType
from models import Challenge, GauntletStage, GeneratedCourse
from platform_generator import (
    generate_challenge_platforms,
    generate_gauntlet_platforms,
    generate_gauntlet_stages,
)

DEFAULT_PLATFORM_COUNT = 40


def build_challenge_course(
    challenge: Challenge, start_x: float = 0, count: int = DEFAULT_PLATFORM_COUNT
) -> GeneratedCourse:
    """Platforms plus coins for a seeded challenge run."""
    platforms = generate_challenge_platforms(challenge.seed, start_x, count)
    if challenge.type == ChallengeType.COIN_RUSH:
        coins = generate_coin_rush_coins(challenge.seed, platforms)
    else:
        coins = generate_challenge_coins(challenge.seed, platforms)
    return GeneratedCourse(platforms=platforms, coins=coins)


def build_gauntlet_courses(
    seed: int, start_x: float = 0, count: int = DEFAULT_PLATFORM_COUNT
) -> List[Tuple[GauntletStage, GeneratedCourse]]:
    courses: List[Tuple[GauntletStage, GeneratedCourse]] = []
    for stage in generate_gauntlet_stages(seed):
        platforms = generate_gauntlet_platforms(stage, start_x, count)
        coins = generate_challenge_coins(stage.seed, platforms)
        courses.append((stage, GeneratedCourse(platforms=platforms, coins=coins)))
    return courses
