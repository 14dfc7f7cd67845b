import math
from datetime import datetime

from clock import FixedClock
from challenge_scheduler import ChallengeScheduler
from coin_generator import (
    MAGNET_EVERY,
    TRAIL_MAX_COINS,
    generate_challenge_coins,
    generate_coin_rush_coins,
)
from courses import build_challenge_course, build_gauntlet_courses
from game_types import ChallengeType
from models import PlatformSpec
from platform_generator import generate_challenge_platforms


def test_coin_rush_is_deterministic():
    platforms = generate_challenge_platforms(11, 0, 30)
    assert generate_coin_rush_coins(11, platforms) == generate_coin_rush_coins(11, platforms)


def test_magnet_every_fifth_platform():
    for count in (4, 5, 12, 40):
        platforms = generate_challenge_platforms(808, 0, count)
        coins = generate_coin_rush_coins(808, platforms)
        magnets = [c for c in coins if c.is_magnet]
        assert len(magnets) == count // MAGNET_EVERY


def test_magnets_sit_above_their_platform():
    platforms = generate_challenge_platforms(5, 0, 10)
    magnets = [c for c in generate_coin_rush_coins(5, platforms) if c.is_magnet]
    for magnet, platform in zip(magnets, (platforms[4], platforms[9])):
        assert magnet.x == platform.x + platform.width / 2
        assert platform.y - 110 <= magnet.y <= platform.y - 80


def test_every_platform_gets_a_cluster():
    platforms = generate_challenge_platforms(64, 0, 20)
    coins = generate_coin_rush_coins(64, platforms)
    # three to five cluster coins per platform, plus extras
    assert len(coins) >= 3 * len(platforms)
    assert all(math.isfinite(c.x) and math.isfinite(c.y) for c in coins)


def test_coins_do_not_disturb_platforms():
    before = generate_challenge_platforms(123, 0, 25)
    generate_coin_rush_coins(123, before)
    assert generate_challenge_platforms(123, 0, 25) == before


def test_gap_trail_limited_to_six_coins():
    # one huge gap: the trail is the only source of coins between the platforms
    platforms = [
        PlatformSpec(0, 460, 100, 20),
        PlatformSpec(2000, 460, 100, 20),
    ]
    coins = generate_coin_rush_coins(1, platforms)
    in_gap = [c for c in coins if 240 < c.x < 2000 - 40]
    assert len(in_gap) <= TRAIL_MAX_COINS


def test_simple_challenge_coins_are_sparse():
    platforms = generate_challenge_platforms(99, 0, 100)
    coins = generate_challenge_coins(99, platforms)
    assert 0 < len(coins) < len(platforms)
    assert not any(c.is_magnet for c in coins)


def test_course_for_coin_rush_day_has_magnets():
    # 2024-01-15 is a Coin Dash day
    daily = ChallengeScheduler(FixedClock(datetime(2024, 1, 15, 12))).daily_challenge()
    assert daily.type == ChallengeType.COIN_RUSH
    course = build_challenge_course(daily, count=10)
    assert len(course.platforms) == 10
    assert sum(c.is_magnet for c in course.coins) == 2
    assert course.to_dict()["coins"][0].keys() == {"x", "y", "isMagnet"}


def test_gauntlet_courses_one_per_stage():
    courses = build_gauntlet_courses(1000, count=8)
    assert [stage.stage_number for stage, _ in courses] == [1, 2, 3, 4, 5]
    assert all(len(course.platforms) == 8 for _, course in courses)
