"""
coin_generator.py

Coins laid over an already generated platform sequence. Coins draw from their
own stream (challenge seed + COIN_RUSH_SALT), so edits here never move a
platform for an existing seed.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from models import CoinSpec, PlatformSpec
from platform_generator import GROUND_Y
from seeded_rng import RandomStream

logger = logging.getLogger(__name__)

COIN_RUSH_SALT = 7777
CLUSTER_SPACING = 28
ARC_CHANCE = 0.7
ARC_SPAN = 120
COLUMN_CHANCE = 0.4
COLUMN_SPACING = 30
MAGNET_EVERY = 5
TRAIL_MIN_GAP = 80
TRAIL_CHANCE = 0.6
TRAIL_SPACING = 30
TRAIL_MAX_COINS = 6
SIMPLE_COIN_CHANCE = 0.4


def _place_cluster(rng: RandomStream, platform: PlatformSpec, coins: List[CoinSpec]) -> None:
    center_x = platform.x + platform.width / 2
    size = rng.next_int(3, 5)
    for c in range(size):
        offset_x = (c - size // 2) * CLUSTER_SPACING
        coins.append(CoinSpec(center_x + offset_x, platform.y - 40 - rng.next_int(0, 15)))


def _place_arc(rng: RandomStream, platform: PlatformSpec, coins: List[CoinSpec]) -> None:
    """Jump-path arc after the platform, highest at its midpoint."""
    start_x = platform.x + platform.width + 20
    count = rng.next_int(3, 6)
    for a in range(count):
        t = a / ((count - 1) or 1)
        arc_y = GROUND_Y - 80 - math.sin(t * math.pi) * rng.next_int(60, 120)
        coins.append(CoinSpec(start_x + t * ARC_SPAN, arc_y))


def _place_column(rng: RandomStream, platform: PlatformSpec, coins: List[CoinSpec]) -> None:
    center_x = platform.x + platform.width / 2
    count = rng.next_int(2, 4)
    for v in range(count):
        coins.append(CoinSpec(center_x, platform.y - 50 - v * COLUMN_SPACING))


def _place_gap_trails(
    rng: RandomStream, platforms: Sequence[PlatformSpec], coins: List[CoinSpec]
) -> None:
    for left, right in zip(platforms, platforms[1:]):
        gap_start = left.x + left.width
        gap_width = right.x - gap_start
        if gap_width > TRAIL_MIN_GAP and rng.next() < TRAIL_CHANCE:
            count = min(math.floor(gap_width / TRAIL_SPACING), TRAIL_MAX_COINS)
            for t in range(count):
                frac = (t + 1) / (count + 1)
                coins.append(
                    CoinSpec(gap_start + frac * gap_width, GROUND_Y - 60 - rng.next_int(20, 80))
                )


def generate_coin_rush_coins(seed: int, platforms: Sequence[PlatformSpec]) -> List[CoinSpec]:
    """Dense layered coins for Coin Dash runs, with a magnet coin every 5th platform."""
    rng = RandomStream(seed + COIN_RUSH_SALT)
    coins: List[CoinSpec] = []
    magnet_counter = 0

    for platform in platforms:
        _place_cluster(rng, platform, coins)

        if rng.next() < ARC_CHANCE:
            _place_arc(rng, platform, coins)

        if rng.next() < COLUMN_CHANCE:
            _place_column(rng, platform, coins)

        magnet_counter += 1
        if magnet_counter >= MAGNET_EVERY:
            coins.append(
                CoinSpec(
                    platform.x + platform.width / 2,
                    platform.y - 70 - rng.next_int(10, 40),
                    is_magnet=True,
                )
            )
            magnet_counter = 0

    _place_gap_trails(rng, platforms, coins)

    logger.debug("placed %s coins over %s platforms", len(coins), len(platforms))
    return coins


def generate_challenge_coins(seed: int, platforms: Sequence[PlatformSpec]) -> List[CoinSpec]:
    """Sparse coins: a single coin above some platforms."""
    rng = RandomStream(seed)
    coins: List[CoinSpec] = []
    for platform in platforms:
        if rng.next() < SIMPLE_COIN_CHANCE:
            coins.append(
                CoinSpec(platform.x + platform.width / 2, platform.y - 40 - rng.next_int(0, 30))
            )
    return coins
