"""
endless_generator.py

Unseeded runner-mode generator that keeps a live platform buffer ahead of the
camera. Difficulty ramps with distance traveled:

    difficulty = clamp(traveled_distance / 3000, 0, 1)

Liveness guarantees:
- extend_to() runs at most 200 loop turns per call (config can only lower it).
- A NaN difficulty stops the call by jumping the frontier to the target.
- The frontier never moves left; a non-finite or stalled step is replaced by a
  fixed forward jump.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Tuple

from game_types import PlatformType
from models import EXTEND_ITERATION_CAP, CoinSpec, EndlessConfig, PlatformSpec
from seeded_rng import RandomSource
from utils import clamp, is_finite_number, lerp

logger = logging.getLogger(__name__)

SPIKE_WIDTH = 30
SPIKE_HEIGHT = 25
COIN_CHANCE = 0.4
COIN_LIFT = 60

# (type, weight, unlocked above difficulty)
TYPE_WEIGHTS: Tuple[Tuple[PlatformType, float, float], ...] = (
    (PlatformType.SOLID, 70, -1.0),
    (PlatformType.CRUMBLE, 10, 0.2),
    (PlatformType.BOUNCE, 12, 0.4),
    (PlatformType.ICE, 8, 0.6),
)


class EndlessDifficultyGenerator:
    """Extends a platform buffer to the right as the camera advances."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        config: Optional[EndlessConfig] = None,
    ) -> None:
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.config = config or EndlessConfig()
        self.platforms: List[PlatformSpec] = []
        self.coins: List[CoinSpec] = []
        self.next_platform_x = 0.0
        self.traveled_distance = 0.0
        # The opening ground is placed once per run; pruning never re-arms it.
        self.started = False

    def reset(self) -> None:
        self.platforms = []
        self.coins = []
        self.next_platform_x = 0.0
        self.traveled_distance = 0.0
        self.started = False

    def update_distance(self, distance: float) -> None:
        self.traveled_distance = distance

    def difficulty(self) -> float:
        """0..1, or NaN if the distance state is corrupt."""
        scale = self.config.difficulty_distance
        if not scale:
            return float("nan")
        return clamp(self.traveled_distance / scale, 0.0, 1.0)

    # ----------------------------
    # Generation
    # ----------------------------

    def extend_to(self, until_x: float) -> List[PlatformSpec]:
        """Generate platforms until the frontier reaches `until_x`. Returns the new ones."""
        cfg = self.config
        emitted: List[PlatformSpec] = []
        iterations = 0
        limit = min(cfg.max_iterations, EXTEND_ITERATION_CAP)

        while self.next_platform_x < until_x and iterations < limit:
            iterations += 1

            if not self.started:
                self.started = True
                ground = PlatformSpec(
                    x=0.0,
                    y=cfg.ground_y,
                    width=cfg.first_platform_width,
                    height=cfg.platform_height,
                    type=PlatformType.SOLID,
                )
                self._emit(ground, emitted)
                if math.isfinite(ground.right) and ground.right > self.next_platform_x:
                    self.next_platform_x = ground.right
                else:
                    self.next_platform_x += cfg.forced_advance
                continue

            difficulty = self.difficulty()
            if not math.isfinite(difficulty):
                logger.warning(
                    "difficulty is not finite (distance=%r), skipping to %s",
                    self.traveled_distance,
                    until_x,
                )
                self.next_platform_x = until_x
                break

            previous = self.next_platform_x
            platform = self._next_platform(previous, difficulty)

            new_x = platform.x + platform.width
            if math.isfinite(new_x) and new_x > previous:
                self._emit(platform, emitted)
                self._decorate(platform, difficulty, emitted)
                self.next_platform_x = new_x
            else:
                logger.warning("frontier stalled at %s, forcing advance", previous)
                self.next_platform_x = previous + cfg.forced_advance

        if iterations >= limit and self.next_platform_x < until_x:
            logger.debug(
                "extend_to(%s) hit iteration cap at frontier %s", until_x, self.next_platform_x
            )
        return emitted

    def ensure_ahead(self, camera_x: float) -> List[PlatformSpec]:
        if not is_finite_number(camera_x):
            return []
        return self.extend_to(camera_x + self.config.lookahead)

    def prune_behind(self, camera_x: float) -> int:
        """Drop content that ended well left of the camera. Returns how many platforms went."""
        if not is_finite_number(camera_x):
            return 0
        cutoff = camera_x - self.config.prune_margin
        before = len(self.platforms)
        self.platforms = [p for p in self.platforms if p.right >= cutoff]
        self.coins = [c for c in self.coins if c.x >= cutoff]
        return before - len(self.platforms)

    # ----------------------------
    # Helpers
    # ----------------------------

    def _uniform(self, lo: float, hi: float) -> float:
        return lo + self.rng.random() * (hi - lo)

    def _next_platform(self, frontier: float, difficulty: float) -> PlatformSpec:
        cfg = self.config
        gap = self._uniform(
            lerp(cfg.base_gap[0], cfg.hard_gap[0], difficulty),
            lerp(cfg.base_gap[1], cfg.hard_gap[1], difficulty),
        )
        width = self._uniform(
            lerp(cfg.base_width[0], cfg.hard_width[0], difficulty),
            lerp(cfg.base_width[1], cfg.hard_width[1], difficulty),
        )

        y = cfg.ground_y
        if self.rng.random() < 0.15 + 0.45 * difficulty:
            y -= self.rng.random() * (40 + 100 * difficulty)

        return PlatformSpec(
            x=frontier + gap,
            y=y,
            width=width,
            height=cfg.platform_height,
            type=self._roll_type(difficulty),
        )

    def _roll_type(self, difficulty: float) -> PlatformType:
        unlocked = [(kind, weight) for kind, weight, gate in TYPE_WEIGHTS if difficulty > gate]
        total = sum(weight for _, weight in unlocked)
        roll = self.rng.random() * total
        for kind, weight in unlocked:
            roll -= weight
            if roll <= 0:
                return kind
        return PlatformType.SOLID

    def _decorate(
        self, platform: PlatformSpec, difficulty: float, emitted: List[PlatformSpec]
    ) -> None:
        if difficulty > 0.3 and self.rng.random() < 0.35 * difficulty:
            spike = PlatformSpec(
                x=platform.x + platform.width / 2 - SPIKE_WIDTH / 2,
                y=platform.y - SPIKE_HEIGHT,
                width=SPIKE_WIDTH,
                height=SPIKE_HEIGHT,
                type=PlatformType.SPIKE,
            )
            self._emit(spike, emitted)

        if self.rng.random() < COIN_CHANCE:
            coin = CoinSpec(platform.x + platform.width / 2, platform.y - COIN_LIFT)
            if math.isfinite(coin.x) and math.isfinite(coin.y):
                self.coins.append(coin)

    def _emit(self, platform: PlatformSpec, emitted: List[PlatformSpec]) -> None:
        if not all(
            math.isfinite(v) for v in (platform.x, platform.y, platform.width, platform.height)
        ):
            logger.warning("dropped non-finite platform %s", platform)
            return
        self.platforms.append(platform)
        emitted.append(platform)
