"""
level_validator.py

Structural checks for author-created levels.

Errors block saving/playing; warnings are advisory. A failed reachability
search is only ever a warning because the reachability model is approximate.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from models import CustomLevel, MovementCapability, ValidationLimits, ValidationResult
from reachability import build_nodes, check_reachability, find_start_node, to_rect

logger = logging.getLogger(__name__)

GOAL_GROUND_TOLERANCE = 50


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _fmt(v: float) -> str:
    return f"{v:g}"


class LevelStructuralValidator:
    def __init__(
        self,
        limits: Optional[ValidationLimits] = None,
        capability: Optional[MovementCapability] = None,
    ) -> None:
        self.limits = limits or ValidationLimits()
        self.capability = capability or MovementCapability()

    def validate(self, level: CustomLevel) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        self._check_required(level, errors)
        self._check_platforms(level, errors, warnings)
        self._check_start(level, errors)
        self._check_goal(level, errors, warnings)
        self._check_support(level, warnings)
        self._check_deadly_spawn(level, errors)
        self._check_gaps(level, warnings)
        self._check_coins(level, warnings)
        self._check_bpm(level, warnings)
        if not errors:
            self._check_reachable(level, warnings)

        logger.debug(
            "validated level %r: %s errors, %s warnings", level.name, len(errors), len(warnings)
        )
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def _check_required(self, level: CustomLevel, errors: List[str]) -> None:
        if not level.name or not level.name.strip():
            errors.append("Level must have a name")
        if not level.platforms:
            errors.append("Level must have at least one platform")
        if level.player_start is None:
            errors.append("Level must have a player start position")
        if level.goal is None:
            errors.append("Level must have a goal")

    def _check_platforms(
        self, level: CustomLevel, errors: List[str], warnings: List[str]
    ) -> None:
        lim = self.limits
        for n, p in enumerate(level.platforms or [], start=1):
            if not _finite(p.x, p.y, p.width, p.height):
                errors.append(f"Platform {n} has a missing or non-finite coordinate")
                continue

            if p.width < lim.min_platform_size:
                errors.append(
                    f"Platform {n} is too narrow (min {_fmt(lim.min_platform_size)}px)"
                )
            if p.height < lim.min_platform_size:
                errors.append(
                    f"Platform {n} is too short (min {_fmt(lim.min_platform_size)}px)"
                )
            if p.width > lim.max_platform_width:
                warnings.append(f"Platform {n} is very wide ({_fmt(p.width)}px)")

            if p.x < lim.far_left_x:
                warnings.append(f"Platform {n} is far to the left of the start")
            if p.x > lim.max_level_length:
                errors.append(f"Platform {n} is beyond the maximum level length")
            if p.y < 0 or p.y > lim.screen_height + lim.offscreen_margin:
                warnings.append(f"Platform {n} may be off-screen (y={_fmt(p.y)})")

    def _check_start(self, level: CustomLevel, errors: List[str]) -> None:
        if level.player_start is None:
            return
        lim = self.limits
        x, y = level.player_start
        if not _finite(x, y):
            errors.append("Player start position is missing a coordinate")
            return
        if x < 0 or x > lim.max_level_length:
            errors.append("Player start position is out of bounds")
        if y < 0 or y > lim.screen_height:
            errors.append("Player start Y position is off-screen")

    def _check_goal(self, level: CustomLevel, errors: List[str], warnings: List[str]) -> None:
        goal = level.goal
        if goal is None:
            return
        lim = self.limits
        if not _finite(goal.x, goal.y, goal.width, goal.height):
            errors.append("Goal is missing a coordinate or dimension")
            return
        if goal.x < 0 or goal.x > lim.max_level_length:
            errors.append("Goal position is out of bounds")
        if goal.width < lim.min_goal_size or goal.height < lim.min_goal_size:
            errors.append("Goal is too small")

        if level.player_start is not None and _finite(*level.player_start):
            start_x = level.player_start[0]
            if goal.x < start_x:
                warnings.append("Goal is to the left of the player start")
            elif goal.x <= start_x + lim.start_goal_min_distance:
                warnings.append("Goal is very close to the start")

    def _check_support(self, level: CustomLevel, warnings: List[str]) -> None:
        """Is there ground under the start and under the goal?"""
        if not level.platforms:
            return

        start = level.player_start
        if start is not None and _finite(*start):
            nodes = build_nodes(level.platforms)
            if find_start_node(nodes, start, self.capability) is None:
                warnings.append("Player start position may not have a platform beneath it")

        goal = level.goal
        if goal is not None and _finite(goal.x, goal.y, goal.width, goal.height):
            supported = any(
                p.x <= goal.x
                and p.right >= goal.right
                and abs(goal.bottom - p.y) < GOAL_GROUND_TOLERANCE
                for p in level.platforms
                if not p.type.lethal and _finite(p.x, p.y, p.width, p.height)
            )
            if not supported:
                warnings.append("Goal may not have a platform beneath it")

    def _check_deadly_spawn(self, level: CustomLevel, errors: List[str]) -> None:
        if level.player_start is None or not level.platforms:
            return
        cap = self.capability
        player = to_rect(
            level.player_start[0], level.player_start[1], cap.player_width, cap.player_height
        )
        if player is None:
            return
        for n, p in enumerate(level.platforms, start=1):
            if not p.type.lethal:
                continue
            rect = to_rect(p.x, p.y, p.width, p.height)
            if rect is not None and player.colliderect(rect):
                errors.append(f"Player spawns overlapping deadly {p.type.value} platform {n}")

    def _check_gaps(self, level: CustomLevel, warnings: List[str]) -> None:
        safe = sorted(
            (
                p
                for p in level.platforms or []
                if not p.type.lethal and _finite(p.x, p.y, p.width, p.height)
            ),
            key=lambda p: p.x,
        )
        reach = safe[0].right if safe else 0.0
        for p in safe[1:]:
            gap = p.x - reach
            if gap > self.limits.max_safe_gap:
                warnings.append(
                    f"Large gap of {gap:.0f}px before x={_fmt(p.x)} may be unjumpable"
                )
            reach = max(reach, p.right)

    def _check_coins(self, level: CustomLevel, warnings: List[str]) -> None:
        lim = self.limits
        for n, coin in enumerate(level.coins, start=1):
            if not _finite(coin.x, coin.y):
                warnings.append(f"Coin {n} has a missing or non-finite coordinate")
            elif coin.x < lim.far_left_x or coin.x > lim.max_level_length:
                warnings.append(f"Coin {n} is outside the level bounds")
            elif coin.y < 0 or coin.y > lim.screen_height + lim.offscreen_margin:
                warnings.append(f"Coin {n} may be off-screen (y={_fmt(coin.y)})")

    def _check_bpm(self, level: CustomLevel, warnings: List[str]) -> None:
        lim = self.limits
        bpm = level.bpm
        if not _finite(bpm) or bpm < lim.min_bpm or bpm > lim.max_bpm:
            warnings.append(
                f"BPM {_fmt(bpm)} is outside the recommended range "
                f"({_fmt(lim.min_bpm)}-{_fmt(lim.max_bpm)})"
            )

    def _check_reachable(self, level: CustomLevel, warnings: List[str]) -> None:
        if level.player_start is None or level.goal is None or not level.platforms:
            return
        result = check_reachability(
            level.platforms, level.player_start, level.goal, self.capability
        )
        if not result.reachable:
            warnings.append(f"Goal may not be reachable from the start: {result.reason}")


def validate_level(
    level: CustomLevel,
    limits: Optional[ValidationLimits] = None,
    capability: Optional[MovementCapability] = None,
) -> ValidationResult:
    return LevelStructuralValidator(limits, capability).validate(level)


def is_level_playable(level: CustomLevel) -> bool:
    """True when the level has no blocking errors. Warnings don't count."""
    return validate_level(level).valid
