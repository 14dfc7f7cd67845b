"""
reachability.py

Approximate "can the player get from the start to the goal" check for authored
levels. No physics is simulated: platforms are graph nodes and an edge exists
when a jump (plus an optional dash) could plausibly cover the horizontal gap
and height difference. Bounce platforms double the jump height and add some
horizontal reach.

The model ignores dash timing and power-ups, so it produces false negatives;
callers treat a negative result as a warning only.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left, bisect_right
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Set

import pygame

from game_types import PlatformType, Point
from models import Goal, MovementCapability, PlatformSpec, ReachabilityResult

logger = logging.getLogger(__name__)

HEIGHT_TOLERANCE = 10  # px; height differences within this count as level
START_GROUND_TOLERANCE = 50  # px between player feet and platform top
BOUNCE_HORIZONTAL_BONUS = 100
MAX_BFS_ITERATIONS = 5000
# Candidate platforms examined across the whole search; bounds the cost on
# dense levels where every expansion sees many neighbours.
MAX_SEARCH_STEPS = 200_000
# pygame.Rect stores C ints; anything past this is not a real level coordinate.
COORD_LIMIT = 1e8


@dataclass(frozen=True)
class Node:
    index: int  # index in the authored platform list
    rect: pygame.Rect
    type: PlatformType


def to_rect(x: float, y: float, width: float, height: float) -> Optional[pygame.Rect]:
    """Pixel rect for a box, or None if it can't be a real level coordinate."""
    values = (x, y, width, height)
    if not all(math.isfinite(v) and abs(v) < COORD_LIMIT for v in values):
        return None
    return pygame.Rect(
        int(round(x)),
        int(round(y)),
        max(1, int(round(width))),
        max(1, int(round(height))),
    )


def build_nodes(platforms: Sequence[PlatformSpec]) -> List[Node]:
    """Safe (non-lethal, finite) platforms as search nodes."""
    nodes: List[Node] = []
    for i, p in enumerate(platforms):
        if p.type.lethal:
            continue
        rect = to_rect(p.x, p.y, p.width, p.height)
        if rect is not None:
            nodes.append(Node(index=i, rect=rect, type=p.type))
    return nodes


def horizontal_gap(from_left: float, from_right: float, to_left: float, to_right: float) -> float:
    return max(0.0, to_left - from_right, from_left - to_right)


def horizontal_budget(source: Node, capability: MovementCapability) -> float:
    """Furthest horizontal gap any jump from `source` may cover."""
    budget = capability.max_jump_distance + capability.dash_distance
    if source.type == PlatformType.BOUNCE:
        budget += BOUNCE_HORIZONTAL_BONUS
    return budget


def can_reach(
    source: Node,
    to_left: float,
    to_right: float,
    to_top: float,
    capability: MovementCapability,
) -> bool:
    """Edge test from a standing platform to a landing span at height `to_top`."""
    bounce = source.type == PlatformType.BOUNCE
    jump_height = capability.max_jump_height * (2 if bounce else 1)
    budget = horizontal_budget(source, capability)

    gap = horizontal_gap(source.rect.left, source.rect.right, to_left, to_right)
    rise = source.rect.top - to_top  # screen y grows downwards

    if rise < -HEIGHT_TOLERANCE:
        # falling
        return gap < budget
    if rise > HEIGHT_TOLERANCE:
        return rise <= jump_height + HEIGHT_TOLERANCE and gap < budget

    # Level jumps get less air than the full arc: reach scales with jump height
    # and only half of the dash carries over.
    scale = jump_height / capability.max_jump_height if capability.max_jump_height > 0 else 1.0
    flat_budget = min(
        budget, capability.max_jump_distance * scale + capability.dash_distance / 2
    )
    return gap < flat_budget


def can_reach_node(source: Node, target: Node, capability: MovementCapability) -> bool:
    return can_reach(source, target.rect.left, target.rect.right, target.rect.top, capability)


def find_start_node(
    nodes: Sequence[Node], start: Point, capability: MovementCapability
) -> Optional[int]:
    """Position in `nodes` of the platform under the player's feet, if any."""
    player = to_rect(start[0], start[1], capability.player_width, capability.player_height)
    if player is None:
        return None

    best: Optional[int] = None
    best_dist = float("inf")
    for pos, node in enumerate(nodes):
        if player.right <= node.rect.left or player.left >= node.rect.right:
            continue
        dist = abs(node.rect.top - player.bottom)
        if dist <= START_GROUND_TOLERANCE and dist < best_dist:
            best, best_dist = pos, dist
    return best


def goal_point(goal: Goal) -> Point:
    """Bottom-centre of the goal zone: where the player's feet have to get to."""
    return (goal.x + goal.width / 2, goal.y + goal.height)


def check_reachability(
    platforms: Sequence[PlatformSpec],
    start: Point,
    goal: Goal,
    capability: Optional[MovementCapability] = None,
    max_iterations: int = MAX_BFS_ITERATIONS,
    max_steps: int = MAX_SEARCH_STEPS,
) -> ReachabilityResult:
    """Breadth-first search from the start platform towards the goal.

    Nodes are kept sorted by left edge so each expansion only looks at the
    platforms within its horizontal budget. Both the expansion count and the
    number of candidates examined are capped; hitting either cap is reported as
    not reachable.
    """
    cap = capability or MovementCapability()

    nodes = sorted(build_nodes(platforms), key=lambda n: n.rect.left)
    if not nodes:
        return ReachabilityResult(False, "no safe platforms")

    start_pos = find_start_node(nodes, start, cap)
    if start_pos is None:
        return ReachabilityResult(False, "no platform under start")

    gx, gy = goal_point(goal)
    if not (math.isfinite(gx) and math.isfinite(gy)):
        return ReachabilityResult(False, "goal position is not a finite point")

    lefts = [n.rect.left for n in nodes]
    widest = max(n.rect.width for n in nodes)

    queue: Deque[int] = deque([start_pos])
    visited: Set[int] = {start_pos}
    expanded = 0
    steps = 0

    while queue and expanded < max_iterations and steps < max_steps:
        pos = queue.popleft()
        expanded += 1
        node = nodes[pos]

        if can_reach(node, gx, gx, gy, cap):
            return ReachabilityResult(
                True, f"goal reachable from platform {node.index + 1}", steps
            )

        budget = horizontal_budget(node, cap)
        lo = bisect_left(lefts, node.rect.left - budget - widest)
        hi = bisect_right(lefts, node.rect.right + budget)
        for other_pos in range(lo, hi):
            if steps >= max_steps:
                break
            steps += 1
            if other_pos in visited:
                continue
            if can_reach_node(node, nodes[other_pos], cap):
                visited.add(other_pos)
                queue.append(other_pos)

    if queue or steps >= max_steps:
        logger.warning(
            "reachability search stopped after %s expansions and %s steps", expanded, steps
        )
        limit = max_iterations if expanded >= max_iterations else max_steps
        return ReachabilityResult(
            False, f"search limit of {limit} steps reached before the goal", steps
        )

    logger.debug("goal unreachable; visited %s of %s platforms", len(visited), len(nodes))
    return ReachabilityResult(
        False,
        f"goal is unreachable from the start platform "
        f"(reached {len(visited)} of {len(nodes)} safe platforms)",
        steps,
    )
