import math
import random

import pytest

from endless_generator import EndlessDifficultyGenerator
from game_types import PlatformType
from models import EndlessConfig
from platform_generator import all_finite


@pytest.fixture
def gen():
    return EndlessDifficultyGenerator(rng=random.Random(1234))


def _walkable(platforms):
    return [p for p in platforms if p.type != PlatformType.SPIKE]


def test_first_platform_is_wide_ground(gen):
    gen.extend_to(1000)
    first = gen.platforms[0]
    assert (first.x, first.width, first.type) == (0.0, 400, PlatformType.SOLID)


def test_extends_past_target(gen):
    new = gen.extend_to(3000)
    assert gen.next_platform_x >= 3000
    assert new == gen.platforms
    assert all_finite(gen.platforms)


def test_frontier_monotonic(gen):
    gen.update_distance(2500)
    last = 0.0
    for target in range(500, 20000, 700):
        gen.extend_to(target)
        assert gen.next_platform_x >= last
        last = gen.next_platform_x
    walkable = _walkable(gen.platforms)
    assert all(b.x > a.x for a, b in zip(walkable, walkable[1:]))


def test_difficulty_ramp(gen):
    assert gen.difficulty() == 0.0
    gen.update_distance(1500)
    assert gen.difficulty() == 0.5
    gen.update_distance(1e9)
    assert gen.difficulty() == 1.0
    gen.update_distance(-50)
    assert gen.difficulty() == 0.0


def test_nan_distance_terminates(gen):
    gen.update_distance(float("nan"))
    gen.extend_to(5000)
    assert gen.next_platform_x == 5000
    # only the opening ground platform could be placed
    assert len(gen.platforms) == 1
    assert all_finite(gen.platforms)


def test_infinite_distance_is_max_difficulty(gen):
    gen.update_distance(float("inf"))
    assert gen.difficulty() == 1.0
    gen.extend_to(4000)
    assert all_finite(gen.platforms)
    assert gen.next_platform_x >= 4000


def test_infinite_target_is_capped(gen):
    gen.extend_to(float("inf"))
    # one platform per turn plus at most one spike
    assert 0 < len(gen.platforms) <= 2 * gen.config.max_iterations
    assert math.isfinite(gen.next_platform_x)


def test_zero_difficulty_scale_gives_nan(gen):
    broken = EndlessDifficultyGenerator(
        rng=random.Random(1), config=EndlessConfig(difficulty_distance=0)
    )
    assert math.isnan(broken.difficulty())
    broken.extend_to(800)
    assert broken.next_platform_x == 800


def test_hard_section_has_hazards_and_types():
    gen = EndlessDifficultyGenerator(rng=random.Random(99))
    gen.update_distance(3000)
    gen.extend_to(60000)
    kinds = {p.type for p in gen.platforms}
    assert PlatformType.SPIKE in kinds
    assert {PlatformType.ICE, PlatformType.BOUNCE, PlatformType.CRUMBLE} & kinds
    assert gen.coins


def test_easy_section_is_all_solid():
    gen = EndlessDifficultyGenerator(rng=random.Random(5))
    gen.extend_to(10000)
    assert {p.type for p in gen.platforms} == {PlatformType.SOLID}


def test_ensure_ahead_and_prune(gen):
    gen.ensure_ahead(0)
    assert gen.next_platform_x >= gen.config.lookahead
    assert gen.ensure_ahead(float("nan")) == []

    gen.ensure_ahead(5000)
    removed = gen.prune_behind(5000)
    assert removed > 0
    assert all(p.right >= 5000 - gen.config.prune_margin for p in gen.platforms)
    assert gen.prune_behind(float("inf")) == 0


def test_reset(gen):
    gen.update_distance(900)
    gen.extend_to(2000)
    gen.reset()
    assert gen.platforms == [] and gen.coins == []
    assert gen.next_platform_x == 0.0
    assert gen.traveled_distance == 0.0


def test_pruning_everything_does_not_restart_the_run(gen):
    gen.extend_to(1000)
    gen.update_distance(float("nan"))
    gen.extend_to(100000)
    assert gen.prune_behind(99000) > 0
    assert gen.platforms == []

    gen.update_distance(100)
    frontier = gen.next_platform_x
    new = gen.extend_to(101000)
    assert gen.next_platform_x >= frontier
    assert new
    assert all(p.x > frontier for p in new)


def test_reset_places_the_opening_ground_again(gen):
    gen.extend_to(500)
    gen.reset()
    gen.extend_to(500)
    assert gen.platforms[0].x == 0.0
    assert gen.platforms[0].width == 400


def test_config_cannot_raise_iteration_cap():
    cfg = EndlessConfig.from_dict({"max_iterations": 100000})
    assert cfg.max_iterations == 200

    # a hand-built config is capped as well
    gen = EndlessDifficultyGenerator(
        rng=random.Random(8), config=EndlessConfig(max_iterations=100000)
    )
    gen.extend_to(float("inf"))
    assert len(gen.platforms) <= 2 * 200


def test_config_can_lower_iteration_cap():
    gen = EndlessDifficultyGenerator(
        rng=random.Random(8), config=EndlessConfig.from_dict({"max_iterations": 5})
    )
    gen.extend_to(float("inf"))
    assert 0 < len(gen.platforms) <= 2 * 5
