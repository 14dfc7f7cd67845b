from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any, List, Optional

from challenge_manager import ChallengeManager
from challenge_scheduler import ChallengeScheduler
from challenge_store import JsonChallengeStore
from config_parsing import load_app_config
from courses import DEFAULT_PLATFORM_COUNT, build_challenge_course, build_gauntlet_courses
from endless_generator import EndlessDifficultyGenerator
from level_library import LevelFormatError, LevelLibrary, create_new_level, read_level_file
from level_validator import validate_level
from models import AppConfig

logger = logging.getLogger(__name__)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def cmd_challenges(args: argparse.Namespace, cfg: AppConfig) -> int:
    scheduler = ChallengeScheduler()
    for challenge in scheduler.current_challenges():
        kind = "weekly" if challenge.is_weekly else "daily"
        print(f"[{kind}] {challenge.name} ({challenge.id})")
        print(f"    {challenge.description}")
        print(f"    seed={challenge.seed}  ends in {scheduler.format_time_remaining(challenge)}")
    return 0


def cmd_course(args: argparse.Namespace, cfg: AppConfig) -> int:
    scheduler = ChallengeScheduler()
    challenge = scheduler.weekly_challenge() if args.weekly else scheduler.daily_challenge()
    course = build_challenge_course(challenge, args.start_x, args.count)
    _print_json({"challenge": challenge.to_dict(), **course.to_dict()})
    return 0


def cmd_gauntlet(args: argparse.Namespace, cfg: AppConfig) -> int:
    seed = args.seed if args.seed is not None else ChallengeScheduler().weekly_challenge().seed
    stages = build_gauntlet_courses(seed, args.start_x, args.count)
    _print_json(
        {
            "seed": seed,
            "stages": [{**stage.to_dict(), **course.to_dict()} for stage, course in stages],
        }
    )
    return 0


def cmd_endless(args: argparse.Namespace, cfg: AppConfig) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    gen = EndlessDifficultyGenerator(rng=rng, config=cfg.endless)
    gen.update_distance(args.distance)
    gen.extend_to(args.until)
    _print_json(
        {
            "difficulty": gen.difficulty(),
            "frontier": gen.next_platform_x,
            "platforms": [p.to_dict() for p in gen.platforms],
            "coins": [c.to_dict() for c in gen.coins],
        }
    )
    return 0


def cmd_validate(args: argparse.Namespace, cfg: AppConfig) -> int:
    try:
        level = read_level_file(args.level)
    except (OSError, LevelFormatError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    result = validate_level(level, cfg.validation, cfg.capability)
    for msg in result.errors:
        print(f"error: {msg}")
    for msg in result.warnings:
        print(f"warning: {msg}")
    print("valid" if result.valid else "invalid")
    return 0 if result.valid else 1


def _manager(cfg: AppConfig) -> ChallengeManager:
    return ChallengeManager(JsonChallengeStore(Path(cfg.store_file)))


def cmd_streak(args: argparse.Namespace, cfg: AppConfig) -> int:
    manager = _manager(cfg)
    info = manager.streak_info()
    print(f"current streak: {info.current} day(s)")
    print(f"longest streak: {info.longest} day(s)")
    print(f"played today:   {'yes' if info.participated_today else 'no'}")
    print(f"completed:      {manager.total_completed()}")
    upcoming = manager.next_streak_reward()
    if upcoming is not None:
        print(f"next reward:    {upcoming.name} at {upcoming.streak_required} days")
    return 0


def cmd_attempt(args: argparse.Namespace, cfg: AppConfig) -> int:
    manager = _manager(cfg)
    progress = manager.record_attempt(args.challenge_id, args.score, args.completed)
    _print_json(progress.to_dict())
    for reward in manager.new_streak_rewards():
        print(f"streak reward unlocked: {reward.name} ({reward.description})")
        manager.claim_streak_reward(reward.reward_id)
    return 0


def cmd_levels(args: argparse.Namespace, cfg: AppConfig) -> int:
    library = LevelLibrary(Path(cfg.levels_dir))
    try:
        if args.action == "list":
            for level in library.list_levels():
                print(f"{level.id}\t{level.name}\tby {level.author}")
        elif args.action == "new":
            level = library.save(create_new_level(args.target, args.author))
            print(level.id)
        elif args.action == "import":
            level = library.import_level(Path(args.target).read_text(encoding="utf-8"))
            print(level.id)
        elif args.action == "export":
            print(library.export_level(args.target))
        elif args.action == "duplicate":
            print(library.duplicate(args.target).id)
        elif args.action == "delete":
            if not library.delete(args.target):
                print(f"ERROR: Level '{args.target}' not found.", file=sys.stderr)
                return 1
    except (OSError, LevelFormatError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Tempo Dash content tools: challenges, courses and level checks."
    )
    p.add_argument("--config", type=Path, default=None, help="JSON config file.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("challenges", help="Show the current daily and weekly challenges.")
    s.set_defaults(func=cmd_challenges)

    s = sub.add_parser("course", help="Print the course for the current challenge as JSON.")
    s.add_argument("--weekly", action="store_true", help="Use the weekly challenge.")
    s.add_argument("--count", type=int, default=DEFAULT_PLATFORM_COUNT)
    s.add_argument("--start-x", type=float, default=0.0)
    s.set_defaults(func=cmd_course)

    s = sub.add_parser("gauntlet", help="Print the five gauntlet stages as JSON.")
    s.add_argument("--seed", type=int, default=None, help="Defaults to this week's seed.")
    s.add_argument("--count", type=int, default=DEFAULT_PLATFORM_COUNT)
    s.add_argument("--start-x", type=float, default=0.0)
    s.set_defaults(func=cmd_gauntlet)

    s = sub.add_parser("endless", help="Generate endless-mode platforms up to an x position.")
    s.add_argument("--until", type=float, required=True)
    s.add_argument("--distance", type=float, default=0.0, help="Distance already traveled.")
    s.add_argument("--seed", type=int, default=None)
    s.set_defaults(func=cmd_endless)

    s = sub.add_parser("validate", help="Validate an authored level file.")
    s.add_argument("level", type=Path)
    s.set_defaults(func=cmd_validate)

    s = sub.add_parser("streak", help="Show the participation streak.")
    s.set_defaults(func=cmd_streak)

    s = sub.add_parser("attempt", help="Record a challenge attempt.")
    s.add_argument("challenge_id")
    s.add_argument("score", type=int)
    s.add_argument("--completed", action="store_true")
    s.set_defaults(func=cmd_attempt)

    s = sub.add_parser("levels", help="Manage the local custom level library.")
    s.add_argument(
        "action", choices=["list", "new", "import", "export", "duplicate", "delete"]
    )
    s.add_argument("target", nargs="?", default="Untitled Level",
                   help="Level name (new), file (import) or level id.")
    s.add_argument("--author", default="Player")
    s.set_defaults(func=cmd_levels)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = load_app_config(args.config)
    logger.debug("loaded config: %s", cfg)
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
