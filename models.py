from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from game_types import ChallengeType, PlatformType, Point
from utils import as_float, as_int, clamp


@dataclass(frozen=True)
class PlatformSpec:
    x: float
    y: float
    width: float
    height: float
    type: PlatformType = PlatformType.SOLID

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "type": self.type.value,
        }

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "PlatformSpec":
        # Missing numbers become NaN so the validator reports them instead of guessing.
        nan = float("nan")
        return PlatformSpec(
            x=as_float(raw.get("x"), nan),
            y=as_float(raw.get("y"), nan),
            width=as_float(raw.get("width"), nan),
            height=as_float(raw.get("height"), nan),
            type=PlatformType.parse(raw.get("type")),
        )


@dataclass(frozen=True)
class CoinSpec:
    x: float
    y: float
    is_magnet: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "isMagnet": self.is_magnet}

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "CoinSpec":
        nan = float("nan")
        return CoinSpec(
            x=as_float(raw.get("x"), nan),
            y=as_float(raw.get("y"), nan),
            is_magnet=bool(raw.get("isMagnet", False)),
        )


@dataclass
class GeneratedCourse:
    platforms: List[PlatformSpec]
    coins: List[CoinSpec]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platforms": [p.to_dict() for p in self.platforms],
            "coins": [c.to_dict() for c in self.coins],
        }


# ----------------------------
# Challenges
# ----------------------------


@dataclass(frozen=True)
class Challenge:
    id: str
    type: ChallengeType
    name: str
    description: str
    seed: int
    start_time: datetime
    end_time: datetime
    is_weekly: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "seed": self.seed,
            "startTime": self.start_time.isoformat(timespec="milliseconds"),
            "endTime": self.end_time.isoformat(timespec="milliseconds"),
            "isWeekly": self.is_weekly,
        }


@dataclass
class ChallengeProgress:
    challenge_id: str
    completed: bool = False
    best_score: int = 0
    attempts: int = 0
    completed_at: Optional[int] = None  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "challengeId": self.challenge_id,
            "completed": self.completed,
            "bestScore": self.best_score,
            "attempts": self.attempts,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out

    @staticmethod
    def from_dict(key: str, raw: Dict[str, Any]) -> "ChallengeProgress":
        completed_at = raw.get("completedAt")
        return ChallengeProgress(
            challenge_id=str(raw.get("challengeId", key)),
            completed=bool(raw.get("completed", False)),
            best_score=max(0, as_int(raw.get("bestScore"), 0)),
            attempts=max(0, as_int(raw.get("attempts"), 0)),
            completed_at=as_int(completed_at, 0) if completed_at is not None else None,
        )


@dataclass
class ChallengeData:
    """Persisted challenge record: streak fields plus per-challenge progress."""

    current_streak: int = 0
    longest_streak: int = 0
    last_participation_date: str = ""  # YYYY-MM-DD
    total_challenges_completed: int = 0
    challenge_history: Dict[str, ChallengeProgress] = field(default_factory=dict)

    def copy(self) -> "ChallengeData":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastParticipationDate": self.last_participation_date,
            "totalChallengesCompleted": self.total_challenges_completed,
            "challengeHistory": {
                key: progress.to_dict()
                for key, progress in self.challenge_history.items()
            },
        }

    @staticmethod
    def from_dict(raw: Any) -> "ChallengeData":
        if not isinstance(raw, dict):
            return ChallengeData()

        history_raw = raw.get("challengeHistory", {})
        history: Dict[str, ChallengeProgress] = {}
        if isinstance(history_raw, dict):
            for key, entry in history_raw.items():
                if isinstance(entry, dict):
                    history[str(key)] = ChallengeProgress.from_dict(str(key), entry)

        last = raw.get("lastParticipationDate", "")
        return ChallengeData(
            current_streak=max(0, as_int(raw.get("currentStreak"), 0)),
            longest_streak=max(0, as_int(raw.get("longestStreak"), 0)),
            last_participation_date=last if isinstance(last, str) else "",
            total_challenges_completed=max(
                0, as_int(raw.get("totalChallengesCompleted"), 0)
            ),
            challenge_history=history,
        )


@dataclass(frozen=True)
class GauntletStage:
    stage_number: int  # 1..5
    seed: int
    target_distance: int  # meters
    allowed_types: Tuple[PlatformType, ...]
    speed_multiplier: float
    name: str

    @property
    def difficulty(self) -> float:
        return self.stage_number / 5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stageNumber": self.stage_number,
            "seed": self.seed,
            "targetDistance": self.target_distance,
            "platformTypes": [t.value for t in self.allowed_types],
            "speedMultiplier": self.speed_multiplier,
            "name": self.name,
        }


@dataclass(frozen=True)
class StreakReward:
    streak_required: int
    type: str  # skin|achievement|points
    reward_id: str
    name: str
    description: str


# ----------------------------
# Authored levels
# ----------------------------


@dataclass(frozen=True)
class Goal:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Goal":
        nan = float("nan")
        return Goal(
            x=as_float(raw.get("x"), nan),
            y=as_float(raw.get("y"), nan),
            width=as_float(raw.get("width"), nan),
            height=as_float(raw.get("height"), nan),
        )


@dataclass
class CustomLevel:
    """An author-created level. Parts may be missing; the validator reports that."""

    id: str = ""
    name: Optional[str] = None
    author: str = "Player"
    bpm: float = 128
    player_start: Optional[Point] = None
    goal: Optional[Goal] = None
    platforms: Optional[List[PlatformSpec]] = None
    coins: List[CoinSpec] = field(default_factory=list)
    created_at: int = 0  # epoch milliseconds
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "author": self.author,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "bpm": self.bpm,
            "platforms": [p.to_dict() for p in self.platforms or []],
            "coins": [{"x": c.x, "y": c.y} for c in self.coins],
        }
        if self.player_start is not None:
            out["playerStart"] = {"x": self.player_start[0], "y": self.player_start[1]}
        if self.goal is not None:
            out["goal"] = {
                "x": self.goal.x,
                "y": self.goal.y,
                "width": self.goal.width,
                "height": self.goal.height,
            }
        return out

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "CustomLevel":
        nan = float("nan")

        name_raw = raw.get("name")
        name = name_raw if isinstance(name_raw, str) else None

        start_raw = raw.get("playerStart")
        start: Optional[Point] = None
        if isinstance(start_raw, dict):
            start = (as_float(start_raw.get("x"), nan), as_float(start_raw.get("y"), nan))

        goal_raw = raw.get("goal")
        goal = Goal.from_dict(goal_raw) if isinstance(goal_raw, dict) else None

        platforms_raw = raw.get("platforms")
        platforms: Optional[List[PlatformSpec]] = None
        if isinstance(platforms_raw, list):
            platforms = [
                PlatformSpec.from_dict(p) for p in platforms_raw if isinstance(p, dict)
            ]

        coins_raw = raw.get("coins")
        coins: List[CoinSpec] = []
        if isinstance(coins_raw, list):
            coins = [CoinSpec.from_dict(c) for c in coins_raw if isinstance(c, dict)]

        return CustomLevel(
            id=str(raw.get("id", "")),
            name=name,
            author=str(raw.get("author", "Player")),
            bpm=as_float(raw.get("bpm"), 128),
            player_start=start,
            goal=goal,
            platforms=platforms,
            coins=coins,
            created_at=as_int(raw.get("createdAt"), 0),
            updated_at=as_int(raw.get("updatedAt"), 0),
        )


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str]
    warnings: List[str]


@dataclass(frozen=True)
class ReachabilityResult:
    reachable: bool
    reason: str
    steps: int = 0  # candidate platforms examined by the search


# ----------------------------
# Tunables
# ----------------------------


@dataclass(frozen=True)
class MovementCapability:
    """Approximate player reach used by the reachability search (pixels)."""

    max_jump_height: float = 150.0
    max_jump_distance: float = 200.0
    dash_distance: float = 100.0
    player_width: float = 40.0
    player_height: float = 40.0

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "MovementCapability":
        base = MovementCapability()
        if not isinstance(raw, dict):
            return base
        return MovementCapability(
            max_jump_height=max(0.0, as_float(raw.get("max_jump_height"), base.max_jump_height)),
            max_jump_distance=max(0.0, as_float(raw.get("max_jump_distance"), base.max_jump_distance)),
            dash_distance=max(0.0, as_float(raw.get("dash_distance"), base.dash_distance)),
            player_width=max(1.0, as_float(raw.get("player_width"), base.player_width)),
            player_height=max(1.0, as_float(raw.get("player_height"), base.player_height)),
        )


@dataclass(frozen=True)
class ValidationLimits:
    min_platform_size: float = 20
    max_platform_width: float = 5000
    max_level_length: float = 50000
    far_left_x: float = -500
    min_goal_size: float = 20
    screen_height: float = 540
    offscreen_margin: float = 100
    min_bpm: float = 60
    max_bpm: float = 200
    start_goal_min_distance: float = 100
    max_safe_gap: float = 525  # base auto-scroll speed * 1.5

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "ValidationLimits":
        base = ValidationLimits()
        if not isinstance(raw, dict):
            return base
        return ValidationLimits(
            **{
                name: as_float(raw.get(name), getattr(base, name))
                for name in base.__dataclass_fields__
            }
        )


# Hard ceiling on loop turns per extend_to() call; config may lower it, never raise it.
EXTEND_ITERATION_CAP = 200


@dataclass(frozen=True)
class EndlessConfig:
    ground_y: float = 460
    platform_height: float = 20
    first_platform_width: float = 400
    difficulty_distance: float = 3000
    max_iterations: int = EXTEND_ITERATION_CAP
    forced_advance: float = 200
    base_gap: Tuple[float, float] = (60, 120)
    hard_gap: Tuple[float, float] = (140, 220)
    base_width: Tuple[float, float] = (180, 260)
    hard_width: Tuple[float, float] = (80, 140)
    lookahead: float = 1500
    prune_margin: float = 800

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "EndlessConfig":
        base = EndlessConfig()
        if not isinstance(raw, dict):
            return base

        def pair(key: str, default: Tuple[float, float]) -> Tuple[float, float]:
            value = raw.get(key)
            if isinstance(value, (list, tuple)) and len(value) >= 2:
                lo = as_float(value[0], default[0])
                hi = as_float(value[1], default[1])
                return (min(lo, hi), max(lo, hi))
            return default

        return EndlessConfig(
            ground_y=as_float(raw.get("ground_y"), base.ground_y),
            platform_height=as_float(raw.get("platform_height"), base.platform_height),
            first_platform_width=as_float(
                raw.get("first_platform_width"), base.first_platform_width
            ),
            difficulty_distance=as_float(
                raw.get("difficulty_distance"), base.difficulty_distance
            ),
            max_iterations=clamp(
                as_int(raw.get("max_iterations"), base.max_iterations), 1, EXTEND_ITERATION_CAP
            ),
            forced_advance=max(1.0, as_float(raw.get("forced_advance"), base.forced_advance)),
            base_gap=pair("base_gap", base.base_gap),
            hard_gap=pair("hard_gap", base.hard_gap),
            base_width=pair("base_width", base.base_width),
            hard_width=pair("hard_width", base.hard_width),
            lookahead=as_float(raw.get("lookahead"), base.lookahead),
            prune_margin=as_float(raw.get("prune_margin"), base.prune_margin),
        )


@dataclass(frozen=True)
class AppConfig:
    capability: MovementCapability = field(default_factory=MovementCapability)
    validation: ValidationLimits = field(default_factory=ValidationLimits)
    endless: EndlessConfig = field(default_factory=EndlessConfig)
    store_file: str = "saves/challenges.json"
    levels_dir: str = "levels"
