"""
challenge_scheduler.py

Works out which daily and weekly challenge is live right now. Nothing is
stored: the challenge identity, seed and type are recomputed from the clock on
every call, so every player on the same calendar day/week gets the same seed.

The week number is deliberately NOT ISO-8601:

    week = ceil((days_since_jan1 + weekday_of_jan1 + 1) / 7)

with fractional days since local midnight of January 1 and Sunday == 0. The
day count is real elapsed time, so a daylight-saving shift since January moves
it by an hour.
Existing weekly records are keyed by this number; keep it as is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from clock import Clock, SystemClock
from game_types import ChallengeType
from models import Challenge
from seeded_rng import RandomStream, derive_seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChallengeInfo:
    name: str
    description: str


CHALLENGE_TYPES: Dict[ChallengeType, ChallengeInfo] = {
    ChallengeType.SPRINT: ChallengeInfo(
        "Daily Sprint", "Complete the seeded level as fast as possible"
    ),
    ChallengeType.COIN_RUSH: ChallengeInfo(
        "Coin Dash", "Collect coins! Grab magnet coins to attract nearby coins"
    ),
    ChallengeType.ENDURANCE: ChallengeInfo(
        "Weekly Endurance", "Survive as long as possible in hard endless mode"
    ),
    ChallengeType.GAUNTLET: ChallengeInfo(
        "Weekly Gauntlet", "Complete 5 seeded challenge levels back-to-back"
    ),
}

ONE_MS = timedelta(milliseconds=1)


def date_string(day: date) -> str:
    """YYYY-MM-DD for a calendar day."""
    return day.isoformat()


def sunday_weekday(day: date) -> int:
    """Day of week with Sunday == 0 .. Saturday == 6."""
    return (day.weekday() + 1) % 7


def week_number(moment: datetime) -> int:
    first_day = moment.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    # astimezone() pins naive values to the local zone, so the UTC offset in
    # effect at each end is part of the difference.
    elapsed = moment.astimezone() - first_day.astimezone()
    past_days = elapsed.total_seconds() / 86400
    return math.ceil((past_days + sunday_weekday(first_day.date()) + 1) / 7)


def week_id(moment: datetime) -> str:
    return f"{moment.year}_W{week_number(moment)}"


class ChallengeScheduler:
    """Stateless daily/weekly challenge lookup against an injected clock."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or SystemClock()

    def daily_challenge(self) -> Challenge:
        now = self.clock.now()
        today = date_string(now.date())
        seed = derive_seed(today, "daily")
        rng = RandomStream(seed)

        kind = ChallengeType.SPRINT if rng.next() > 0.5 else ChallengeType.COIN_RUSH
        info = CHALLENGE_TYPES[kind]

        start = datetime(now.year, now.month, now.day)
        end = start + timedelta(days=1) - ONE_MS

        logger.debug("daily challenge %s seed=%s type=%s", today, seed, kind.value)
        return Challenge(
            id=f"daily_{today}",
            type=kind,
            name=info.name,
            description=info.description,
            seed=seed,
            start_time=start,
            end_time=end,
            is_weekly=False,
        )

    def weekly_challenge(self) -> Challenge:
        now = self.clock.now()
        wid = week_id(now)
        seed = derive_seed(wid, "weekly")
        rng = RandomStream(seed)

        kind = ChallengeType.ENDURANCE if rng.next() > 0.5 else ChallengeType.GAUNTLET
        info = CHALLENGE_TYPES[kind]

        # Monday 00:00 through Sunday 23:59:59.999 of the current week.
        monday = datetime(now.year, now.month, now.day) - timedelta(days=now.weekday())
        sunday_end = monday + timedelta(days=7) - ONE_MS

        logger.debug("weekly challenge %s seed=%s type=%s", wid, seed, kind.value)
        return Challenge(
            id=f"weekly_{wid}",
            type=kind,
            name=info.name,
            description=info.description,
            seed=seed,
            start_time=monday,
            end_time=sunday_end,
            is_weekly=True,
        )

    def current_challenges(self) -> List[Challenge]:
        return [self.daily_challenge(), self.weekly_challenge()]

    def time_remaining(self, challenge: Challenge) -> Tuple[int, int, int]:
        """(hours, minutes, seconds) until the challenge window closes."""
        remaining = challenge.end_time - self.clock.now()
        remaining_ms = max(0, int(remaining.total_seconds() * 1000))

        hours = remaining_ms // 3_600_000
        minutes = (remaining_ms % 3_600_000) // 60_000
        seconds = (remaining_ms % 60_000) // 1000
        return hours, minutes, seconds

    def format_time_remaining(self, challenge: Challenge) -> str:
        hours, minutes, seconds = self.time_remaining(challenge)

        if challenge.is_weekly:
            days, h = divmod(hours, 24)
            if days > 0:
                return f"{days}d {h}h"
            return f"{h}h {minutes}m"

        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m {seconds}s"
