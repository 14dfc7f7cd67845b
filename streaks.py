from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional, Union

from models import ChallengeData, ChallengeProgress, StreakReward

logger = logging.getLogger(__name__)

STREAK_REWARDS: List[StreakReward] = [
    StreakReward(3, "points", "streak_3", "500 Bonus Points", "3-day streak reward"),
    StreakReward(5, "points", "streak_5", "1000 Bonus Points", "5-day streak reward"),
    StreakReward(
        7,
        "achievement",
        "challenge_streak",
        "Challenger Badge",
        "Complete 7 daily challenges in a row",
    ),
    StreakReward(
        10, "skin", "streak_flame", "Streak Flame Skin", "Exclusive skin for 10-day streak"
    ),
    StreakReward(14, "points", "streak_14", "2500 Bonus Points", "14-day streak reward"),
    StreakReward(
        21, "skin", "streak_champion", "Champion Skin", "Exclusive skin for 21-day streak"
    ),
    StreakReward(30, "points", "streak_30", "5000 Bonus Points", "30-day streak reward"),
]


def _as_day(today: Union[date, str]) -> date:
    if isinstance(today, str):
        return date.fromisoformat(today)
    return today


def record_participation(data: ChallengeData, today: Union[date, str]) -> bool:
    """Advance the day streak for a participation on `today`.

    At most one change per calendar day. Returns True if the record changed.
    """
    day = _as_day(today)
    today_str = day.isoformat()
    yesterday_str = (day - timedelta(days=1)).isoformat()

    if data.last_participation_date == today_str:
        return False

    if data.last_participation_date == yesterday_str:
        data.current_streak += 1
    else:
        # gap or first ever participation
        data.current_streak = 1

    data.last_participation_date = today_str
    data.longest_streak = max(data.longest_streak, data.current_streak)
    logger.debug(
        "streak now %s (longest %s) on %s",
        data.current_streak,
        data.longest_streak,
        today_str,
    )
    return True


def _claimed_key(reward_id: str) -> str:
    return f"claimed_{reward_id}"


def new_streak_rewards(data: ChallengeData) -> List[StreakReward]:
    """Rewards reached by the current streak that were not claimed yet."""
    return [
        reward
        for reward in STREAK_REWARDS
        if data.current_streak >= reward.streak_required
        and _claimed_key(reward.reward_id) not in data.challenge_history
    ]


def claim_streak_reward(data: ChallengeData, reward_id: str, now_ms: int) -> None:
    key = _claimed_key(reward_id)
    data.challenge_history[key] = ChallengeProgress(
        challenge_id=key,
        completed=True,
        best_score=0,
        attempts=0,
        completed_at=now_ms,
    )
    logger.info("claimed streak reward %s", reward_id)


def next_streak_reward(data: ChallengeData) -> Optional[StreakReward]:
    for reward in STREAK_REWARDS:
        if data.current_streak < reward.streak_required:
            return reward
    return None
