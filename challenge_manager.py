from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from challenge_store import ChallengeStore
from clock import Clock, SystemClock, epoch_ms
from models import ChallengeData, ChallengeProgress, StreakReward
from streaks import (
    claim_streak_reward,
    new_streak_rewards,
    next_streak_reward,
    record_participation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakInfo:
    current: int
    longest: int
    participated_today: bool


class ChallengeManager:
    """Challenge attempts, progress and streak bookkeeping over an injected store."""

    def __init__(self, store: ChallengeStore, clock: Optional[Clock] = None) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.data = store.load()

    def _today(self) -> str:
        return self.clock.now().date().isoformat()

    def record_attempt(self, challenge_id: str, score: int, completed: bool) -> ChallengeProgress:
        progress = self.data.challenge_history.get(challenge_id)
        if progress is None:
            progress = ChallengeProgress(challenge_id=challenge_id)
            self.data.challenge_history[challenge_id] = progress

        progress.attempts += 1
        if score > progress.best_score:
            progress.best_score = score

        if completed and not progress.completed:
            progress.completed = True
            progress.completed_at = epoch_ms(self.clock.now())
            self.data.total_challenges_completed += 1
            logger.info("challenge %s completed with score %s", challenge_id, score)

        # Attempts count towards the streak, completion is not required.
        record_participation(self.data, self._today())
        self.store.save(self.data)
        return progress

    def progress(self, challenge_id: str) -> Optional[ChallengeProgress]:
        return self.data.challenge_history.get(challenge_id)

    def streak_info(self) -> StreakInfo:
        return StreakInfo(
            current=self.data.current_streak,
            longest=self.data.longest_streak,
            participated_today=self.data.last_participation_date == self._today(),
        )

    def total_completed(self) -> int:
        return self.data.total_challenges_completed

    def new_streak_rewards(self) -> List[StreakReward]:
        return new_streak_rewards(self.data)

    def claim_streak_reward(self, reward_id: str) -> None:
        claim_streak_reward(self.data, reward_id, epoch_ms(self.clock.now()))
        self.store.save(self.data)

    def next_streak_reward(self) -> Optional[StreakReward]:
        return next_streak_reward(self.data)

    def challenge_data(self) -> ChallengeData:
        return self.data.copy()

    def load_from_save_data(self, data: ChallengeData) -> None:
        self.data = data.copy()
        self.store.save(self.data)
