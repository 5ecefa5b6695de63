"""
Score Service for the adventure engine.

Keeps the running total, enforces one-shot score grants through guard
flags, hands out achievement trophies and detects the winning condition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from src.models.flags import FlagKey
from src.models.state import WorldState
from src.models.world import World
from src.services.flags import FlagService
from src.services.text import text

logger = logging.getLogger(__name__)


class Achievement(BaseModel):
    """A trophy granted the first time the score reaches ``threshold``."""

    threshold: int = Field(ge=1)
    trophy: str = Field(min_length=1)


class ScoreAward(BaseModel):
    """Outcome of a score change."""

    points: int = 0
    trophies: list[str] = Field(default_factory=list)

    @property
    def awarded(self) -> bool:
        return self.points != 0


@dataclass
class ScoreService:
    """
    Service for score bookkeeping.

    ``add_score`` is unconditional. Callers that must not award twice use
    ``award_once``, which sets the guard flag in the same step as the delta.
    """

    state: WorldState
    world: World
    flags: FlagService
    achievements: list[Achievement] = field(default_factory=list)
    trophy_container_id: str | None = None

    def add_score(self, delta: int) -> ScoreAward:
        """
        Adjust the running total and evaluate achievement thresholds.

        Args:
            delta: Points to add (may be negative)

        Returns:
            ScoreAward with the points and any newly earned trophies
        """
        if delta == 0:
            return ScoreAward()
        self.state.score += delta
        logger.info("Score %+d -> %d", delta, self.state.score)
        return ScoreAward(points=delta, trophies=self._check_achievements())

    def award_once(self, guard: FlagKey | str, delta: int) -> ScoreAward:
        """
        Award points at most once per game.

        Args:
            guard: Flag that records the award
            delta: Points to add

        Returns:
            ScoreAward; empty if the guard was already set or delta is zero
        """
        if delta == 0 or self.flags.has_flag(guard):
            return ScoreAward()
        self.flags.set_flag(guard)
        return self.add_score(delta)

    def is_awarded(self, guard: FlagKey | str) -> bool:
        return self.flags.has_flag(guard)

    def _check_achievements(self) -> list[str]:
        earned: list[str] = []
        for achievement in sorted(self.achievements, key=lambda a: a.threshold):
            if self.state.score >= achievement.threshold and achievement.trophy not in self.state.trophies:
                self.state.trophies.append(achievement.trophy)
                earned.append(achievement.trophy)
                logger.info("Trophy earned: %s", achievement.trophy)
        return earned

    # --- totals and victory ---

    @property
    def max_score(self) -> int:
        return self.world.possible_score()

    def check_victory(self) -> bool:
        """
        Mark the game won once every treasure rests in the trophy container.

        Returns:
            True only on the call that first detects the win.
        """
        if self.state.game_won or self.trophy_container_id is None:
            return False
        treasures = self.world.treasures()
        if not treasures:
            return False
        held = self.state.containers.get(self.trophy_container_id, [])
        if all(t in held for t in treasures):
            self.state.game_won = True
            logger.info("All %d treasures placed; game won", len(treasures))
            return True
        return False

    def announce(self, award: ScoreAward) -> list[str]:
        """Player-facing lines for trophies earned by an award."""
        return [text("score.trophy", trophy=trophy) for trophy in award.trophies]

    def summary(self) -> str:
        return text(
            "score.current",
            score=self.state.score,
            max_score=self.max_score,
            turns=self.state.turns,
        )
