"""Logarithmic leveling curve.

``level(E) = floor(log_B(E / S + 1))`` and its inverse
``exp_for_level(L) = round((B ** L - 1) * S)``. Floating point logarithms are
off by one ulp near exact powers (``math.log(1000, 10)`` is ``2.999...``), so
:meth:`LevelCurve.level` corrects its estimate against ``exp_for_level``,
which makes ``level(exp_for_level(L)) == L`` hold for every level whose
threshold is strictly above the previous one.

Thresholds saturate at :data:`MAX_EXPERIENCE` instead of overflowing, so
every function is total. Levels whose threshold would exceed the ceiling
share it; experience at or above the ceiling reports the highest level
below it with full progress.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from level_forum.core.settings import Settings

MAX_EXPERIENCE = 2**63 - 1


@dataclass(frozen=True)
class LevelCurve:
    """Maps accumulated experience to a level and progress fraction."""

    base: float = 2.0
    scale: float = 100.0

    def __post_init__(self) -> None:
        if self.base <= 1:
            raise ValueError("base must be greater than 1")
        if self.scale <= 0:
            raise ValueError("scale must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> LevelCurve:
        return cls(base=settings.level_base, scale=settings.level_scale)

    def exp_for_level(self, level: int) -> int:
        """Experience needed to reach ``level``."""
        if level <= 0:
            return 0
        try:
            return min(MAX_EXPERIENCE, round((self.base**level - 1) * self.scale))
        except OverflowError:
            return MAX_EXPERIENCE

    def level(self, experience: int) -> int:
        """Level reached with ``experience`` points."""
        if experience <= 0:
            return 0
        experience = min(experience, MAX_EXPERIENCE - 1)
        estimate = max(0, math.floor(math.log(experience / self.scale + 1, self.base)))
        while self.exp_for_level(estimate + 1) <= experience:
            estimate += 1
        while estimate > 0 and self.exp_for_level(estimate) > experience:
            estimate -= 1
        return estimate

    def progress_to_next(self, experience: int) -> float:
        """Fraction of the way from the current level to the next, in [0, 1]."""
        current = self.level(experience)
        floor_exp = self.exp_for_level(current)
        span = self.exp_for_level(current + 1) - floor_exp
        if span <= 0:
            return 1.0
        return min(1.0, max(0.0, (experience - floor_exp) / span))
