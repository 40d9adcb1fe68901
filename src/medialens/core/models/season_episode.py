"""Episode identifier value objects."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

UNDEFINED = -1


@dataclass(frozen=True)
class SxE:
    """Season and episode number; an undefined part is -1."""

    season: int = UNDEFINED
    episode: int = UNDEFINED

    @property
    def has_season(self) -> bool:
        return self.season >= 0

    @property
    def has_episode(self) -> bool:
        return self.episode >= 0

    def with_season(self, season: int) -> SxE:
        return SxE(season, self.episode)

    def __str__(self) -> str:
        if self.season >= 0 and self.episode < 0:
            return f"S{self.season:02d}"
        if self.season >= 0:
            return f"{self.season}x{self.episode:02d}"
        return f"{self.episode:02d}"


@dataclass(frozen=True)
class SimpleDate:
    """Calendar date without time zone."""

    year: int
    month: int
    day: int

    def to_date(self) -> datetime.date:
        """Convert to datetime.date.

        Raises:
            ValueError: If the fields do not form a valid date
        """
        return datetime.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


__all__ = ["SimpleDate", "SxE", "UNDEFINED"]
