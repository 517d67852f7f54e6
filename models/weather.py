"""Weather context handed to the outfit generator."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Weather:
    """Temperature and condition for one day; either part may be unknown."""

    temperature_celsius: Optional[float] = None
    condition: Optional[str] = None

    @property
    def is_rainy(self) -> bool:
        condition = (self.condition or "").lower()
        return "rain" in condition or "drizzle" in condition


__all__ = ["Weather"]
