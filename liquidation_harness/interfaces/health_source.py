"""Health source protocol — per-position health factor reads."""
from typing import Protocol


class HealthSource(Protocol):
    """Reads a position's raw 18-decimal health factor (``NO_DEBT`` when unborrowed)."""

    async def current_health_factor(self, position_id: str) -> int: ...
