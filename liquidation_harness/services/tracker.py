"""Per-position health tracking — one HealthHistory per tracked account."""
from __future__ import annotations

import enum
import logging

from ..history import (
    HealthHistory,
    HealthObservation,
    HealthStatus,
    format_health_factor,
)
from ..interfaces.chain import ChainClock
from ..interfaces.health_source import HealthSource

logger = logging.getLogger(__name__)


class PositionAction(enum.Enum):
    """The state-changing call (or poll) that prompted an observation."""

    SUPPLY = "supply"
    BORROW = "borrow"
    PRICE_UPDATE = "price_update"
    WITHDRAW = "withdraw"
    POLL = "poll"


class PositionTracker:
    """Observe a position's health factor after each interaction and record it."""

    def __init__(
        self,
        label: str,
        address: str,
        source: HealthSource,
        clock: ChainClock,
        history: HealthHistory | None = None,
    ) -> None:
        self.label = label
        self.address = address
        self._source = source
        self._clock = clock
        self.history = history if history is not None else HealthHistory()
        self.previous_status: HealthStatus | None = None

    async def observe(
        self, action: PositionAction = PositionAction.POLL
    ) -> HealthObservation:
        """Stamp the chain head, read the health factor, and record both.

        Raises:
            OrderingViolation: the chain reported an older block or timestamp
                than the last observation.
        """
        stamp = await self._clock.current_block()
        health_factor = await self._source.current_health_factor(self.address)

        latest = self.history.latest()
        previous = latest.status if latest is not None else None

        index = self.history.record(stamp.number, stamp.timestamp, health_factor)
        observation = self.history.at(index)
        self.previous_status = previous

        logger.info(
            "[%s] #%d after %s — block %d  HF: %s  (%s)",
            self.label,
            index,
            action.value,
            stamp.number,
            format_health_factor(health_factor),
            observation.status.value,
        )
        return observation

    @property
    def status_changed(self) -> bool:
        """True if the latest observation's status differs from the one before it."""
        latest = self.history.latest()
        if latest is None:
            return False
        return latest.status is not self.previous_status
