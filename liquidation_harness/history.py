"""Health-factor history — append-only, block/time-ordered observations.

One ``HealthHistory`` belongs to exactly one tracked position. Health factors
are raw unsigned integers with 18 decimals; ``NO_DEBT`` (uint256 max) is the
protocol's "no open debt" sentinel and is kept as-is on the wire.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator

HF_DECIMALS = 18
HF_ONE = 10**HF_DECIMALS
NO_DEBT = 2**256 - 1


class HealthStatus(enum.Enum):
    HEALTHY = "healthy"
    AT_RISK = "at_risk"


class HistoryError(Exception):
    """Base class for health history input-contract violations."""


class OrderingViolation(HistoryError, ValueError):
    """A record arrived with an earlier block height or timestamp."""


class IndexOutOfRange(HistoryError, IndexError):
    """An index outside ``0 <= index < len(history)`` was requested."""


@dataclass(frozen=True)
class HealthObservation:
    """One block-stamped, timestamped health factor snapshot."""

    sequence_index: int
    block_height: int
    timestamp: int
    health_factor: int

    @property
    def has_debt(self) -> bool:
        return self.health_factor != NO_DEBT

    @property
    def status(self) -> HealthStatus:
        return classify(self)


def classify(observation: HealthObservation | int) -> HealthStatus:
    """Classify a health factor.

    Exactly 1.0 counts as AT_RISK: liquidation is allowed at or below 1.0.
    Accepts an observation or a raw 18-decimal health factor.
    """
    hf = (
        observation.health_factor
        if isinstance(observation, HealthObservation)
        else observation
    )
    if hf == NO_DEBT or hf > HF_ONE:
        return HealthStatus.HEALTHY
    return HealthStatus.AT_RISK


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def format_health_factor(raw: int) -> str:
    """Human-readable health factor, e.g. ``2.5000`` or ``∞`` for no debt."""
    if raw == NO_DEBT:
        return "∞"
    return f"{raw / HF_ONE:.4f}"


class HealthHistory:
    """Append-only health factor log for a single position."""

    def __init__(self) -> None:
        self._entries: list[HealthObservation] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HealthObservation]:
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        return f"HealthHistory(length={len(self._entries)})"

    def length(self) -> int:
        return len(self._entries)

    def record(self, block_height: int, timestamp: int, health_factor: int) -> int:
        """Append an observation and return its sequence index.

        Raises:
            ValueError: an argument is not an integer, block height or
                timestamp is not positive, or health factor is outside
                ``[0, NO_DEBT]``.
            OrderingViolation: block height or timestamp earlier than the
                last recorded entry.
        """
        for name, value in (
            ("block_height", block_height),
            ("timestamp", timestamp),
            ("health_factor", health_factor),
        ):
            if not _is_int(value):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if block_height <= 0:
            raise ValueError(f"block_height must be positive, got {block_height}")
        if timestamp <= 0:
            raise ValueError(f"timestamp must be positive, got {timestamp}")
        if not 0 <= health_factor <= NO_DEBT:
            raise ValueError(f"health_factor out of uint256 range: {health_factor}")

        if self._entries:
            last = self._entries[-1]
            if block_height < last.block_height:
                raise OrderingViolation(
                    f"block {block_height} precedes last recorded block "
                    f"{last.block_height}"
                )
            if timestamp < last.timestamp:
                raise OrderingViolation(
                    f"timestamp {timestamp} precedes last recorded timestamp "
                    f"{last.timestamp}"
                )

        index = len(self._entries)
        self._entries.append(
            HealthObservation(
                sequence_index=index,
                block_height=block_height,
                timestamp=timestamp,
                health_factor=health_factor,
            )
        )
        return index

    def at(self, index: int) -> HealthObservation:
        if not 0 <= index < len(self._entries):
            raise IndexOutOfRange(
                f"index {index} out of range for history of length "
                f"{len(self._entries)}"
            )
        return self._entries[index]

    def latest(self) -> HealthObservation | None:
        return self._entries[-1] if self._entries else None

    def latest_health_factor(self) -> int | None:
        """Most recent health factor, or ``None`` while the history is empty."""
        latest = self.latest()
        return latest.health_factor if latest is not None else None

    def observations(self) -> tuple[HealthObservation, ...]:
        return tuple(self._entries)

    def lowest(self) -> HealthObservation | None:
        if not self._entries:
            return None
        return min(self._entries, key=lambda o: o.health_factor)

    def transitions(self) -> list[HealthObservation]:
        """Observations whose status differs from the one before them.

        The first observation always counts as a transition.
        """
        changed: list[HealthObservation] = []
        previous: HealthStatus | None = None
        for obs in self._entries:
            status = classify(obs)
            if status is not previous:
                changed.append(obs)
            previous = status
        return changed
