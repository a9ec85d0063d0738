"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

from .history import NO_DEBT

# Aave reports base-currency values in USD with 8 decimals.
BASE_CURRENCY_DECIMALS = 8


@dataclass(frozen=True)
class BlockStamp:
    """Block height and timestamp of the chain head at read time."""

    number: int
    timestamp: int


@dataclass(frozen=True)
class AccountData:
    """Result of ``Pool.getUserAccountData`` for one account."""

    total_collateral_base: int
    total_debt_base: int
    available_borrows_base: int
    current_liquidation_threshold: int
    ltv: int
    health_factor: int

    @property
    def has_debt(self) -> bool:
        return self.health_factor != NO_DEBT

    @property
    def collateral_usd(self) -> float:
        return base_to_usd(self.total_collateral_base)

    @property
    def debt_usd(self) -> float:
        return base_to_usd(self.total_debt_base)


def base_to_usd(value: int) -> float:
    """Convert an 8-decimal base-currency amount to USD."""
    return value / 10**BASE_CURRENCY_DECIMALS
