"""Pure parsing functions for Aave V3 pool view calls — no I/O."""
from __future__ import annotations

from ...chains.evm.abi import decode_uint256_words
from ...models import AccountData

ACCOUNT_DATA_WORDS = 6


def parse_account_data(data: str) -> AccountData:
    """Decode ``getUserAccountData`` return data.

    Word order: totalCollateralBase, totalDebtBase, availableBorrowsBase,
    currentLiquidationThreshold, ltv, healthFactor. An account with no debt
    reports ``type(uint256).max`` as its health factor.
    """
    words = decode_uint256_words(data)
    if len(words) < ACCOUNT_DATA_WORDS:
        raise ValueError(
            f"getUserAccountData returned {len(words)} words, "
            f"expected {ACCOUNT_DATA_WORDS}"
        )
    (
        total_collateral_base,
        total_debt_base,
        available_borrows_base,
        current_liquidation_threshold,
        ltv,
        health_factor,
    ) = words[:ACCOUNT_DATA_WORDS]
    return AccountData(
        total_collateral_base=total_collateral_base,
        total_debt_base=total_debt_base,
        available_borrows_base=available_borrows_base,
        current_liquidation_threshold=current_liquidation_threshold,
        ltv=ltv,
        health_factor=health_factor,
    )


def bps_to_percent(value: int) -> float:
    """Aave stores LTV and liquidation threshold in basis points."""
    return value / 100
