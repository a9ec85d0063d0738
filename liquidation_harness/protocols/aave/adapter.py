"""Aave V3 pool adapter — reads account health through ``eth_call``."""
from __future__ import annotations

import logging

from ...chains.evm.abi import GET_USER_ACCOUNT_DATA, encode_call
from ...chains.evm.client import EvmClient
from ...history import format_health_factor
from ...models import AccountData
from . import parser

logger = logging.getLogger(__name__)


class AaveV3Adapter:
    """Health source backed by an Aave V3 ``Pool`` contract."""

    def __init__(self, client: EvmClient, pool_address: str) -> None:
        self._client = client
        self._pool = pool_address

    async def fetch_account_data(self, user: str) -> AccountData:
        """Fetch collateral, debt and health factor for ``user``."""
        raw = await self._client.eth_call(
            self._pool, encode_call(GET_USER_ACCOUNT_DATA, user)
        )
        account = parser.parse_account_data(raw)
        logger.debug(
            "Account %s — Collateral: $%.2f  Debt: $%.2f  LT: %.2f%%  HF: %s",
            user,
            account.collateral_usd,
            account.debt_usd,
            parser.bps_to_percent(account.current_liquidation_threshold),
            format_health_factor(account.health_factor),
        )
        return account

    async def current_health_factor(self, position_id: str) -> int:
        account = await self.fetch_account_data(position_id)
        return account.health_factor
