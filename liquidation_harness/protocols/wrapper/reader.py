"""Reads the health factor log a wrapper contract keeps on-chain."""
from __future__ import annotations

import logging

from ...chains.evm.abi import (
    GET_HEALTH_HISTORY,
    GET_HEALTH_HISTORY_LENGTH,
    encode_uint256,
)
from ...chains.evm.client import EvmClient
from ...history import HealthHistory, format_health_factor
from . import parser

logger = logging.getLogger(__name__)


class WrapperHistoryReader:
    """Replays a wrapper's ``getHealthHistory`` entries into a ``HealthHistory``."""

    def __init__(self, client: EvmClient) -> None:
        self._client = client

    async def history_length(self, wrapper: str, block: str = "latest") -> int:
        raw = await self._client.eth_call(wrapper, GET_HEALTH_HISTORY_LENGTH, block)
        return parser.parse_history_length(raw)

    async def get_record(
        self, wrapper: str, index: int, block: str = "latest"
    ) -> tuple[int, int, int]:
        """Return ``(block_number, timestamp, health_factor)`` for entry ``index``."""
        raw = await self._client.eth_call(
            wrapper, GET_HEALTH_HISTORY + encode_uint256(index), block
        )
        return parser.parse_health_record(raw)

    async def load(self, wrapper: str) -> HealthHistory:
        """Read every entry at one block and record them in order.

        Raises:
            OrderingViolation: an entry has an earlier block or timestamp than
                the entry before it.
            ValueError: an entry has a zero block number or timestamp.
        """
        head = await self._client.current_block()
        block = hex(head.number)

        length = await self.history_length(wrapper, block)
        history = HealthHistory()
        for i in range(length):
            block_number, timestamp, health_factor = await self.get_record(
                wrapper, i, block
            )
            history.record(block_number, timestamp, health_factor)
            logger.debug(
                "%s entry %d — block %d  HF: %s",
                wrapper,
                i,
                block_number,
                format_health_factor(health_factor),
            )

        logger.info(
            "Loaded %d on-chain history entries from %s at block %d",
            length,
            wrapper,
            head.number,
        )
        return history
