"""Unit tests for the mock oracle reader and price-crash math."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from liquidation_harness.oracles.mock_oracle import (
    MockOracleReader,
    crashed_price,
    format_price,
)

WETH_PRICE = 240_000_000_000  # $2400, 8 decimals


class TestCrashedPrice:
    def test_fifty_percent_drop(self) -> None:
        assert crashed_price(WETH_PRICE, 50) == 120_000_000_000

    def test_thirty_percent_drop(self) -> None:
        assert crashed_price(WETH_PRICE, 30) == 168_000_000_000

    @pytest.mark.parametrize("drop", [0, 100, -5, 150])
    def test_drop_out_of_range(self, drop: int) -> None:
        with pytest.raises(ValueError):
            crashed_price(WETH_PRICE, drop)

    def test_zero_price_rejected(self) -> None:
        with pytest.raises(ValueError):
            crashed_price(0, 50)

    def test_result_rounding_to_zero_rejected(self) -> None:
        with pytest.raises(ValueError, match="price zero"):
            crashed_price(1, 99)


def test_format_price() -> None:
    assert format_price(WETH_PRICE) == "$2,400.00"


class TestMockOracleReader:
    @pytest.mark.asyncio
    async def test_get_price(self, addresses: dict[str, str]) -> None:
        client = AsyncMock()
        client.eth_call.return_value = "0x" + f"{WETH_PRICE:064x}"
        reader = MockOracleReader(client, addresses["oracle"])

        price = await reader.get_price(addresses["weth"])

        assert price == WETH_PRICE
        to, data = client.eth_call.call_args[0]
        assert to == addresses["oracle"]
        assert data.startswith("0x41976e09")
        assert data.endswith(addresses["weth"][2:].lower())

    @pytest.mark.asyncio
    async def test_empty_result_raises(self, addresses: dict[str, str]) -> None:
        client = AsyncMock()
        client.eth_call.return_value = "0x"
        reader = MockOracleReader(client, addresses["oracle"])

        with pytest.raises(ValueError):
            await reader.get_price(addresses["weth"])
