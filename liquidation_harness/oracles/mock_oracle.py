"""Mock price oracle reader and price-crash helpers."""
import logging

from ..chains.evm.abi import GET_PRICE, decode_uint256_words, encode_call
from ..chains.evm.client import EvmClient

logger = logging.getLogger(__name__)

# Chainlink-style USD prices
PRICE_DECIMALS = 8


def crashed_price(price: int, drop_percentage: int) -> int:
    """Return ``price`` reduced by ``drop_percentage`` percent (integer math).

    Raises:
        ValueError: price is not positive, drop is outside (0, 100), or the
            result would be zero (the oracle rejects zero prices).
    """
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")
    if not 0 < drop_percentage < 100:
        raise ValueError(
            f"drop_percentage must be between 0 and 100, got {drop_percentage}"
        )
    new_price = price * (100 - drop_percentage) // 100
    if new_price == 0:
        raise ValueError("price zero")
    return new_price


def format_price(raw: int) -> str:
    return f"${raw / 10**PRICE_DECIMALS:,.2f}"


class MockOracleReader:
    """Read asset prices from the harness's ``MockOracle`` contract."""

    def __init__(self, client: EvmClient, oracle_address: str) -> None:
        self._client = client
        self.oracle_address = oracle_address

    async def get_price(self, asset: str) -> int:
        raw = await self._client.eth_call(
            self.oracle_address, encode_call(GET_PRICE, asset)
        )
        words = decode_uint256_words(raw)
        if not words:
            raise ValueError(f"Oracle returned no data for {asset}")
        logger.info("Oracle price for %s: %s", asset, format_price(words[0]))
        return words[0]
