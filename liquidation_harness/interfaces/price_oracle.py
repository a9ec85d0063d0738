"""Price oracle protocol — price feed abstraction."""
from typing import Protocol


class PriceOracle(Protocol):
    """Reads an asset's USD price with 8 decimals."""

    async def get_price(self, asset: str) -> int: ...
