"""Chain clock protocol — supplies block height and timestamp per observation."""
from typing import Protocol

from ..models import BlockStamp


class ChainClock(Protocol):
    """Source of the chain head's block number and timestamp."""

    async def current_block(self) -> BlockStamp: ...
