"""EVM JSON-RPC client with endpoint fallback."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import NetworkConfig
from ...models import BlockStamp
from .abi import hex_to_int

logger = logging.getLogger(__name__)


class EvmClient:
    """EVM node RPC client with automatic endpoint fallback."""

    def __init__(self, config: NetworkConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0
        self._request_id = 0

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call, trying each endpoint once starting from the last good one."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if "error" in result:
                            raise RuntimeError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed (%s): %s", rpc_url, method, e)
                continue

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def chain_id(self) -> int:
        return hex_to_int(await self.rpc_call("eth_chainId", []))

    async def get_block(self, tag: str | int = "latest") -> BlockStamp:
        """Fetch a block header (without transactions) as a BlockStamp."""
        block_tag = hex(tag) if isinstance(tag, int) else tag
        block = await self.rpc_call("eth_getBlockByNumber", [block_tag, False])
        if not block:
            raise RuntimeError(f"Block {block_tag} not found")
        return BlockStamp(
            number=hex_to_int(block["number"]),
            timestamp=hex_to_int(block["timestamp"]),
        )

    async def current_block(self) -> BlockStamp:
        return await self.get_block("latest")

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        """Execute a read-only call and return the raw hex result."""
        result = await self.rpc_call("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise RuntimeError(f"Unexpected eth_call result: {result!r}")
        return result
