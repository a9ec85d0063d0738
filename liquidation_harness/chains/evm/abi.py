"""Minimal ABI helpers for the handful of view calls the harness makes — no I/O."""
from __future__ import annotations

import re

# keccak256 function selectors
GET_USER_ACCOUNT_DATA = "0xbf92857c"  # getUserAccountData(address)
GET_PRICE = "0x41976e09"  # getPrice(address)
GET_HEALTH_HISTORY_LENGTH = "0x4cf48215"  # getHealthHistoryLength()
GET_HEALTH_HISTORY = "0x0b806918"  # getHealthHistory(uint256)

WORD_HEX_CHARS = 64
UINT256_MAX = 2**256 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_address(value: str) -> bool:
    """True for a 0x-prefixed, 20-byte hex address."""
    return bool(_ADDRESS_RE.match(value or ""))


def hex_to_int(value: str) -> int:
    """Parse a JSON-RPC quantity such as ``"0x1a"``."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"Not a hex quantity: {value!r}")
    return int(value, 16)


def encode_address(address: str) -> str:
    """Left-pad an address to a 32-byte ABI word (no 0x prefix)."""
    if not is_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return address[2:].lower().rjust(WORD_HEX_CHARS, "0")


def encode_uint256(value: int) -> str:
    """Encode an unsigned integer as a 32-byte ABI word (no 0x prefix)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Not an integer: {value!r}")
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Value out of uint256 range: {value}")
    return f"{value:064x}"


def encode_call(selector: str, *addresses: str) -> str:
    """Build calldata for a function taking only address arguments."""
    return selector + "".join(encode_address(a) for a in addresses)


def decode_uint256_words(data: str) -> list[int]:
    """Split ABI return data into uint256 words.

    Raises:
        ValueError: data is not 0x-prefixed hex or not word-aligned.
    """
    if not isinstance(data, str) or not data.startswith("0x"):
        raise ValueError(f"Return data must be 0x-prefixed hex: {data!r}")
    body = data[2:]
    if len(body) % WORD_HEX_CHARS:
        raise ValueError(
            f"Return data is not word-aligned ({len(body)} hex chars)"
        )
    try:
        return [
            int(body[i : i + WORD_HEX_CHARS], 16)
            for i in range(0, len(body), WORD_HEX_CHARS)
        ]
    except ValueError as e:
        raise ValueError(f"Return data is not valid hex: {e}") from e
