"""Pure parsing functions for the wrapper's history view calls — no I/O."""
from __future__ import annotations

from ...chains.evm.abi import decode_uint256_words

HEALTH_RECORD_WORDS = 3


def parse_history_length(data: str) -> int:
    """Decode ``getHealthHistoryLength`` return data."""
    words = decode_uint256_words(data)
    if not words:
        raise ValueError("getHealthHistoryLength returned no data")
    return words[0]


def parse_health_record(data: str) -> tuple[int, int, int]:
    """Decode one ``getHealthHistory(i)`` entry.

    The struct is static, so it is returned inline as three words:
    blockNumber, timestamp, healthFactor.
    """
    words = decode_uint256_words(data)
    if len(words) < HEALTH_RECORD_WORDS:
        raise ValueError(
            f"getHealthHistory returned {len(words)} words, "
            f"expected {HEALTH_RECORD_WORDS}"
        )
    block_number, timestamp, health_factor = words[:HEALTH_RECORD_WORDS]
    return block_number, timestamp, health_factor
