"""EVM chain access — JSON-RPC client and ABI helpers."""
