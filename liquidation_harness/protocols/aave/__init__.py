"""Aave V3 lending pool access."""
from .adapter import AaveV3Adapter

__all__ = ["AaveV3Adapter"]
