"""Liquidation test wrapper contract: its on-chain health factor log."""
from .reader import WrapperHistoryReader

__all__ = ["WrapperHistoryReader"]
