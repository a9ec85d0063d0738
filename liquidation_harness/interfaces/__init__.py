"""Protocol interfaces for the liquidation harness."""
from .chain import ChainClock
from .health_source import HealthSource
from .notifier import Notifier
from .price_oracle import PriceOracle

__all__ = ["ChainClock", "HealthSource", "Notifier", "PriceOracle"]
