"""Health factor history recorder for lending-protocol liquidation tests."""

__version__ = "0.1.0"
