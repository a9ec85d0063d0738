"""Price oracle readers."""
from .mock_oracle import MockOracleReader

__all__ = ["MockOracleReader"]
