"""Notifier protocol — where health alerts and observation logs go."""
from typing import Protocol


class Notifier(Protocol):
    """Delivers at-risk alerts (loud) and per-observation logs (optionally muted)."""

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_log(self, message: str, silent: bool = True) -> bool: ...
