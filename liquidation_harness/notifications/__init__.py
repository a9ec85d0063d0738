"""Notification modules."""
from .telegram import TelegramNotifier

__all__ = ["TelegramNotifier"]
