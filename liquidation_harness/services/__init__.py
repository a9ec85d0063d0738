"""Service modules"""
from .tracker import PositionAction, PositionTracker
from .monitor import Monitor

__all__ = ["PositionAction", "PositionTracker", "Monitor"]
