"""
Computer-controlled participants.
"""

from .base import BaseBot, BotAction
from .heuristic import HeuristicBot

__all__ = ["BaseBot", "BotAction", "HeuristicBot"]
