"""
WebSocket server and event handling for the Mystery Letter game.
"""

from .events import *
from .server import GameServer, create_app

__all__ = ["GameServer", "create_app"]
