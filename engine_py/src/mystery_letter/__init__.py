"""
Mystery Letter: authoritative game engine for a hidden-information card elimination game.
"""

__version__ = "1.0.0"
