"""Server package for the Dodge Arena game."""

__all__ = [
    "collision",
    "config",
    "constants",
    "main",
    "network",
    "obstacle",
    "protocol",
    "world",
]
