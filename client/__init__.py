"""Pygame client for the Dodge Arena game."""
