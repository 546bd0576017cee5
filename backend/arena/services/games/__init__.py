"""Game domain services: match rules, scripted opponent and timers.

This package holds the transport-free game logic imported by the session
registry, keeping Socket.IO concerns separated from core game mechanics.
"""
