"""Game domain services: players, rooms, fleets and game sessions.

This package contains the game rules and state transitions. Socket handlers
reach it only through ``battleship.server.GameServer``, keeping transport
concerns separated from core game mechanics.
"""
