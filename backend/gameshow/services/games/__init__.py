"""Game domain services: sessions, venues, timers, scoring and the engine.

This package contains the transport-agnostic game logic that both the
Socket.IO gateway and the HTTP routes call into, keeping transport
concerns separated from core game mechanics.
"""
from .engine import GameEngine
from .notifier import Binding, Notifier, venue_room
from .store import SessionStore
from .timers import StageTimers
from .venues import VenueRegistry

__all__ = [
    'Binding',
    'GameEngine',
    'Notifier',
    'SessionStore',
    'StageTimers',
    'VenueRegistry',
    'venue_room',
]
