"""
Session Module - Manages ephemeral duel sessions.

A session represents one match:
- Created with a config and a seed
- Holds the current match state
- Applies commands and publishes snapshots to subscribers
- Dropped when the client is done with it

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, DuelSession, clock_seed

__all__ = [
    "SessionManager",
    "DuelSession",
    "clock_seed",
]
