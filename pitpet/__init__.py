"""
Pitpet - Seeded Reel Duel Engine

A deterministic, seed-driven duel engine for two pitpets.
Each round a weighted three-column reel offers three combo rows,
each side commits one, and the resolver applies the combat math.

The engine provides:
- A reproducible random source threaded through every draw
- Reel spins with single-use lock/respin privileges
- An expected-value opponent
- Combat resolution (elements, crits, shields, DoT, leech, charge)
- The PetJack card sub-game
- A pure reducer plus immutable snapshots for the UI layer
"""

__version__ = "0.1.0"
