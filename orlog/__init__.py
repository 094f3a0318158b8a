"""
Orlog - Dice Combat Engine

A deterministic round-resolution engine for the two-player dice game Orlog.
Each round both players roll six dice, lock some, reroll, and may invoke a
god favor. The engine provides:
- Dice pools with locks
- The god favor catalog
- Round resolution (favors, steal, damage, gold income)
- Heuristic bot opponents
- Match snapshots
"""

__version__ = "0.1.0"
