"""
Gridtactics - Turn-based Grid Tactics Rules Engine

A deterministic rules engine for grid tactics games. Given a board of
weighted tiles and rosters of units it provides:
- Movement reachability and shortest paths
- Attack and skill target sets
- Seeded two-phase combat with experience
- A turn state machine and bot policies
"""

__version__ = "0.1.0"
