"""
pairup - Rules engine for a fill-in-the-blank party card game

Players match response cards to a prompt card, a rotating judge picks
the best match, and the first player to the target score wins.
The package provides:
- The game aggregate and its phase state machine
- Whole-game persistence (memory or JSON files)
- Per-game serialization of concurrent calls
- A framework-agnostic service with read views
"""

__version__ = "0.1.0"
