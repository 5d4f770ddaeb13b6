"""
Vila Verde - Sustainable Settlement Simulation Engine

A deterministic engine for a small sustainability-themed settlement game.
Players place buildings on a grid and the engine provides:
- Indicator recomputation from placed buildings
- Progressive unlocking of building kinds and terrain
- Scripted challenges tied to indicator thresholds
- A turn-indexed history of every indicator snapshot
"""

__version__ = "0.1.0"
