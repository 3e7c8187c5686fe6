"""Game domain services: words, puzzles, scoring, timers and sessions.

This package holds the round state machine and its collaborators. HTTP
routes and socket handlers import from here, keeping transport concerns
separate from core game mechanics.
"""
