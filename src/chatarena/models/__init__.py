"""SQLAlchemy models for the battle arena.

This module exports all database models and provides access to the
declarative base and seed data functions.
"""

# Base classes
from .base import Base, TimestampCreatedMixin, TimestampMixin, utc_now

# Battle models
from .battle import Battle

# Combatant models
from .combatant import Combatant

# Restriction models
from .restriction import BattleRestriction

# Seed data functions
from .seed_data import NPC_ROSTER, seed_npc_combatants

__all__ = [
    "NPC_ROSTER",
    "Base",
    "Battle",
    "BattleRestriction",
    "Combatant",
    "TimestampCreatedMixin",
    "TimestampMixin",
    "seed_npc_combatants",
    "utc_now",
]
