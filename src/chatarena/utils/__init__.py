"""Utility functions for the battle arena."""

from chatarena.utils.clock import FrozenClock, SystemClock
from chatarena.utils.locks import KeyedLocks, account_key, combatant_key
from chatarena.utils.rng import (
    generate_seed,
    seeded_rng,
    system_rng,
    uniform_noise,
)

__all__ = [
    "FrozenClock",
    "KeyedLocks",
    "SystemClock",
    "account_key",
    "combatant_key",
    "generate_seed",
    "seeded_rng",
    "system_rng",
    "uniform_noise",
]
