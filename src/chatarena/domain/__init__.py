"""Pure rules for the battle arena.

This package holds everything the engine decides without touching storage:

* Dataclasses describing combatants and restriction bookkeeping (see :mod:`models`).
* Enumerations and strongly-typed identifiers used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions for scoring, ratings, battle resolution, narratives and
  throttling.

Services load state through the repository adapters, hand snapshots to these
functions and persist whatever they return.
"""

from . import (
    battle,
    enums,
    errors,
    models,
    narrative,
    rating,
    restrictions,
    rules_config,
    scoring,
    scoring_data,
)

__all__ = [
    "battle",
    "enums",
    "errors",
    "models",
    "narrative",
    "rating",
    "restrictions",
    "rules_config",
    "scoring",
    "scoring_data",
]
