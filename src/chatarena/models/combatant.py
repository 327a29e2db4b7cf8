"""Combatant model for the battle arena.

This module contains the model for combatants: player- or system-owned
fighters with a rating and a free-text battle phrase.
"""

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chatarena.domain.models import AccountID, CombatantID, CombatantSnapshot

from .base import Base, TimestampMixin


class Combatant(Base, TimestampMixin):
    """Represents a fighter that can attack or defend in battles.

    Rating and the result counters are only changed by the battle service,
    exactly once per battle the combatant takes part in.

    Attributes:
        id: Primary key
        name: Display name used in battle narratives
        owner_account_id: Owning account, or "NPC" for system combatants
        rating: ELO-style skill rating
        wins: Battles won
        losses: Battles lost
        total_battles: Battles fought
        battle_text: Free-text phrase used as combat input
        is_system_controlled: Whether the system owns this combatant
    """

    __tablename__ = "combatants"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Identity
    name: Mapped[str] = mapped_column(String(32), nullable=False)
    owner_account_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Aggregates
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_battles: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    battle_text: Mapped[str] = mapped_column(Text, nullable=False)
    is_system_controlled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("wins >= 0", name="ck_combatants_wins"),
        CheckConstraint("losses >= 0", name="ck_combatants_losses"),
        CheckConstraint("total_battles >= 0", name="ck_combatants_total_battles"),
        Index("idx_combatants_owner", "owner_account_id"),
        Index("idx_combatants_rating", "rating"),
    )

    def to_snapshot(self) -> CombatantSnapshot:
        """Freeze the current state for the rules layer."""
        return CombatantSnapshot(
            id=CombatantID(self.id),
            name=self.name,
            owner_account_id=AccountID(self.owner_account_id),
            rating=self.rating,
            wins=self.wins,
            losses=self.losses,
            total_battles=self.total_battles,
            battle_text=self.battle_text,
            is_system_controlled=self.is_system_controlled,
        )

    def __repr__(self) -> str:
        return f"<Combatant(id={self.id}, name='{self.name}', rating={self.rating})>"
