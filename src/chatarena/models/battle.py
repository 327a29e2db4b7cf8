"""Battle model for the battle arena.

This module contains the model for battle records, the immutable outcome of
one resolution between an attacker and a defender.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .combatant import Combatant


class Battle(Base, TimestampCreatedMixin):
    """Represents one resolved battle.

    Rows are appended once and never updated.

    Attributes:
        id: Primary key
        attacker_id: Foreign key to the attacking combatant
        defender_id: Foreign key to the defending combatant
        winner_id: Either attacker_id or defender_id
        attacker_score: Attacker's final blended score (>= 10)
        defender_score: Defender's final blended score (>= 10)
        attacker_rating_delta: Rating change applied to the attacker
        defender_rating_delta: Rating change applied to the defender
        attacker_analysis: JSON with the attacker's score vector and blend parts
        defender_analysis: JSON with the defender's score vector and blend parts
        narrative: JSON with summary and either breakdown or explanation + tip
    """

    __tablename__ = "battles"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Foreign keys
    attacker_id: Mapped[int] = mapped_column(Integer, ForeignKey("combatants.id"), nullable=False)
    defender_id: Mapped[int] = mapped_column(Integer, ForeignKey("combatants.id"), nullable=False)
    winner_id: Mapped[int] = mapped_column(Integer, ForeignKey("combatants.id"), nullable=False)

    # Outcome
    attacker_score: Mapped[float] = mapped_column(Float, nullable=False)
    defender_score: Mapped[float] = mapped_column(Float, nullable=False)
    attacker_rating_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    defender_rating_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    attacker_analysis: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    defender_analysis: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    narrative: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Relationships
    attacker: Mapped["Combatant"] = relationship("Combatant", foreign_keys=[attacker_id])
    defender: Mapped["Combatant"] = relationship("Combatant", foreign_keys=[defender_id])

    # Table constraints
    __table_args__ = (
        CheckConstraint("attacker_id <> defender_id", name="ck_battles_distinct"),
        CheckConstraint(
            "winner_id = attacker_id OR winner_id = defender_id", name="ck_battles_winner"
        ),
        CheckConstraint("attacker_score >= 10", name="ck_battles_attacker_score"),
        CheckConstraint("defender_score >= 10", name="ck_battles_defender_score"),
        Index("idx_battles_attacker", "attacker_id", "created_at"),
        Index("idx_battles_defender", "defender_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Battle(id={self.id}, attacker={self.attacker_id}, "
            f"defender={self.defender_id}, winner={self.winner_id})>"
        )
