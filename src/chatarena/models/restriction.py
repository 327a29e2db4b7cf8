"""Battle restriction model.

This module contains the per-account throttling row used by the restriction
guard. Rows are created lazily on an account's first battle and never deleted.
"""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from chatarena.domain.models import AccountID, RestrictionState

from .base import Base, TimestampMixin


class BattleRestriction(Base, TimestampMixin):
    """Cooldown and daily-count bookkeeping for one account.

    Attributes:
        account_id: Primary key, the owning account
        last_battle_at: When the account last started a battle
        daily_count: Battles counted on daily_count_date
        daily_count_date: Calendar day the count applies to
    """

    __tablename__ = "battle_restrictions"

    account_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_battle_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    daily_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    daily_count_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (CheckConstraint("daily_count >= 0", name="ck_restrictions_daily_count"),)

    def to_state(self) -> RestrictionState:
        return RestrictionState(
            account_id=AccountID(self.account_id),
            last_battle_at=self.last_battle_at,
            daily_count=self.daily_count,
            daily_count_date=self.daily_count_date,
        )

    def apply_state(self, state: RestrictionState) -> None:
        self.last_battle_at = state.last_battle_at
        self.daily_count = state.daily_count
        self.daily_count_date = state.daily_count_date

    def __repr__(self) -> str:
        return (
            f"<BattleRestriction(account='{self.account_id}', "
            f"daily_count={self.daily_count}, date={self.daily_count_date})>"
        )
