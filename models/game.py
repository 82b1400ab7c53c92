"""
Game and Round models for the buzzer game history.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Integer, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameRecord(Base):
    """
    One game, from the first round to a team reaching the win threshold.

    Games that were stopped early keep finished_at and winner empty.
    """
    __tablename__ = "games"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    win_threshold: Mapped[int] = mapped_column(Integer, nullable=False)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # "A" or "B"
    winner: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)

    # Final (or latest) scores
    score_a: Mapped[int] = mapped_column(Integer, default=0)
    score_b: Mapped[int] = mapped_column(Integer, default=0)

    rounds: Mapped[list["RoundRecord"]] = relationship(
        back_populates="game",
        order_by="RoundRecord.round_number",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<GameRecord(id={self.id}, A={self.score_a}, B={self.score_b}, winner={self.winner})>"

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None


class RoundRecord(Base):
    """A completed round: who buzzed, who was awarded, and the scores after it."""
    __tablename__ = "rounds"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)

    buzzed_team: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)
    winning_team: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=0)

    # Cumulative scores after this round
    score_a: Mapped[int] = mapped_column(Integer, default=0)
    score_b: Mapped[int] = mapped_column(Integer, default=0)

    completed_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    game: Mapped["GameRecord"] = relationship(back_populates="rounds")

    def __repr__(self) -> str:
        return f"<RoundRecord(game={self.game_id}, round={self.round_number}, winner={self.winning_team}, points={self.points})>"
