"""
Game History

Stores every completed round and the final result in the history database.
Listens on the EventBus, so the engine never touches the database.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload, sessionmaker

from models.base import SessionLocal, get_session
from models.game import GameRecord, RoundRecord
from models.schemas import GameResponse
from services.event_bus import EventBus

logger = logging.getLogger(__name__)


class GameHistoryRecorder:
    """
    Persists game results as they happen.

    Usage:
        recorder = GameHistoryRecorder(event_bus)
        # ... game runs, rounds are written as they complete ...
        recorder.recent_games(limit=5)
    """

    def __init__(self, event_bus: EventBus, session_factory: Optional[sessionmaker] = None):
        """
        Args:
            event_bus: Signal hub to listen on
            session_factory: Session factory (defaults to the history database)
        """
        self.event_bus = event_bus
        self.session_factory = session_factory or SessionLocal
        self.game_id: Optional[int] = None

        event_bus.subscribe(event_bus.game_started, self._on_game_started)
        event_bus.subscribe(event_bus.round_completed, self._on_round_completed)
        event_bus.subscribe(event_bus.game_over, self._on_game_over)

    def _on_game_started(self, info: dict) -> None:
        with get_session(self.session_factory) as session:
            game = GameRecord(win_threshold=info.get("win_threshold", 0))
            session.add(game)
            session.flush()
            self.game_id = game.id
        logger.info("Recording game %d", self.game_id)

    def _on_round_completed(self, result: dict) -> None:
        if self.game_id is None:
            logger.warning("Round %s completed before a game was recorded", result.get("round"))
            return

        with get_session(self.session_factory) as session:
            game = session.get(GameRecord, self.game_id)
            session.add(RoundRecord(
                game_id=self.game_id,
                round_number=result["round"],
                buzzed_team=result.get("buzzed_team"),
                winning_team=result.get("winning_team"),
                points=result.get("points", 0),
                score_a=result["score_a"],
                score_b=result["score_b"],
            ))
            game.score_a = result["score_a"]
            game.score_b = result["score_b"]

    def _on_game_over(self, result: dict) -> None:
        if self.game_id is None:
            return

        with get_session(self.session_factory) as session:
            game = session.get(GameRecord, self.game_id)
            game.winner = result["winner"]
            game.score_a = result["score_a"]
            game.score_b = result["score_b"]
            game.finished_at = datetime.now(timezone.utc)
        logger.info("Game %d stored: Team %s won", self.game_id, result["winner"])

    def recent_games(self, limit: int = 10) -> list[GameResponse]:
        """Most recent games first, with their rounds."""
        with get_session(self.session_factory) as session:
            games = session.scalars(
                select(GameRecord)
                .options(selectinload(GameRecord.rounds))
                .order_by(GameRecord.id.desc())
                .limit(limit)
            ).all()
            return [GameResponse.model_validate(game) for game in games]
