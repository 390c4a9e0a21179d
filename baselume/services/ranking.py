"""
Ranking service for the lifetime leaderboard and daily winners.

Reads the ordered aggregates the ledger maintains on every write, so each
query walks an index instead of sorting all players in Python.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from baselume.config import Config
from baselume.constants import ZERO_ADDRESS
from baselume.data_models.ledger import DailyStats, DailyWinner, PlayerScore
from baselume.database.models import DailyPlayerScore, DayRecord, PlayerAccount
from baselume.services.base import BaseService
from baselume.utils.day_clock import DayClock


class RankingService(BaseService):
    """Service for leaderboard and daily winner queries."""

    def __init__(self, session_factory, clock: Optional[DayClock] = None,
                 max_limit: Optional[int] = None):
        super().__init__(session_factory)
        self.clock = clock or DayClock()
        self.max_limit = max_limit or Config.MAX_LEADERBOARD_LIMIT

    def _effective_limit(self, limit: int) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValueError("limit must be an integer")
        return min(limit, self.max_limit)

    async def get_top_players(self, limit: int = Config.DEFAULT_LEADERBOARD_LIMIT) -> List[PlayerScore]:
        """
        Top players by lifetime score.

        Ties go to the player whose first submission came earliest. Returns
        fewer rows when fewer players exist and an empty list for limit < 1.
        """
        limit = self._effective_limit(limit)
        if limit < 1:
            return []

        async with self.get_session() as session:
            result = await session.execute(
                select(PlayerAccount.address, PlayerAccount.lifetime_score)
                .order_by(PlayerAccount.lifetime_score.desc(), PlayerAccount.first_entry_id.asc())
                .limit(limit)
            )
            return [
                PlayerScore(rank=index, address=row.address, total_score=row.lifetime_score)
                for index, row in enumerate(result, start=1)
            ]

    async def get_daily_leaderboard(self, day: Optional[int] = None,
                                    limit: int = Config.DEFAULT_LEADERBOARD_LIMIT) -> List[PlayerScore]:
        """Players ranked by their score on one day, earliest submission first on ties."""
        limit = self._effective_limit(limit)
        if limit < 1:
            return []
        if day is None:
            day = self.clock.current_day()

        async with self.get_session() as session:
            rows = await self._daily_ranking(session, day, limit)
            return [
                PlayerScore(rank=index, address=row.player_address, total_score=row.score)
                for index, row in enumerate(rows, start=1)
            ]

    async def get_daily_winner(self, day: int, session: Optional['AsyncSession'] = None) -> DailyWinner:
        """
        Highest scorer of a day, or the zero address with score 0.

        Pass ``session`` to read inside an open transaction.
        """
        if session is not None:
            return await self._winner_in(session, day)
        async with self.get_session() as own_session:
            return await self._winner_in(own_session, day)

    async def get_daily_stats(self, day: Optional[int] = None) -> DailyStats:
        """
        Totals, winner and award flag for a day; zero values for an empty day.

        Totals and the winner are read in a single statement.
        """
        if day is None:
            day = self.clock.current_day()

        async with self.get_session() as session:
            result = await session.execute(
                select(
                    DayRecord.total_games,
                    DayRecord.total_score,
                    DayRecord.nft_awarded,
                    self._top_of_day(DailyPlayerScore.player_address).label('top_player'),
                    self._top_of_day(DailyPlayerScore.score).label('top_score'),
                )
                .where(DayRecord.day == day)
            )
            row = result.one_or_none()

        if row is None or row.total_games == 0:
            return DailyStats(
                day=day,
                total_games=0,
                total_score=0,
                top_player=ZERO_ADDRESS,
                top_score=0,
                nft_awarded=False
            )
        return DailyStats(
            day=day,
            total_games=row.total_games,
            total_score=row.total_score,
            top_player=row.top_player or ZERO_ADDRESS,
            top_score=row.top_score or 0,
            nft_awarded=bool(row.nft_awarded)
        )

    async def _winner_in(self, session: 'AsyncSession', day: int) -> DailyWinner:
        rows = await self._daily_ranking(session, day, 1)
        if not rows:
            return DailyWinner(address=ZERO_ADDRESS, score=0)
        return DailyWinner(address=rows[0].player_address, score=rows[0].score)

    async def _daily_ranking(self, session: 'AsyncSession', day: int, limit: int):
        result = await session.execute(
            self._daily_order(
                select(DailyPlayerScore.player_address, DailyPlayerScore.score)
                .where(DailyPlayerScore.day == day)
            ).limit(limit)
        )
        return list(result)

    def _top_of_day(self, column):
        """Correlated subquery for one column of the top row of the outer day."""
        return self._daily_order(
            select(column).where(DailyPlayerScore.day == DayRecord.day)
        ).limit(1).scalar_subquery()

    @staticmethod
    def _daily_order(stmt):
        return stmt.order_by(DailyPlayerScore.score.desc(), DailyPlayerScore.first_entry_id.asc())
