"""
Champion Minter Service

Awards one daily champion token per finalized day. A day can be minted once
it has fully elapsed, has at least one score entry, and has not been minted
before. Minting is permissionless: any caller may trigger it, and retries
are rejected with AlreadyMinted instead of minting twice.

Token ids come from one global counter starting at 1 and are never reused.
"""

import logging
from typing import List, Optional
from sqlalchemy import select, func

from baselume.config import Config
from baselume.constants import LedgerEvents, ZERO_ADDRESS
from baselume.data_models.ledger import DailyChampion, TokenDetails
from baselume.database.models import ChampionRecord, DayRecord
from baselume.services.base import BaseService
from baselume.services.ranking import RankingService
from baselume.services.score_ledger import ScoreLedgerService
from baselume.utils.ledger_exceptions import (
    AlreadyMinted, DayNotElapsed, LedgerException, NoWinnerForDay, TokenNotFound
)
from baselume.utils.validation import format_address, normalize_address, try_normalize_address

logger = logging.getLogger(__name__)

class ChampionMinterService(BaseService):
    """Service that mints and tracks daily champion tokens."""

    def __init__(self, session_factory, ledger: ScoreLedgerService, ranking: RankingService,
                 address: Optional[str] = None, base_uri: Optional[str] = None):
        super().__init__(session_factory)
        self.ledger = ledger
        self.ranking = ranking
        self.address = normalize_address(address or Config.MINTER_ADDRESS)
        self.base_uri = base_uri if base_uri is not None else Config.TOKEN_BASE_URI

    async def mint_daily_champion(self, day: int) -> int:
        """
        Mint the champion token for an elapsed day.

        Args:
            day: Day index to finalize

        Returns:
            The newly assigned token id

        Raises:
            DayNotElapsed: day is the current day or later
            AlreadyMinted: the day already has a champion
            NoWinnerForDay: nobody scored on that day
            Unauthorized: this minter is not wired into the ledger
        """
        if isinstance(day, bool) or not isinstance(day, int) or day < 0:
            raise ValueError("day must be a non-negative integer")

        # Shares the ledger lock so no score can land while the day is finalized
        async with self.ledger.write_lock:
            current_day = self.ledger.get_current_day()
            if day >= current_day:
                logger.warning(f"Refused to mint day {day}: current day is {current_day}")
                raise DayNotElapsed(day, current_day)

            async with self.get_session() as session:
                day_record = await session.get(DayRecord, day)
                if day_record is not None and day_record.nft_awarded:
                    raise AlreadyMinted(day)

                winner = await self.ranking.get_daily_winner(day, session=session)
                if winner.address == ZERO_ADDRESS:
                    raise NoWinnerForDay(day)

                last_token_id = await session.scalar(select(func.max(ChampionRecord.token_id)))
                token_id = (last_token_id or 0) + 1

                session.add(ChampionRecord(
                    token_id=token_id,
                    day=day,
                    champion_address=winner.address,
                    score=winner.score,
                    minted_at=self.ledger.clock.now()
                ))
                await self.ledger.mark_nft_awarded(session, day, caller=self.address)

        logger.info(
            f"Minted champion token {token_id} for day {day} to "
            f"{format_address(winner.address)} ({winner.score} points)"
        )
        self.ledger.declare_daily_winner(day, winner.address, winner.score)
        self._emit(
            LedgerEvents.DAILY_CHAMPION_MINTED,
            winner=winner.address,
            token_id=token_id,
            day=day,
            score=winner.score,
        )
        return token_id

    async def mint_pending_champions(self, lookback_days: int = 1) -> List[int]:
        """
        Mint every unminted elapsed day within the lookback window.

        Days with no entries or an existing champion are skipped. Returns the
        token ids minted by this call.
        """
        current_day = self.ledger.get_current_day()
        minted = []
        for day in range(max(0, current_day - lookback_days), current_day):
            try:
                minted.append(await self.mint_daily_champion(day))
            except (AlreadyMinted, NoWinnerForDay) as e:
                logger.debug(f"Skipping day {day}: {e}")
            except LedgerException as e:
                logger.error(f"Could not mint champion for day {day}: {e}")
                raise
        return minted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_daily_champion(self, day: int) -> DailyChampion:
        """Champion of a day, or zero values when the day is not minted."""
        async with self.get_session() as session:
            record = await session.scalar(select(ChampionRecord).where(ChampionRecord.day == day))
            if record is None:
                return DailyChampion(day=day, champion=ZERO_ADDRESS, score=0, token_id=0)
            return self._to_champion(record)

    async def get_champions_in_range(self, start_day: int, end_day: int) -> List[DailyChampion]:
        """Minted champions with start_day <= day <= end_day, ascending by day."""
        if end_day < start_day:
            return []
        async with self.get_session() as session:
            result = await session.execute(
                select(ChampionRecord)
                .where(ChampionRecord.day >= start_day, ChampionRecord.day <= end_day)
                .order_by(ChampionRecord.day)
            )
            return [self._to_champion(record) for record in result.scalars()]

    async def is_champion(self, address: str) -> bool:
        return await self.balance_of(address) > 0

    async def get_owned_tokens(self, address: str) -> List[int]:
        """Token ids owned by an address, ascending."""
        owner = try_normalize_address(address)
        if owner is None:
            return []
        async with self.get_session() as session:
            result = await session.execute(
                select(ChampionRecord.token_id)
                .where(ChampionRecord.champion_address == owner)
                .order_by(ChampionRecord.token_id)
            )
            return list(result.scalars())

    async def balance_of(self, address: str) -> int:
        owner = try_normalize_address(address)
        if owner is None:
            return 0
        async with self.get_session() as session:
            count = await session.scalar(
                select(func.count(ChampionRecord.token_id))
                .where(ChampionRecord.champion_address == owner)
            )
            return count or 0

    async def owner_of(self, token_id: int) -> str:
        record = await self._get_token(token_id)
        return record.champion_address

    async def token_uri(self, token_id: int) -> str:
        await self._get_token(token_id)
        return f"{self.base_uri}{token_id}"

    async def get_token_details(self, token_id: int) -> TokenDetails:
        record = await self._get_token(token_id)
        return TokenDetails(
            token_id=record.token_id,
            day=record.day,
            winner=record.champion_address,
            score=record.score,
            token_uri=f"{self.base_uri}{record.token_id}"
        )

    async def total_supply(self) -> int:
        async with self.get_session() as session:
            return await session.scalar(select(func.count(ChampionRecord.token_id))) or 0

    async def _get_token(self, token_id: int) -> ChampionRecord:
        if isinstance(token_id, bool) or not isinstance(token_id, int):
            raise TokenNotFound(token_id)
        async with self.get_session() as session:
            record = await session.get(ChampionRecord, token_id)
        if record is None:
            raise TokenNotFound(token_id)
        return record

    @staticmethod
    def _to_champion(record: ChampionRecord) -> DailyChampion:
        return DailyChampion(
            day=record.day,
            champion=record.champion_address,
            score=record.score,
            token_id=record.token_id
        )
