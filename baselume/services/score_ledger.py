"""
Score Ledger Service

Append-only ledger of scored submissions. Every accepted score is written
as a ScoreEntry together with the player's lifetime aggregate, the player's
per-day aggregate and the day totals, all in one transaction.

Key Features:
- Submitter role check on every write
- Duplicate protection keyed by (player, game id)
- Day stamping from an injectable DayClock at the moment of the write
- One write lock per ledger instance shared with the champion minter
- Zero-valued reads for unknown players and empty days
"""

import asyncio
import logging
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from baselume.config import Config
from baselume.constants import LedgerEvents, SettingKeys
from baselume.data_models.ledger import ScoreReceipt
from baselume.database.models import (
    DailyPlayerScore, DayRecord, LedgerSetting, PlayerAccount, ScoreEntry
)
from baselume.services.base import BaseService
from baselume.utils.day_clock import DayClock
from baselume.utils.ledger_exceptions import (
    AlreadyMinted, DuplicateSubmission, NoWinnerForDay, Unauthorized
)
from baselume.utils.validation import (
    format_address, normalize_address, try_normalize_address, validate_game_id, validate_score
)

logger = logging.getLogger(__name__)

class ScoreLedgerService(BaseService):
    """Authoritative store of per-player lifetime and daily scores."""

    def __init__(self, session_factory, clock: Optional[DayClock] = None,
                 owner_address: Optional[str] = None):
        super().__init__(session_factory)
        self.clock = clock or DayClock()
        self.owner = normalize_address(owner_address or Config.OWNER_ADDRESS)
        # Serializes every mutation; rankings span all players so one lock is enough
        self.write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def record_score(self, player: str, score: int, game_id: str, *, caller: str) -> ScoreReceipt:
        """
        Record one scored submission for a player.

        Args:
            player: Player address receiving the score
            score: Integer score between 1 and 10
            game_id: Opaque id of the scored game, unique per player
            caller: Address of the submitter making the call

        Returns:
            ScoreReceipt describing the stored entry

        Raises:
            InvalidAddress: player is not a valid address
            InvalidScore: score is not an integer between 1 and 10
            InvalidGameId: game id is empty, too long or not a string
            Unauthorized: caller is not a submitter
            DuplicateSubmission: game id already recorded for this player
        """
        player_address = normalize_address(player)
        validate_score(score)
        validate_game_id(game_id)

        async with self.write_lock:
            async with self.get_session() as session:
                if not await self._is_submitter(session, try_normalize_address(caller)):
                    logger.warning(f"Rejected score from non-submitter {caller}")
                    raise Unauthorized(caller, "record scores")

                existing = await session.scalar(
                    select(ScoreEntry.id).where(
                        ScoreEntry.player_address == player_address,
                        ScoreEntry.game_id == game_id
                    )
                )
                if existing is not None:
                    logger.warning(
                        f"Duplicate submission of game '{game_id}' for {format_address(player_address)}"
                    )
                    raise DuplicateSubmission(player_address, game_id)

                receipt = await self._append_entry(session, player_address, score, game_id)

        logger.info(
            f"Recorded score {score} for {format_address(player_address)} "
            f"(game '{game_id}', day {receipt.day}, entry {receipt.entry_id})"
        )
        self._emit(
            LedgerEvents.SCORE_RECORDED,
            player=receipt.player,
            score=receipt.score,
            timestamp=receipt.timestamp,
            game_id=receipt.game_id,
        )
        return receipt

    async def _append_entry(self, session: AsyncSession, player_address: str,
                            score: int, game_id: str) -> ScoreReceipt:
        """Append the entry and fold it into every aggregate."""
        timestamp = self.clock.now()
        day = self.clock.day_of(timestamp)

        entry = ScoreEntry(
            player_address=player_address,
            score=score,
            day=day,
            game_id=game_id,
            timestamp=timestamp
        )
        session.add(entry)
        try:
            await session.flush()
        except IntegrityError as e:
            # Another process recorded the same game between our check and insert
            raise DuplicateSubmission(player_address, game_id) from e

        account = await session.get(PlayerAccount, player_address)
        if account is None:
            account = PlayerAccount(
                address=player_address,
                lifetime_score=score,
                total_games=1,
                first_entry_id=entry.id,
                first_seen_at=timestamp,
                last_seen_at=timestamp
            )
            session.add(account)
        else:
            account.lifetime_score += score
            account.total_games += 1
            account.last_seen_at = timestamp

        daily = await session.scalar(
            select(DailyPlayerScore).where(
                DailyPlayerScore.day == day,
                DailyPlayerScore.player_address == player_address
            )
        )
        if daily is None:
            session.add(DailyPlayerScore(
                day=day,
                player_address=player_address,
                score=score,
                games=1,
                first_entry_id=entry.id
            ))
        else:
            daily.score += score
            daily.games += 1

        day_record = await session.get(DayRecord, day)
        if day_record is None:
            session.add(DayRecord(day=day, total_games=1, total_score=score, nft_awarded=False))
        else:
            day_record.total_games += 1
            day_record.total_score += score

        return ScoreReceipt(
            entry_id=entry.id,
            player=player_address,
            score=score,
            day=day,
            game_id=game_id,
            timestamp=timestamp
        )

    async def mark_nft_awarded(self, session: AsyncSession, day: int, *, caller: str):
        """
        Flip a day's nft_awarded flag inside the caller's transaction.

        Only the wired champion minter may call this. The flag moves from
        False to True at most once per day.
        """
        minter = await self._get_setting(session, SettingKeys.CHAMPION_MINTER)
        if minter is None or minter != try_normalize_address(caller):
            raise Unauthorized(caller, "mark daily champions")

        day_record = await session.get(DayRecord, day)
        if day_record is None or day_record.total_games == 0:
            raise NoWinnerForDay(day)
        if day_record.nft_awarded:
            raise AlreadyMinted(day)
        day_record.nft_awarded = True

    def declare_daily_winner(self, day: int, winner: str, score: int):
        """Announce a finalized day once its award has been committed."""
        logger.info(f"Daily winner declared for day {day}: {format_address(winner)} with {score} points")
        self._emit(LedgerEvents.DAILY_WINNER_DECLARED, winner=winner, day=day, total_score=score)

    # ------------------------------------------------------------------
    # Roles and wiring
    # ------------------------------------------------------------------

    async def set_champion_minter(self, minter_address: str, *, caller: str):
        """
        Link the champion minter to this ledger. Callable once by the owner.

        Repeating the call with the already wired address is a no-op; any
        other address is rejected.
        """
        self._require_owner(caller, "wire the champion minter")
        minter = normalize_address(minter_address)

        async with self.write_lock:
            async with self.get_session() as session:
                current = await self._get_setting(session, SettingKeys.CHAMPION_MINTER)
                if current == minter:
                    logger.debug(f"Champion minter already set to {format_address(minter)}")
                    return
                if current is not None:
                    raise Unauthorized(caller, "rewire the champion minter")
                session.add(LedgerSetting(key=SettingKeys.CHAMPION_MINTER, value=minter))

        logger.info(f"Champion minter linked: {format_address(minter)}")

    async def add_submitter(self, submitter_address: str, *, caller: str):
        """Grant the submitter role to another address (owner only)."""
        self._require_owner(caller, "grant the submitter role")
        submitter = normalize_address(submitter_address)
        if submitter == self.owner:
            return

        async with self.write_lock:
            async with self.get_session() as session:
                key = SettingKeys.SUBMITTER_PREFIX + submitter
                if await self._get_setting(session, key) is None:
                    session.add(LedgerSetting(key=key, value='1'))
                    logger.info(f"Granted submitter role to {format_address(submitter)}")

    async def get_champion_minter(self) -> Optional[str]:
        async with self.get_session() as session:
            return await self._get_setting(session, SettingKeys.CHAMPION_MINTER)

    async def is_submitter(self, address: str) -> bool:
        async with self.get_session() as session:
            return await self._is_submitter(session, try_normalize_address(address))

    def _require_owner(self, caller: str, action: str):
        if try_normalize_address(caller) != self.owner:
            logger.warning(f"Rejected attempt by {caller} to {action}")
            raise Unauthorized(caller, action)

    async def _is_submitter(self, session: AsyncSession, address: Optional[str]) -> bool:
        if address is None:
            return False
        if address == self.owner:
            return True
        return await self._get_setting(session, SettingKeys.SUBMITTER_PREFIX + address) is not None

    async def _get_setting(self, session: AsyncSession, key: str) -> Optional[str]:
        setting = await session.get(LedgerSetting, key)
        return setting.value if setting else None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_current_day(self) -> int:
        return self.clock.current_day()

    async def get_total_score(self, player: str) -> int:
        """Lifetime score of a player, 0 when unknown."""
        address = try_normalize_address(player)
        if address is None:
            return 0
        async with self.get_session() as session:
            account = await session.get(PlayerAccount, address)
            return account.lifetime_score if account else 0

    async def get_daily_score(self, player: str, day: Optional[int] = None) -> int:
        """Score of a player on a day (default: the current day), 0 when none."""
        address = try_normalize_address(player)
        if address is None:
            return 0
        if day is None:
            day = self.get_current_day()
        async with self.get_session() as session:
            score = await session.scalar(
                select(DailyPlayerScore.score).where(
                    DailyPlayerScore.day == day,
                    DailyPlayerScore.player_address == address
                )
            )
            return score or 0

    async def get_total_players(self) -> int:
        """Number of distinct players with at least one entry."""
        async with self.get_session() as session:
            return await session.scalar(select(func.count(PlayerAccount.address))) or 0

    async def get_player_entries(self, player: str, day: Optional[int] = None) -> List[ScoreReceipt]:
        """A player's entries, oldest first, optionally limited to one day."""
        address = try_normalize_address(player)
        if address is None:
            return []
        async with self.get_session() as session:
            stmt = select(ScoreEntry).where(ScoreEntry.player_address == address)
            if day is not None:
                stmt = stmt.where(ScoreEntry.day == day)
            result = await session.execute(stmt.order_by(ScoreEntry.id))
            return [
                ScoreReceipt(
                    entry_id=entry.id,
                    player=entry.player_address,
                    score=entry.score,
                    day=entry.day,
                    game_id=entry.game_id,
                    timestamp=entry.timestamp
                )
                for entry in result.scalars()
            ]
