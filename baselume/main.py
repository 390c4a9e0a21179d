import asyncio
import logging
import traceback
from typing import Optional

from baselume.config import Config
from baselume.database.database import Database
from baselume.services.champion_minter import ChampionMinterService
from baselume.services.ranking import RankingService
from baselume.services.score_ledger import ScoreLedgerService
from baselume.utils.day_clock import DayClock
from baselume.utils.logger import setup_logger

class ScoreEngine:
    """Owns the database and the three ledger services for one process."""

    def __init__(self, database: Optional[Database] = None, clock: Optional[DayClock] = None):
        self.db = database or Database()
        self.clock = clock or DayClock()
        self.ledger: Optional[ScoreLedgerService] = None
        self.ranking: Optional[RankingService] = None
        self.minter: Optional[ChampionMinterService] = None
        self.logger = setup_logger(__name__)

    async def setup(self, owner_address: Optional[str] = None, minter_address: Optional[str] = None):
        """Initialize storage, build services and link the minter to the ledger"""
        self.logger.info("Setting up score engine...")

        if self.db.engine is None:
            await self.db.initialize()

        session_factory = self.db.session_factory
        self.ledger = ScoreLedgerService(session_factory, clock=self.clock, owner_address=owner_address)
        self.ranking = RankingService(session_factory, clock=self.clock)
        self.minter = ChampionMinterService(
            session_factory, self.ledger, self.ranking, address=minter_address
        )

        # One-time wiring; repeating it with the same minter is a no-op
        await self.ledger.set_champion_minter(self.minter.address, caller=self.ledger.owner)

        self.logger.info("Score engine setup complete!")
        return self

    async def log_summary(self):
        """Log the deployment verification numbers"""
        current_day = self.ledger.get_current_day()
        self.logger.info(f"Current day: {current_day} (started {self.clock.day_start(current_day).isoformat()})")
        self.logger.info(f"Total players: {await self.ledger.get_total_players()}")
        self.logger.info(f"Champion NFT total supply: {await self.minter.total_supply()}")
        self.logger.info(f"Champion minter: {await self.ledger.get_champion_minter()}")

    async def close(self):
        """Cleanup when the engine is shutting down"""
        self.logger.info("Shutting down score engine...")
        await self.db.close()

async def main():
    """Main entry point: set up, finalize yesterday's champion, report state"""
    Config.validate()

    engine = ScoreEngine()

    try:
        await engine.setup()
        minted = await engine.minter.mint_pending_champions()
        if minted:
            engine.logger.info(f"Minted pending champion tokens: {minted}")
        await engine.log_summary()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
        raise
    finally:
        await engine.close()

if __name__ == "__main__":
    asyncio.run(main())
