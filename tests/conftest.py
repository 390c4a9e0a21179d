import os
import tempfile

import pytest
import pytest_asyncio

from baselume.config import Config

# Keep test log files out of the working tree
Config.LOG_DIR = os.path.join(tempfile.gettempdir(), 'baselume-test-logs')

from baselume.database.database import Database
from baselume.main import ScoreEngine
from baselume.utils.day_clock import DayClock, ManualClock

DAY = 86400
START_DAY = 100

OWNER = '0x' + '1' * 40
MINTER = '0x' + '2' * 40
STRANGER = '0x' + '9' * 40
ALICE = '0x' + 'a' * 40
BOB = '0x' + 'b' * 40
CAROL = '0x' + 'c' * 40


@pytest.fixture
def manual_clock():
    """Clock parked one minute into day 100."""
    return ManualClock(start=START_DAY * DAY + 60)


@pytest.fixture
def day_clock(manual_clock):
    return DayClock(time_source=manual_clock, day_length=DAY)


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def engine(database, day_clock):
    score_engine = ScoreEngine(database=database, clock=day_clock)
    await score_engine.setup(owner_address=OWNER, minter_address=MINTER)
    return score_engine


@pytest.fixture
def ledger(engine):
    return engine.ledger


@pytest.fixture
def ranking(engine):
    return engine.ranking


@pytest.fixture
def minter(engine):
    return engine.minter
