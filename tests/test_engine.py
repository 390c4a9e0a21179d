import pytest

from baselume.config import Config
from baselume.main import ScoreEngine
from baselume.utils.ledger_exceptions import InvalidAddress, Unauthorized

from conftest import ALICE, DAY, MINTER, OWNER, START_DAY, STRANGER


async def test_setup_wires_minter_once(engine, ledger):
    assert await ledger.get_champion_minter() == MINTER

    # Same address again is a no-op
    await ledger.set_champion_minter(MINTER, caller=OWNER)
    assert await ledger.get_champion_minter() == MINTER

    with pytest.raises(Unauthorized):
        await ledger.set_champion_minter(STRANGER, caller=OWNER)
    with pytest.raises(Unauthorized):
        await ledger.set_champion_minter(MINTER, caller=STRANGER)
    with pytest.raises(InvalidAddress):
        await ledger.set_champion_minter("0x123", caller=OWNER)

    assert await ledger.get_champion_minter() == MINTER


async def test_engine_setup_is_repeatable(database, day_clock, engine):
    again = ScoreEngine(database=database, clock=day_clock)
    await again.setup(owner_address=OWNER, minter_address=MINTER)

    assert await again.ledger.get_champion_minter() == MINTER


async def test_services_share_one_lock_and_clock(engine):
    assert engine.minter.ledger is engine.ledger
    assert engine.ranking.clock is engine.ledger.clock


async def test_log_summary_reports_state(engine, ledger, manual_clock, caplog):
    await ledger.record_score(ALICE, 8, "g1", caller=OWNER)
    manual_clock.advance(DAY)
    await engine.minter.mint_pending_champions()

    await engine.log_summary()

    assert f"Current day: {START_DAY + 1}" in caplog.text
    assert "Total players: 1" in caplog.text
    assert "Champion NFT total supply: 1" in caplog.text


def test_config_async_url_rewrite(monkeypatch):
    monkeypatch.setattr(Config, 'DATABASE_URL', 'sqlite:///baselume.db')
    assert Config.get_async_database_url() == 'sqlite+aiosqlite:///baselume.db'

    monkeypatch.setattr(Config, 'DATABASE_URL', 'postgresql+asyncpg://u:p@db/baselume')
    assert Config.get_async_database_url() == 'postgresql+asyncpg://u:p@db/baselume'


def test_config_validate(monkeypatch):
    monkeypatch.setattr(Config, 'OWNER_ADDRESS', OWNER)
    monkeypatch.setattr(Config, 'MINTER_ADDRESS', MINTER)
    Config.validate()

    monkeypatch.setattr(Config, 'MINTER_ADDRESS', OWNER)
    with pytest.raises(ValueError):
        Config.validate()

    monkeypatch.setattr(Config, 'MINTER_ADDRESS', 'nope')
    with pytest.raises(ValueError):
        Config.validate()

    monkeypatch.setattr(Config, 'MINTER_ADDRESS', MINTER)
    monkeypatch.setattr(Config, 'DAY_LENGTH_SECONDS', 0)
    with pytest.raises(ValueError):
        Config.validate()
