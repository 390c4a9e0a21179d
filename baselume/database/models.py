from sqlalchemy import (
    Column, Integer, String, Float, Boolean, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class PlayerAccount(Base):
    """
    Lifetime aggregate for one player address.

    Created implicitly by the first accepted score and never deleted.
    lifetime_score always equals the sum of the player's ScoreEntry rows.
    """
    __tablename__ = 'player_accounts'

    address = Column(String(42), primary_key=True)

    lifetime_score = Column(Integer, nullable=False, default=0)
    total_games = Column(Integer, nullable=False, default=0)

    # Sequence id of the player's first entry, used to break ranking ties
    first_entry_id = Column(Integer, nullable=False)
    first_seen_at = Column(Float, nullable=False)
    last_seen_at = Column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint('lifetime_score >= 0', name='ck_player_accounts_lifetime_score'),
    )

    def __repr__(self):
        return f"<PlayerAccount(address='{self.address}', lifetime_score={self.lifetime_score})>"

class ScoreEntry(Base):
    """
    Append-only record of one accepted submission.

    The autoincrement id doubles as the global submission sequence, which
    is strictly increasing because writes are serialized.
    """
    __tablename__ = 'score_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_address = Column(String(42), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    day = Column(Integer, nullable=False, index=True)
    game_id = Column(String(100), nullable=False)
    timestamp = Column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint('player_address', 'game_id', name='uq_score_entries_player_game'),
        CheckConstraint('score >= 1 AND score <= 10', name='ck_score_entries_score_range'),
    )

    def __repr__(self):
        return f"<ScoreEntry(id={self.id}, player='{self.player_address}', score={self.score}, day={self.day})>"

class DailyPlayerScore(Base):
    """Per-day running total for one player."""
    __tablename__ = 'daily_player_scores'

    id = Column(Integer, primary_key=True)
    day = Column(Integer, nullable=False)
    player_address = Column(String(42), nullable=False)

    score = Column(Integer, nullable=False, default=0)
    games = Column(Integer, nullable=False, default=0)

    # Earliest submission of this player on this day, daily tie-break
    first_entry_id = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('day', 'player_address', name='uq_daily_player_scores_day_player'),
    )

    def __repr__(self):
        return f"<DailyPlayerScore(day={self.day}, player='{self.player_address}', score={self.score})>"

class DayRecord(Base):
    """
    Per-day totals and the NFT award flag.

    nft_awarded is the only state that is not derivable from ScoreEntry rows;
    it moves from False to True exactly once.
    """
    __tablename__ = 'day_records'

    day = Column(Integer, primary_key=True, autoincrement=False)
    total_games = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    nft_awarded = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<DayRecord(day={self.day}, games={self.total_games}, nft_awarded={self.nft_awarded})>"

class ChampionRecord(Base):
    """Minted daily champion token. One per day, immutable."""
    __tablename__ = 'champion_records'

    token_id = Column(Integer, primary_key=True, autoincrement=False)
    day = Column(Integer, nullable=False, unique=True)
    champion_address = Column(String(42), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    minted_at = Column(Float, nullable=False)

    def __repr__(self):
        return f"<ChampionRecord(token_id={self.token_id}, day={self.day}, champion='{self.champion_address}')>"

class LedgerSetting(Base):
    """Key/value store for one-time wiring and role grants."""
    __tablename__ = 'ledger_settings'

    key = Column(String(100), primary_key=True)
    value = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<LedgerSetting(key='{self.key}', value='{self.value}')>"

# Ordered indexes backing the ranking reads, maintained by every ledger write
Index(
    'ix_player_accounts_ranking',
    PlayerAccount.lifetime_score.desc(),
    PlayerAccount.first_entry_id,
)
Index(
    'ix_daily_player_scores_ranking',
    DailyPlayerScore.day,
    DailyPlayerScore.score.desc(),
    DailyPlayerScore.first_entry_id,
)
