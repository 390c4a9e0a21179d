"""
Ledger data models for leaderboard, daily statistics and champion reads.

Provides immutable data transfer objects returned by the service layer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreReceipt:
    """One accepted submission."""
    entry_id: int
    player: str
    score: int
    day: int
    game_id: str
    timestamp: float


@dataclass(frozen=True)
class PlayerScore:
    """Single leaderboard row."""
    rank: int
    address: str
    total_score: int


@dataclass(frozen=True)
class DailyWinner:
    address: str
    score: int


@dataclass(frozen=True)
class DailyStats:
    """Aggregates for one day index."""
    day: int
    total_games: int
    total_score: int
    top_player: str
    top_score: int
    nft_awarded: bool


@dataclass(frozen=True)
class DailyChampion:
    """Minted champion of a day; zero values when the day is not minted."""
    day: int
    champion: str
    score: int
    token_id: int

    @property
    def nft_awarded(self) -> bool:
        return self.token_id > 0


@dataclass(frozen=True)
class TokenDetails:
    token_id: int
    day: int
    winner: str
    score: int
    token_uri: str

