"""
Services package for the baselume score ledger.
"""

from .base import BaseService
from .score_ledger import ScoreLedgerService
from .ranking import RankingService
from .champion_minter import ChampionMinterService

__all__ = ['BaseService', 'ScoreLedgerService', 'RankingService', 'ChampionMinterService']
