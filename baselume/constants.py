"""
Ledger-wide constants for the baselume scoring engine.

This module contains the fixed domain values used throughout the codebase
so that validation, ranking and minting agree on the same bounds.
"""

class ScoreConstants:
    """Constants related to submission scores."""

    # AI scores are whole numbers on a 1-10 scale
    MIN_SCORE = 1
    MAX_SCORE = 10

    # Score used when the model answer cannot be interpreted
    DEFAULT_AI_SCORE = 5

    # Criteria reported alongside every AI score
    CRITERIA = ('accuracy', 'creativity', 'technique', 'completeness')

class SubmissionConstants:
    """Constants for submission bookkeeping."""

    # Game ids are minted by the persistence layer and passed through opaquely
    MAX_GAME_ID_LENGTH = 100

class AddressConstants:
    """Constants for player and contract addresses."""

    ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'
    ADDRESS_HEX_LENGTH = 40

class LedgerEvents:
    """Listener event names emitted by the services."""

    SCORE_RECORDED = 'score_recorded'
    DAILY_WINNER_DECLARED = 'daily_winner_declared'
    DAILY_CHAMPION_MINTED = 'daily_champion_minted'

class SettingKeys:
    """Keys stored in the ledger settings table."""

    CHAMPION_MINTER = 'champion_minter'
    SUBMITTER_PREFIX = 'submitter:'

ZERO_ADDRESS = AddressConstants.ZERO_ADDRESS
