"""
Input validation for ledger writes.

Every public mutation validates its arguments here before touching the
database so a rejected call never opens a transaction.
"""

import re
from typing import Optional

from baselume.constants import ScoreConstants, SubmissionConstants
from baselume.utils.ledger_exceptions import InvalidAddress, InvalidGameId, InvalidScore

_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")


def normalize_address(address: str) -> str:
    """Return the lowercase form of a valid address, or raise InvalidAddress."""
    if not isinstance(address, str) or not _ADDRESS_RE.fullmatch(address.strip()):
        raise InvalidAddress(address)
    return address.strip().lower()


def try_normalize_address(address: str) -> Optional[str]:
    """Lenient variant for read paths: None instead of an exception."""
    try:
        return normalize_address(address)
    except InvalidAddress:
        return None


def validate_score(score) -> int:
    # bool is an int subclass but never a valid score
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidScore(score)
    if score < ScoreConstants.MIN_SCORE or score > ScoreConstants.MAX_SCORE:
        raise InvalidScore(score)
    return score


def validate_game_id(game_id) -> str:
    if not isinstance(game_id, str):
        raise InvalidGameId(game_id, "must be a string")
    if len(game_id) == 0:
        raise InvalidGameId(game_id, "must not be empty")
    if len(game_id) > SubmissionConstants.MAX_GAME_ID_LENGTH:
        raise InvalidGameId(
            game_id, f"must be at most {SubmissionConstants.MAX_GAME_ID_LENGTH} characters"
        )
    return game_id


def format_address(address: str) -> str:
    """Shorten an address for log lines, e.g. 0x1234...abcd."""
    if not address or len(address) < 10:
        return address or ''
    return f"{address[:6]}...{address[-4:]}"
