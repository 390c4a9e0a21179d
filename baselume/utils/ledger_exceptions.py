"""
Custom exceptions for the score ledger with user-friendly error messages.
"""

class LedgerException(Exception):
    """Base exception for ledger-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class InvalidScore(LedgerException):
    """Raised when a score is not an integer between 1 and 10."""
    def __init__(self, score):
        self.score = score
        super().__init__(
            f"Invalid score {score!r}: must be an integer between 1 and 10",
            "Score must be a whole number from 1 to 10."
        )

class InvalidGameId(LedgerException):
    """Raised when a game id is empty, not a string, or too long."""
    def __init__(self, game_id, reason: str):
        self.game_id = game_id
        super().__init__(
            f"Invalid game id {game_id!r}: {reason}",
            f"Invalid game id: {reason}."
        )

class InvalidAddress(LedgerException):
    """Raised when a player or contract address is malformed."""
    def __init__(self, address):
        self.address = address
        super().__init__(
            f"Invalid address {address!r}",
            "Address must be 0x followed by 40 hexadecimal characters."
        )

class DuplicateSubmission(LedgerException):
    """Raised when a game id was already recorded for the player."""
    def __init__(self, player: str, game_id: str):
        self.player = player
        self.game_id = game_id
        super().__init__(
            f"Game '{game_id}' already recorded for {player}",
            "This game has already been scored."
        )

class Unauthorized(LedgerException):
    """Raised when the caller lacks the role required by an operation."""
    def __init__(self, caller, action: str):
        self.caller = caller
        self.action = action
        super().__init__(
            f"{caller} is not allowed to {action}",
            "You are not allowed to perform this action."
        )

class DayNotElapsed(LedgerException):
    """Raised when minting is attempted for a day that is still running."""
    def __init__(self, day: int, current_day: int):
        self.day = day
        self.current_day = current_day
        super().__init__(
            f"Day {day} has not elapsed (current day is {current_day})",
            "The daily competition is still running."
        )

class AlreadyMinted(LedgerException):
    """Raised when the champion of a day has already been minted."""
    def __init__(self, day: int):
        self.day = day
        super().__init__(
            f"Champion NFT for day {day} already minted",
            "The champion for this day has already been awarded."
        )

class NoWinnerForDay(LedgerException):
    """Raised when a day has no score entries to pick a champion from."""
    def __init__(self, day: int):
        self.day = day
        super().__init__(
            f"No scores recorded for day {day}",
            "Nobody played on this day."
        )

class TokenNotFound(LedgerException):
    """Raised when a champion token id does not exist."""
    def __init__(self, token_id):
        self.token_id = token_id
        super().__init__(
            f"Token {token_id!r} does not exist",
            "That champion NFT does not exist."
        )
