import os
import re
from dotenv import load_dotenv

load_dotenv()

_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")


class Config:
    """Ledger configuration settings"""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///baselume.db')

    # Runtime settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Day partitioning (seconds per day index)
    DAY_LENGTH_SECONDS = int(os.getenv('BASELUME_DAY_LENGTH_SECONDS', 86400))

    # Roles: the owner is the default score submitter, the minter is wired once at startup
    OWNER_ADDRESS = os.getenv('BASELUME_OWNER_ADDRESS', '0x' + '0' * 39 + '1')
    MINTER_ADDRESS = os.getenv('BASELUME_MINTER_ADDRESS', '0x' + '0' * 39 + '2')

    # Champion NFT metadata
    TOKEN_BASE_URI = os.getenv('BASELUME_TOKEN_BASE_URI', 'https://api.baselume.xyz/nft/metadata/')

    # Leaderboard settings
    MAX_LEADERBOARD_LIMIT = int(os.getenv('BASELUME_MAX_LEADERBOARD_LIMIT', 100))
    DEFAULT_LEADERBOARD_LIMIT = 10

    @classmethod
    def get_async_database_url(cls) -> str:
        """Get the database URL with an async driver"""
        database_url = cls.DATABASE_URL
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        elif database_url == 'sqlite://':
            database_url = 'sqlite+aiosqlite://'
        return database_url

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if cls.DAY_LENGTH_SECONDS <= 0:
            raise ValueError("BASELUME_DAY_LENGTH_SECONDS must be positive")
        if cls.MAX_LEADERBOARD_LIMIT < 1:
            raise ValueError("BASELUME_MAX_LEADERBOARD_LIMIT must be at least 1")
        if not _ADDRESS_RE.fullmatch(cls.OWNER_ADDRESS or ''):
            raise ValueError("BASELUME_OWNER_ADDRESS must be a 0x-prefixed 40 hex character address")
        if not _ADDRESS_RE.fullmatch(cls.MINTER_ADDRESS or ''):
            raise ValueError("BASELUME_MINTER_ADDRESS must be a 0x-prefixed 40 hex character address")
        if cls.OWNER_ADDRESS.lower() == cls.MINTER_ADDRESS.lower():
            raise ValueError("Owner and minter addresses must differ")
