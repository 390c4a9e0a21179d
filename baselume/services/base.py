"""
Base service class for the baselume score ledger.

Provides async database session management and listener dispatch
for all service layer operations.
"""

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services with async database session management."""

    def __init__(self, session_factory):
        """
        Initialize base service with session factory.

        Args:
            session_factory: Async session factory from Database class
        """
        self.session_factory = session_factory
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for async database operations."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    def add_listener(self, event_name: str, callback: Callable):
        """Register a callback invoked with keyword arguments when event_name fires."""
        self._listeners[event_name].append(callback)

    def remove_listener(self, event_name: str, callback: Callable):
        if callback in self._listeners.get(event_name, []):
            self._listeners[event_name].remove(callback)

    def _emit(self, event_name: str, **payload):
        """Notify listeners after a committed change. Listener errors are logged, never raised."""
        for callback in list(self._listeners.get(event_name, [])):
            try:
                callback(**payload)
            except Exception as e:
                logger.warning(f"Listener for '{event_name}' failed: {e}")
