"""Common constructor for the forum services."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import async_sessionmaker

from level_forum.core.settings import Settings
from level_forum.core.settings import settings as default_settings
from level_forum.services.safe_execution import SafeExecutor


class ForumService:
    """Holds the store handle, the error sink and configuration.

    Every public coroutine opens its own unit of work from ``session_factory``;
    no entity state is kept on the instance between calls.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        safe: SafeExecutor,
        settings: Settings | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.safe = safe
        self.settings = settings or default_settings

    def page_bounds(self, page: int, page_size: int | None) -> tuple[int, int]:
        """Clamp paging input to the configured limits."""
        size = self.settings.default_page_size if page_size is None else page_size
        return max(page, 1), min(max(size, 1), self.settings.max_page_size)
