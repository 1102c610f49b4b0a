from steampanel.application.services.collectors import LibraryCollector
from steampanel.domain.entities import Domain, LibraryData

from .domain_scheduler import SessionReadingScheduler


class LibraryScheduler(SessionReadingScheduler[LibraryData]):
    """Publishes library totals; its ``recent_games`` feed the News watch-list."""

    domain = Domain.LIBRARY

    def __init__(self, collector: LibraryCollector, **kwargs):
        super().__init__(**kwargs)
        self._collector = collector

    async def _collect(self) -> LibraryData:
        return await self._collector.collect()

    def _empty_payload(self) -> LibraryData:
        return LibraryData()
