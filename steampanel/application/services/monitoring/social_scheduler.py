from steampanel.application.services.collectors import SocialCollector
from steampanel.domain.entities import Domain, SocialData

from .domain_scheduler import SessionReadingScheduler


class SocialScheduler(SessionReadingScheduler[SocialData]):
    domain = Domain.SOCIAL

    def __init__(self, collector: SocialCollector, **kwargs):
        super().__init__(**kwargs)
        self._collector = collector

    async def _collect(self) -> SocialData:
        return await self._collector.collect()

    def _empty_payload(self) -> SocialData:
        return SocialData()
