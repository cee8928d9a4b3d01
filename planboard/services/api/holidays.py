"""Public holiday calendar, fetched per year from the government API."""

from __future__ import annotations

from planboard.core.config import settings
from planboard.core.logging import get_logger
from planboard.schemas.holidays import HolidayRecord
from planboard.services.api.client import ApiClient
from planboard.services.dates import holidays_from_pairs

logger = get_logger(__name__)


class HolidayApi:
    """Holiday sets keyed ``YYYY-MM-DD -> label``, cached per year."""

    def __init__(self, client: ApiClient, *, zone: str | None = None) -> None:
        self._client = client
        self.zone = zone or settings.holiday_zone
        self._cache: dict[int, dict[str, str]] = {}

    def url_for(self, year: int) -> str:
        return settings.holiday_api_url.format(zone=self.zone, year=year)

    async def for_year(self, year: int) -> dict[str, str]:
        if year < 1:
            raise ValueError(f"invalid year: {year}")
        cached = self._cache.get(year)
        if cached is not None:
            return dict(cached)
        payload = await self._client.get(self.url_for(year))
        holidays = holidays_from_pairs(payload if isinstance(payload, dict) else {})
        self._cache[year] = holidays
        logger.info("holidays.fetched", extra={"year": year, "count": len(holidays)})
        return dict(holidays)

    async def records(self, year: int) -> list[HolidayRecord]:
        holidays = await self.for_year(year)
        return [HolidayRecord(day=day, label=label) for day, label in sorted(holidays.items())]
