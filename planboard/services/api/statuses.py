"""Remote status listing."""

from __future__ import annotations

from planboard.schemas.statuses import StatusRecord
from planboard.services.api.client import ApiClient
from planboard.services.assembly import validate_records

STATUS_PATH = "/api/status"


class StatusApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[StatusRecord]:
        payload = await self._client.get(STATUS_PATH)
        return validate_records(payload, StatusRecord, source="statuses")
