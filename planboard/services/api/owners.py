"""Remote owner listing."""

from __future__ import annotations

from planboard.schemas.resources import OwnerRecord
from planboard.services.api.client import ApiClient
from planboard.services.assembly import validate_records

OWNERS_PATH = "/api/owners"


class OwnerApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[OwnerRecord]:
        payload = await self._client.get(OWNERS_PATH)
        return validate_records(payload, OwnerRecord, source="owners")
