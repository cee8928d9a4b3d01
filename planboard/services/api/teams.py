"""Remote team listing."""

from __future__ import annotations

from planboard.schemas.resources import TeamRecord
from planboard.services.api.client import ApiClient
from planboard.services.assembly import validate_records

TEAMS_PATH = "/api/teams"


class TeamApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[TeamRecord]:
        payload = await self._client.get(TEAMS_PATH)
        return validate_records(payload, TeamRecord, source="teams")
