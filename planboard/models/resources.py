"""Assignment hierarchy: owners (assignable people) grouped under teams."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TypeAlias

TEAM_ID_PREFIX = "team_"


def team_resource_id(team_id: object) -> str:
    return f"{TEAM_ID_PREFIX}{team_id}"


@dataclass(frozen=True)
class OwnerResource:
    """A person who can receive task assignments."""

    id: str
    title: str
    team_id: str | None = None
    parent_id: str | None = None
    team_name: str | None = None
    team_color: str | None = None

    @property
    def is_team(self) -> bool:
        return False


@dataclass(frozen=True)
class TeamResource:
    """A container row on the timeline; never assignable, never a drop target."""

    id: str
    title: str
    team_id: str
    color: str | None = None

    @property
    def is_team(self) -> bool:
        return True


Resource: TypeAlias = OwnerResource | TeamResource


class ResourceDirectory:
    """Id-indexed view over the resource collection."""

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        self._resources: list[Resource] = list(resources)
        self._by_id: dict[str, Resource] = {resource.id: resource for resource in self._resources}

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def get(self, resource_id: object) -> Resource | None:
        if resource_id is None:
            return None
        return self._by_id.get(str(resource_id))

    def is_team(self, resource_id: object) -> bool:
        """True for team rows, including unknown ids using the team prefix."""
        resource = self.get(resource_id)
        if resource is not None:
            return resource.is_team
        return isinstance(resource_id, str) and resource_id.startswith(TEAM_ID_PREFIX)

    def owners(self) -> list[OwnerResource]:
        return [resource for resource in self._resources if isinstance(resource, OwnerResource)]

    def teams(self) -> list[TeamResource]:
        return [resource for resource in self._resources if isinstance(resource, TeamResource)]

    def members_of(self, team: TeamResource) -> list[OwnerResource]:
        return [owner for owner in self.owners() if owner.parent_id == team.id]

    def display_name(self, resource_id: object) -> str:
        if resource_id is None:
            return "Unassigned"
        resource = self.get(resource_id)
        return resource.title if resource is not None else f"ID: {resource_id}"
