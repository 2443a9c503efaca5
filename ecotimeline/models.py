"""Value types shared by the projection engine and the aggregation layer."""
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ResourceType(str, Enum):
    OIL = 'Oil'
    COAL = 'Coal'
    GAS = 'Gas'

    @classmethod
    def _missing_(cls, value):
        # accept case-insensitive names such as 'coal' or ' Oil '
        if isinstance(value, str):
            name = value.strip().lower()
            for member in cls:
                if member.value.lower() == name:
                    return member
        return None


class SeedParameters(BaseModel, frozen=True):
    baseline_reserves: float = Field(ge=0)
    baseline_consumption: float = Field(ge=0)
    annual_growth_rate: float


class YearPoint(BaseModel, frozen=True):
    year: int
    consumption: float  # left unclamped in the back-cast
    reserves: float = Field(ge=0)
    is_depleted: bool


class EntityTimeline(BaseModel, frozen=True):
    id: str
    name: str
    history: Mapping[int, YearPoint]
    first_depletion_year: Optional[int] = None

    @field_validator('history', mode='after')
    @classmethod
    def _read_only_history(cls, value):
        return MappingProxyType(dict(value))


class GlobalYearAggregate(BaseModel, frozen=True):
    year: int
    total_reserves: float
    total_consumption: float


class GlobalStats(BaseModel, frozen=True):
    total_reserves: float = 0.0
    total_consumption: float = 0.0
    depleted_count: int = 0


class WorldSnapshot(Mapping):
    """Read-only mapping of entity id to EntityTimeline for one resource type."""

    def __init__(self, resource, timelines):
        self.resource = ResourceType(resource)
        self._timelines = MappingProxyType(dict(timelines))

    def __getitem__(self, entity_id):
        return self._timelines[entity_id]

    def __iter__(self):
        return iter(self._timelines)

    def __len__(self):
        return len(self._timelines)

    def __repr__(self):
        return f"WorldSnapshot(resource={self.resource.value!r}, entities={len(self)})"
