from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from pairmap.models.cabling import CableRole


class CableBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    pair_count: int = Field(ge=1)
    role: CableRole


class CableCreate(CableBase):
    model_config = ConfigDict(extra="forbid")

    # Created in order, each validated like a single circuit add.
    circuit_ids: list[str] = Field(default_factory=list)


class CableUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=160)
    pair_count: int | None = Field(default=None, ge=1)
    role: CableRole | None = None


class CableRead(CableBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    binder_size: int
    created_at: datetime
    updated_at: datetime


class CircuitCreate(BaseModel):
    # Position, pair range and feed link are derived, never accepted.
    model_config = ConfigDict(extra="forbid")

    cable_id: UUID
    circuit_id: str = Field(min_length=1, max_length=120)


class CircuitUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    circuit_id: str = Field(min_length=1, max_length=120)


class CircuitMove(BaseModel):
    direction: Literal["up", "down"]


class SpliceToggle(BaseModel):
    spliced: bool


class CircuitRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cable_id: UUID
    circuit_id: str
    position: int
    pair_start: int
    pair_end: int
    is_spliced: bool
    feed_cable_id: UUID | None = None
    feed_pair_start: int | None = None
    feed_pair_end: int | None = None


class BinderSegmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    binder: int
    start_in_binder: int
    end_in_binder: int
    pair_start: int
    pair_end: int
    binder_tip: str
    binder_ring: str


class CapacityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_assigned: int
    capacity: int
    remaining: int
    passed: bool


class CircuitSegmentsRead(BaseModel):
    circuit: CircuitRead
    segments: list[BinderSegmentRead]


class CableSummary(BaseModel):
    cable: CableRead
    capacity: CapacityRead
    circuits: list[CircuitSegmentsRead]


class SpliceBase(BaseModel):
    source_cable_id: UUID
    source_pair_start: int = Field(ge=1)
    source_pair_end: int = Field(ge=1)
    destination_cable_id: UUID
    destination_pair_start: int = Field(ge=1)
    destination_pair_end: int = Field(ge=1)
    pon_start: int | None = Field(default=None, ge=0)
    pon_end: int | None = Field(default=None, ge=0)
    is_completed: bool = False
    notes: str | None = None


class SpliceCreate(SpliceBase):
    model_config = ConfigDict(extra="forbid")


class SpliceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source_pair_start: int | None = Field(default=None, ge=1)
    source_pair_end: int | None = Field(default=None, ge=1)
    destination_pair_start: int | None = Field(default=None, ge=1)
    destination_pair_end: int | None = Field(default=None, ge=1)
    pon_start: int | None = Field(default=None, ge=0)
    pon_end: int | None = Field(default=None, ge=0)
    is_completed: bool | None = None
    notes: str | None = None


class SpliceRead(SpliceBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime


class SplicedCircuitRead(BaseModel):
    circuit: CircuitRead
    distribution_cable_name: str
    feed_cable_name: str | None = None
    status: Literal["spliced", "missing_feed_cable"]
    distribution_segments: list[BinderSegmentRead]
    feed_segments: list[BinderSegmentRead] = Field(default_factory=list)
