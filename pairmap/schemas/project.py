from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from pairmap.models.cabling import CableRole


class CableSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str = Field(min_length=1, max_length=160)
    pair_count: int = Field(ge=1)
    binder_size: int = Field(default=25, ge=1)
    role: CableRole


class CircuitSnapshot(BaseModel):
    """Circuit as exported; pair ranges are re-derived on import."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cable_id: UUID
    circuit_id: str = Field(min_length=1, max_length=120)
    position: int = Field(ge=0)
    pair_start: int | None = None
    pair_end: int | None = None
    is_spliced: bool = False
    feed_cable_id: UUID | None = None
    feed_pair_start: int | None = None
    feed_pair_end: int | None = None


class SpliceSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    source_cable_id: UUID
    source_pair_start: int
    source_pair_end: int
    destination_cable_id: UUID
    destination_pair_start: int
    destination_pair_end: int
    pon_start: int | None = None
    pon_end: int | None = None
    is_completed: bool = False
    notes: str | None = None


class ProjectSnapshot(BaseModel):
    cables: list[CableSnapshot]
    circuits: list[CircuitSnapshot]
    splices: list[SpliceSnapshot] = Field(default_factory=list)


class ProjectImportResult(BaseModel):
    cables: int
    circuits: int
    splices: int


class DanglingReferenceRead(BaseModel):
    circuit: UUID
    circuit_id: str
    field: str
    missing_id: UUID


class ProjectHealth(BaseModel):
    ok: bool
    dangling_references: list[DanglingReferenceRead]
