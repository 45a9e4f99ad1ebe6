import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pairmap.db import Base


class CableRole(enum.Enum):
    Feed = "Feed"
    Distribution = "Distribution"


class Cable(Base):
    __tablename__ = "cables"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    pair_count: Mapped[int] = mapped_column(Integer, nullable=False)
    binder_size: Mapped[int] = mapped_column(Integer, nullable=False, default=25)
    role: Mapped[CableRole] = mapped_column(Enum(CableRole), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    circuits = relationship(
        "Circuit",
        back_populates="cable",
        foreign_keys="Circuit.cable_id",
        order_by="Circuit.position",
        cascade="all, delete-orphan",
    )


class Circuit(Base):
    __tablename__ = "circuits"
    __table_args__ = (
        Index("ix_circuits_cable_position", "cable_id", "position"),
        Index("ix_circuits_feed_cable_id", "feed_cable_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    cable_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("cables.id", ondelete="CASCADE"), nullable=False)
    circuit_id: Mapped[str] = mapped_column(String(120), nullable=False)
    # Order within the cable (0-indexed, dense).
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    # Derived by the allocator from position and circuit_id; never written directly.
    pair_start: Mapped[int] = mapped_column(Integer, nullable=False)
    pair_end: Mapped[int] = mapped_column(Integer, nullable=False)
    is_spliced: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Not a foreign key: links may dangle after a feed cable is removed elsewhere.
    feed_cable_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    feed_pair_start: Mapped[int | None] = mapped_column(Integer)
    feed_pair_end: Mapped[int | None] = mapped_column(Integer)

    cable = relationship("Cable", back_populates="circuits", foreign_keys=[cable_id])

    @property
    def pair_total(self) -> int:
        return self.pair_end - self.pair_start + 1


class Splice(Base):
    __tablename__ = "splices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    source_cable_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cables.id", ondelete="CASCADE"), nullable=False
    )
    source_pair_start: Mapped[int] = mapped_column(Integer, nullable=False)
    source_pair_end: Mapped[int] = mapped_column(Integer, nullable=False)
    destination_cable_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cables.id", ondelete="CASCADE"), nullable=False
    )
    destination_pair_start: Mapped[int] = mapped_column(Integer, nullable=False)
    destination_pair_end: Mapped[int] = mapped_column(Integer, nullable=False)
    pon_start: Mapped[int | None] = mapped_column(Integer)
    pon_end: Mapped[int | None] = mapped_column(Integer)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    source_cable = relationship("Cable", foreign_keys=[source_cable_id])
    destination_cable = relationship("Cable", foreign_keys=[destination_cable_id])
