from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

ReferenceField = Literal["cable_id", "feed_cable_id"]


@dataclass(frozen=True)
class DanglingReference:
    circuit: object
    circuit_id: str
    field: ReferenceField
    missing_id: object


def find_dangling_references(circuits: Iterable[object], cable_ids: Iterable[object]) -> list[DanglingReference]:
    """Circuits pointing at cables that no longer exist. Never raises."""
    known = set(cable_ids)
    dangling: list[DanglingReference] = []
    for circuit in circuits:
        if circuit.cable_id not in known:
            dangling.append(DanglingReference(circuit.id, circuit.circuit_id, "cable_id", circuit.cable_id))
        if circuit.feed_cable_id is not None and circuit.feed_cable_id not in known:
            dangling.append(DanglingReference(circuit.id, circuit.circuit_id, "feed_cable_id", circuit.feed_cable_id))
    return dangling


def is_effectively_spliced(circuit: object, cable_ids: Iterable[object]) -> bool:
    """A circuit counts as spliced only if its feed cable still resolves."""
    if not circuit.is_spliced or circuit.feed_cable_id is None:
        return False
    return circuit.feed_cable_id in set(cable_ids)
