"""Physical pair allocation for the ordered circuits of one cable.

The circuit list of a cable is treated as a single value: callers hand in the
full list in ``position`` order and write the whole result back. Physical
ranges are never patched incrementally.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal, TypeVar

from pairmap.logic.circuit_id import CircuitRange, parse_circuit_id, try_parse_circuit_id
from pairmap.logic.errors import OverlapError

T = TypeVar("T")
MoveDirection = Literal["up", "down"]


@dataclass(frozen=True)
class PairAllocation:
    position: int
    circuit_id: str
    pair_start: int
    pair_end: int

    @property
    def pair_count(self) -> int:
        return self.pair_end - self.pair_start + 1


@dataclass(frozen=True)
class CapacityReport:
    total_assigned: int
    capacity: int

    @property
    def remaining(self) -> int:
        return self.capacity - self.total_assigned

    @property
    def passed(self) -> bool:
        return self.total_assigned == self.capacity


def allocate(circuit_ids: Sequence[str]) -> list[PairAllocation]:
    """Recompute physical ranges from order and identifier pair counts.

    The first circuit starts at pair 1 and each following circuit starts right
    after the previous one ends. Raises ``FormatError`` for a malformed
    identifier.
    """
    allocations: list[PairAllocation] = []
    next_pair = 1
    for position, circuit_id in enumerate(circuit_ids):
        count = parse_circuit_id(circuit_id).pair_count
        allocations.append(
            PairAllocation(
                position=position,
                circuit_id=circuit_id,
                pair_start=next_pair,
                pair_end=next_pair + count - 1,
            )
        )
        next_pair += count
    return allocations


def append_position(existing_count: int) -> int:
    return existing_count


def remove_at(order: Sequence[T], index: int) -> list[T]:
    if index < 0 or index >= len(order):
        raise IndexError(f"No circuit at position {index}")
    return [item for i, item in enumerate(order) if i != index]


def move(order: Sequence[T], index: int, direction: MoveDirection) -> list[T]:
    """Swap the entry at ``index`` with its neighbour.

    ``"up"`` moves towards position 0. Moving past either end is a no-op.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid move direction: {direction}")
    if index < 0 or index >= len(order):
        raise IndexError(f"No circuit at position {index}")
    result = list(order)
    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(result):
        return result
    result[index], result[target] = result[target], result[index]
    return result


def validate_circuit_id(raw: str, siblings: Iterable[object], exclude: object | None = None) -> CircuitRange:
    """Parse ``raw`` and reject it if it overlaps a sibling circuit.

    ``siblings`` are records exposing ``id`` and ``circuit_id``; the one whose
    ``id`` equals ``exclude`` is skipped (used when editing). Siblings with a
    malformed identifier are ignored.
    """
    candidate = parse_circuit_id(raw)
    for sibling in siblings:
        if exclude is not None and getattr(sibling, "id", None) == exclude:
            continue
        existing = try_parse_circuit_id(getattr(sibling, "circuit_id", None))
        if existing is None:
            continue
        if candidate.overlaps(existing):
            raise OverlapError(
                f'Circuit ID "{raw}" overlaps with existing circuit "{sibling.circuit_id}". '
                "Ranges cannot overlap for the same prefix.",
                circuit_id=raw,
                existing=sibling.circuit_id,
            )
    return candidate


def total_assigned(allocations: Iterable[PairAllocation]) -> int:
    return sum(allocation.pair_count for allocation in allocations)


def capacity_report(allocations: Iterable[PairAllocation], capacity: int) -> CapacityReport:
    return CapacityReport(total_assigned=total_assigned(allocations), capacity=capacity)
