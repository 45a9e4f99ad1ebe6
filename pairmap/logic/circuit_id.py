"""Circuit identifier grammar: ``prefix,start-end``.

Examples: ``"lg,33-36"`` is four pairs, ``"ks,219-228"`` is ten. A legacy
whitespace form (``"BR 021 365 372"``) is accepted and normalized to
``"BR021,365-372"``. Everything else in the package consumes the typed
:class:`CircuitRange` instead of splitting raw strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pairmap.logic.errors import FormatError

_RANGE_RE = re.compile(r"^(\d+)-(\d+)$")


@dataclass(frozen=True)
class CircuitRange:
    prefix: str
    start: int
    end: int

    @property
    def pair_count(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, other: CircuitRange) -> bool:
        if self.prefix != other.prefix:
            return False
        return self.start <= other.end and other.start <= self.end

    def contains(self, other: CircuitRange) -> bool:
        return self.prefix == other.prefix and self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.prefix},{self.start}-{self.end}"


def normalize_circuit_id(raw: str) -> str:
    trimmed = raw.strip()
    if "," in trimmed:
        return trimmed
    parts = trimmed.split()
    # prefix token(s), start, end
    if len(parts) < 3:
        return trimmed
    prefix = "".join(parts[:-2])
    return f"{prefix},{parts[-2]}-{parts[-1]}"


def parse_circuit_id(raw: str) -> CircuitRange:
    if raw is None:
        raise FormatError("Circuit ID is required")
    normalized = normalize_circuit_id(raw)
    if not normalized:
        raise FormatError("Circuit ID is required")
    parts = normalized.split(",")
    if len(parts) != 2:
        raise FormatError(
            f'Invalid circuit ID format: "{raw}". Expected format: "prefix,start-end"',
            circuit_id=raw,
        )
    prefix = parts[0].strip()
    if not prefix:
        raise FormatError(f'Circuit ID "{raw}" has an empty prefix', circuit_id=raw)
    match = _RANGE_RE.match(parts[1].strip())
    if not match:
        raise FormatError(
            f'Invalid range format in "{raw}". Expected format: "start-end"',
            circuit_id=raw,
        )
    start, end = int(match.group(1)), int(match.group(2))
    if start > end:
        raise FormatError(
            f'Range start {start} is greater than range end {end} in "{raw}"',
            circuit_id=raw,
        )
    return CircuitRange(prefix=prefix, start=start, end=end)


def pair_count(raw: str) -> int:
    return parse_circuit_id(raw).pair_count


def try_parse_circuit_id(raw: str | None) -> CircuitRange | None:
    """Parse ``raw`` or return ``None`` when it is malformed."""
    if raw is None:
        return None
    try:
        return parse_circuit_id(raw)
    except FormatError:
        return None


def circuit_ids_overlap(first: str, second: str) -> bool:
    """True when both identifiers share a prefix and their ranges intersect.

    Malformed input on either side never overlaps.
    """
    a = try_parse_circuit_id(first)
    b = try_parse_circuit_id(second)
    if a is None or b is None:
        return False
    return a.overlaps(b)
