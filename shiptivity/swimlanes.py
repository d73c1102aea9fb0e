# shiptivity/swimlanes.py
"""
Swimlane model shared by the reordering engine, the store and the API.

A swimlane is not stored anywhere: it is the set of clients sharing one
status. Within a swimlane of n clients the priorities must be exactly
1..n (1 is the top of the lane).
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from shiptivity.errors import (
    ClientNotFoundError,
    InvalidIdError,
    InvalidPriorityError,
    InvalidStatusError,
)


class Status(str, Enum):
    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


STATUS_VALUES = tuple(s.value for s in Status)

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass(frozen=True)
class ClientRecord:
    """Immutable snapshot row of a client.

    name and description are carried along for serialization only; the
    reordering engine never reads them.
    """
    id: int
    status: Status
    priority: int
    name: str = ""
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class Assignment:
    """One (id, status, priority) update produced by the engine."""
    id: int
    status: Status
    priority: int


# -----------------------
# Input parsing
# -----------------------

def parse_client_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidIdError()
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INT_RE.match(raw):
        return int(raw)
    raise InvalidIdError()


def parse_status(raw: Any) -> Optional[Status]:
    if raw is None:
        return None
    if isinstance(raw, Status):
        return raw
    if isinstance(raw, str) and raw in STATUS_VALUES:
        return Status(raw)
    raise InvalidStatusError()


def parse_priority(raw: Any) -> Optional[int]:
    """
    Turn a raw request priority into an int.

    Integral floats (3.0) are accepted. Zero and negative numbers are
    well-formed here; the engine clamps them to 1.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise InvalidPriorityError()
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw) and raw.is_integer():
        return int(raw)
    raise InvalidPriorityError()


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


# -----------------------
# Snapshot helpers
# -----------------------

def sort_lane(lane: Iterable[ClientRecord]) -> List[ClientRecord]:
    # sorted() is stable, so equal priorities keep their snapshot order
    return sorted(lane, key=lambda c: c.priority)


def group_by_status(clients: Iterable[ClientRecord]) -> Dict[Status, List[ClientRecord]]:
    lanes: Dict[Status, List[ClientRecord]] = {s: [] for s in Status}
    for client in clients:
        lanes[client.status].append(client)
    return {status: sort_lane(lane) for status, lane in lanes.items()}


def swimlane_violations(clients: Iterable[ClientRecord]) -> Dict[Status, List[int]]:
    """
    Return {status: sorted priorities} for every lane whose priorities are
    not exactly 1..n. An empty dict means the snapshot is consistent.
    """
    violations: Dict[Status, List[int]] = {}
    for status, lane in group_by_status(clients).items():
        priorities = [c.priority for c in lane]
        if priorities != list(range(1, len(lane) + 1)):
            violations[status] = priorities
    return violations


def apply_assignments(clients: Iterable[ClientRecord],
                      assignments: Iterable[Assignment]) -> List[ClientRecord]:
    by_id = {c.id: c for c in clients}
    for a in assignments:
        current = by_id.get(a.id)
        if current is None:
            raise ClientNotFoundError()
        by_id[a.id] = replace(current, status=a.status, priority=a.priority)
    return list(by_id.values())
