# shiptivity/reordering.py
"""
Priority reassignment for swimlane moves.

reorder() is a pure function: it takes a snapshot of every client plus a
move request and returns the assignments that keep every touched lane
dense (1..n, no duplicates, no gaps). Persisting them is up to the caller.
"""
from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

from shiptivity.errors import ClientNotFoundError
from shiptivity.swimlanes import (
    Assignment,
    ClientRecord,
    Status,
    clamp,
    parse_priority,
    parse_status,
    sort_lane,
)

logger = logging.getLogger("shiptivity_backend")


def reorder(
    clients: Sequence[ClientRecord],
    target_id: int,
    status: Any = None,
    priority: Any = None,
) -> List[Assignment]:
    """
    Compute the assignments needed to move `target_id` to `status` /
    `priority`. Both are raw request values; None means "not provided".

    Only assignments that actually change a client are returned, so
    re-requesting a client's current position yields [].

    Raises ClientNotFoundError, InvalidStatusError or InvalidPriorityError
    before producing anything.
    """
    target = next((c for c in clients if c.id == target_id), None)
    if target is None:
        raise ClientNotFoundError()

    new_status = parse_status(status)
    requested = parse_priority(priority)

    if new_status is None and requested is None:
        return []

    effective_status = new_status if new_status is not None else target.status
    status_changed = effective_status != target.status

    others = [c for c in clients if c.id != target.id]
    target_lane = [c for c in others if c.status == effective_status]

    if requested is not None:
        effective_priority = clamp(requested, 1, len(target_lane) + 1)
    elif status_changed:
        effective_priority = len(target_lane) + 1
    else:
        effective_priority = target.priority

    planned: List[Tuple[ClientRecord, Status, int]] = []

    if status_changed:
        source_lane = [c for c in others if c.status == target.status]
        for rank, c in enumerate(sort_lane(source_lane), start=1):
            planned.append((c, c.status, rank))

    for rank, c in enumerate(sort_lane(target_lane), start=1):
        if rank >= effective_priority:
            rank += 1
        planned.append((c, effective_status, rank))

    planned.append((target, effective_status, effective_priority))

    assignments = [
        Assignment(id=c.id, status=s, priority=p)
        for c, s, p in planned
        if (c.status, c.priority) != (s, p)
    ]

    logger.info(
        f"reorder(): client={target.id} {target.status.value}:{target.priority}"
        f" -> {effective_status.value}:{effective_priority} ({len(assignments)} assignment(s))"
    )
    return assignments
