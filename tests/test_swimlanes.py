from __future__ import annotations

import pytest

from shiptivity.errors import ClientNotFoundError, InvalidIdError, InvalidPriorityError, InvalidStatusError
from shiptivity.swimlanes import (
    Assignment,
    ClientRecord,
    Status,
    apply_assignments,
    clamp,
    parse_client_id,
    parse_priority,
    parse_status,
    swimlane_violations,
)

from conftest import BACKLOG, COMPLETE, make_snapshot


@pytest.mark.parametrize("raw, expected", [(7, 7), ("7", 7), (" 12 ", 12), ("-3", -3)])
def test_parse_client_id_accepts_integers(raw, expected):
    assert parse_client_id(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "12abc", "1.5", "", None, True, 1.0])
def test_parse_client_id_rejects_non_integers(raw):
    with pytest.raises(InvalidIdError) as exc:
        parse_client_id(raw)
    assert exc.value.long_message == "Id can only be integer."


def test_parse_status():
    assert parse_status(None) is None
    assert parse_status("in-progress") is Status.IN_PROGRESS
    assert parse_status(Status.COMPLETE) is Status.COMPLETE
    with pytest.raises(InvalidStatusError):
        parse_status("in_progress")


@pytest.mark.parametrize("raw, expected", [(None, None), (3, 3), (0, 0), (-2, -2), (4.0, 4)])
def test_parse_priority_accepts_whole_numbers(raw, expected):
    assert parse_priority(raw) == expected


def test_parse_priority_error_payload():
    with pytest.raises(InvalidPriorityError) as exc:
        parse_priority("high")
    assert exc.value.to_dict() == {
        "message": "Invalid priority provided.",
        "long_message": "Priority can only be positive integer.",
    }


def test_clamp():
    assert clamp(-4, 1, 3) == 1
    assert clamp(2, 1, 3) == 2
    assert clamp(9, 1, 3) == 3


def test_swimlane_violations_reports_gaps_and_duplicates():
    clients = [
        ClientRecord(id=1, status=BACKLOG, priority=1),
        ClientRecord(id=2, status=BACKLOG, priority=3),
        ClientRecord(id=3, status=COMPLETE, priority=1),
        ClientRecord(id=4, status=COMPLETE, priority=1),
    ]

    assert swimlane_violations(clients) == {BACKLOG: [1, 3], COMPLETE: [1, 1]}


def test_swimlane_violations_empty_for_dense_lanes():
    assert swimlane_violations(make_snapshot({BACKLOG: [1, 2], COMPLETE: [3]})) == {}


def test_apply_assignments_unknown_id():
    clients = make_snapshot({BACKLOG: [1]})

    with pytest.raises(ClientNotFoundError):
        apply_assignments(clients, [Assignment(id=2, status=BACKLOG, priority=1)])


def test_client_not_found_is_an_invalid_id():
    err = ClientNotFoundError()
    assert isinstance(err, InvalidIdError)
    assert err.message == "Invalid id provided."
    assert err.long_message == "Cannot find client with that id."
