"""
Shared fixtures: in-memory snapshots for the engine and a throwaway SQLite
database for the store / API.
"""
from __future__ import annotations

import pytest

from shiptivity.client_store import ClientStore
from shiptivity.db_connection import DbConnection
from shiptivity.swimlanes import ClientRecord, Status

BACKLOG = Status.BACKLOG
IN_PROGRESS = Status.IN_PROGRESS
COMPLETE = Status.COMPLETE


def make_snapshot(lanes: dict[Status, list[int]]) -> list[ClientRecord]:
    """Build records from {status: [id, id, ...]} in priority order."""
    clients = []
    for status, ids in lanes.items():
        for priority, client_id in enumerate(ids, start=1):
            clients.append(ClientRecord(id=client_id, status=status, priority=priority,
                                        name=f"Client {client_id}"))
    return clients


@pytest.fixture
def db_connection(tmp_path):
    connection = DbConnection(database_url=f"sqlite:///{tmp_path / 'clients.db'}")
    connection.create_schema()
    yield connection
    connection.dispose()


@pytest.fixture
def seeded_connection(db_connection):
    """backlog=[1,2,3], in-progress=[4], complete=[5,6]."""
    lanes = {BACKLOG: [1, 2, 3], IN_PROGRESS: [4], COMPLETE: [5, 6]}
    with db_connection.session_scope() as session:
        store = ClientStore(session)
        for record in make_snapshot(lanes):
            store.add_client(record.name, record.status, record.priority,
                             description=f"About {record.name}", client_id=record.id)
    return db_connection
