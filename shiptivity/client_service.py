# shiptivity/client_service.py
import logging
import threading
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from shiptivity.client_store import ClientStore
from shiptivity.db_connection import DbConnection
from shiptivity.errors import ClientNotFoundError, CorruptRecordError, ShiptivityError
from shiptivity.reordering import reorder
from shiptivity.swimlanes import parse_client_id, parse_status

logger = logging.getLogger("shiptivity_backend")


class ClientService:
    """
    Glue between the HTTP routes, the store and the reordering engine.

    Moves are read-modify-write over whole swimlanes, so they run one at a
    time under _write_lock and inside a single transaction.
    """

    def __init__(self, connection: DbConnection) -> None:
        self.connection = connection
        self._write_lock = threading.Lock()

    def list_clients(self, raw_status: Any = None) -> List[Dict[str, Any]]:
        status = parse_status(raw_status)
        with self.connection.session_scope() as session:
            clients = ClientStore(session).read_all_clients(status)
        return [c.to_dict() for c in clients]

    def get_client(self, raw_id: Any) -> Dict[str, Any]:
        client_id = parse_client_id(raw_id)
        with self.connection.session_scope() as session:
            client = ClientStore(session).get_client(client_id)
        if client is None:
            raise ClientNotFoundError()
        return client.to_dict()

    def move_client(self, raw_id: Any, status: Any = None, priority: Any = None) -> List[Dict[str, Any]]:
        """
        Move a client to `status` and/or `priority` and return every client
        after the update. Input errors leave the database untouched.
        """
        try:
            client_id = parse_client_id(raw_id)
            with self._write_lock, self.connection.session_scope() as session:
                store = ClientStore(session)
                snapshot = store.read_all_clients()
                assignments = reorder(snapshot, client_id, status=status, priority=priority)
                written = store.write_assignments(assignments)
                if written:
                    logger.info(f"move_client(): client={client_id} wrote {written} assignment(s)")
                    clients = store.read_all_clients()
                else:
                    clients = snapshot
        except ShiptivityError as e:
            logger.warning(f"move_client(): rejected client={raw_id!r}: {e}")
            raise
        except (SQLAlchemyError, CorruptRecordError):
            logger.exception(f"move_client(): DB error for client={raw_id!r}")
            raise
        return [c.to_dict() for c in clients]
