# shiptivity/client_store.py

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from shiptivity.entities import Client
from shiptivity.errors import ClientNotFoundError
from shiptivity.swimlanes import Assignment, ClientRecord, Status


class ClientStore:
    """
    Reads and writes client rows through one Session.

    The store never commits; the caller owns the transaction so a batch of
    assignments lands atomically.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def read_all_clients(self, status: Optional[Status] = None) -> List[ClientRecord]:
        query = self.session.query(Client)
        if status is not None:
            query = query.filter(Client.status == status.value)
        rows = query.order_by(Client.status, Client.priority, Client.id).all()
        return [row.to_record() for row in rows]

    def get_client(self, client_id: int) -> Optional[ClientRecord]:
        row = (
            self.session.query(Client)
            .filter(Client.id == client_id)
            .one_or_none()
        )
        return row.to_record() if row is not None else None

    def write_assignment(self, assignment: Assignment) -> None:
        row = (
            self.session.query(Client)
            .filter(Client.id == assignment.id)
            .one_or_none()
        )
        if row is None:
            raise ClientNotFoundError()
        row.status = assignment.status.value
        row.priority = assignment.priority

    def write_assignments(self, assignments: Iterable[Assignment]) -> int:
        count = 0
        for assignment in assignments:
            self.write_assignment(assignment)
            count += 1
        self.session.flush()
        return count

    def add_client(self, name: str, status: Status, priority: int,
                   description: Optional[str] = None, client_id: Optional[int] = None) -> ClientRecord:
        row = Client(
            id=client_id,
            name=name,
            description=description,
            status=status.value,
            priority=priority,
        )
        self.session.add(row)
        self.session.flush()
        return row.to_record()
