# shiptivity/entities.py
from sqlalchemy import Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from shiptivity.errors import CorruptRecordError
from shiptivity.swimlanes import STATUS_VALUES, ClientRecord, Status

Base = declarative_base()


class Client(Base):
    # same layout as the original clients.db, so an existing file can be reused
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        server_default=text("''"),
    )
    description: Mapped[str | None] = mapped_column(Text)

    # backlog | in-progress | complete
    status: Mapped[str] = mapped_column(String, nullable=False)
    # 1-based rank inside its status swimlane
    priority: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_clients_status_priority", "status", "priority"),
    )

    def to_record(self) -> ClientRecord:
        if self.status not in STATUS_VALUES:
            raise CorruptRecordError(self.id, f"unknown status {self.status!r}")
        return ClientRecord(
            id=self.id,
            status=Status(self.status),
            priority=self.priority,
            name=self.name or "",
            description=self.description,
        )
