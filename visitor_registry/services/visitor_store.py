# visitor_registry/services/visitor_store.py
import sqlalchemy as sa
from sqlalchemy.schema import CreateTable

from visitor_registry.models import Visitor


class VisitorStore:
    """Writes visitor rows, creating the `visitors` table on first use."""

    table = Visitor.__table__

    def __init__(self, engine: sa.engine.Engine):
        self.engine = engine

    def ensure_schema(self, connection: sa.engine.Connection) -> None:
        try:
            connection.execute(CreateTable(self.table, if_not_exists=True))
        except sa.exc.IntegrityError:
            # PostgreSQL can report a duplicate type when two sessions race
            # through CREATE TABLE IF NOT EXISTS; the loser sees the table.
            connection.rollback()
            if not sa.inspect(connection).has_table(self.table.name):
                raise

    def insert(self, connection: sa.engine.Connection, visitor) -> None:
        connection.execute(
            sa.insert(self.table),
            {
                "first_name": visitor.firstname,
                "surname": visitor.surname,
                "company": visitor.company or "",
                "email": visitor.email,
            },
        )

    def save(self, visitor) -> None:
        with self.engine.connect() as connection:
            self.ensure_schema(connection)
            self.insert(connection, visitor)
            connection.commit()
