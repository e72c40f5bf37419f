import logging

import pytest
import sqlalchemy as sa

from visitor_registry import create_app
from visitor_registry.config import Config
from visitor_registry.models import Visitor


def make_config(**overrides):
    return type("TestConfig", (Config,), {"TESTING": True, **overrides})


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'visitors.db'}"


@pytest.fixture
def app(database_url):
    return create_app(make_config(POSTGRES_CONN_STRING=database_url))


@pytest.fixture
def unconfigured_app():
    return create_app(make_config(POSTGRES_CONN_STRING=""))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logger():
    return logging.getLogger("tests.registration")


@pytest.fixture
def fetch_visitors(database_url):
    """Read back every persisted visitor row, oldest first."""

    def fetch():
        engine = sa.create_engine(database_url)
        try:
            with engine.connect() as connection:
                if not sa.inspect(connection).has_table(Visitor.__tablename__):
                    return []
                table = Visitor.__table__
                rows = connection.execute(sa.select(table).order_by(table.c.id)).mappings()
                return [dict(row) for row in rows]
        finally:
            engine.dispose()

    return fetch
