import sqlalchemy as sa

from tests.conftest import make_config
from visitor_registry import create_app
from visitor_registry.services import VisitorRegistrationHandler


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["service"] == "visitor-registry"


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "See /api/health"


def test_readyz(client):
    resp = client.get("/api/readyz")
    assert resp.status_code == 200
    assert resp.get_json() == {"ready": True}


def test_readyz_unconfigured(unconfigured_app):
    resp = unconfigured_app.test_client().get("/api/readyz")
    assert resp.status_code == 503
    assert resp.get_json()["ready"] is False


def test_handler_is_registered(app, unconfigured_app):
    handler = app.extensions["visitor_registration"]
    assert isinstance(handler, VisitorRegistrationHandler)
    assert handler.configured
    assert not unconfigured_app.extensions["visitor_registration"].configured


def test_init_db_command(app, database_url):
    result = app.test_cli_runner().invoke(args=["init-db"])

    assert result.exit_code == 0, result.output
    assert "Table 'visitors' is ready." in result.output
    engine = sa.create_engine(database_url)
    try:
        with engine.connect() as connection:
            assert sa.inspect(connection).has_table("visitors")
    finally:
        engine.dispose()


def test_init_db_command_twice(app):
    runner = app.test_cli_runner()
    assert runner.invoke(args=["init-db"]).exit_code == 0
    assert runner.invoke(args=["init-db"]).exit_code == 0


def test_init_db_command_unconfigured(unconfigured_app):
    result = unconfigured_app.test_cli_runner().invoke(args=["init-db"])

    assert result.exit_code == 1
    assert "POSTGRES_CONN_STRING is not configured." in result.output


def test_readyz_hides_driver_detail(tmp_path):
    app = create_app(make_config(POSTGRES_CONN_STRING=f"sqlite:///{tmp_path / 'missing' / 'visitors.db'}"))
    resp = app.test_client().get("/api/readyz")

    assert resp.status_code == 503
    assert resp.get_json() == {"ready": False, "error": "database unavailable"}


def test_readyz_unusable_connection_string():
    app = create_app(make_config(POSTGRES_CONN_STRING="Host=db;Username=app"))
    resp = app.test_client().get("/api/readyz")

    assert resp.status_code == 503
    assert resp.get_json() == {"ready": False, "error": "database misconfigured"}


def test_init_db_command_unusable_connection_string():
    app = create_app(make_config(POSTGRES_CONN_STRING="Host=db;Username=app"))
    result = app.test_cli_runner().invoke(args=["init-db"])

    assert result.exit_code == 1
    assert "not a usable SQLAlchemy URL" in result.output
