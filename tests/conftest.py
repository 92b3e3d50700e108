import pytest

from memory_server import create_app


@pytest.fixture
def app():
    app = create_app()
    app.config["TESTING"] = True
    yield app
    app.extensions["memory_registry"].clear()


@pytest.fixture
def client(app):
    return app.test_client()
