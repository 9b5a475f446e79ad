"""
Users API: Application Wiring Tests
=====================================

What:  Swagger/OpenAPI serving, the health probe, and the startup lifecycle.
"""

import threading
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.exceptions import StoreConnectionError
from users_api.main import create_app
from users_api.services.event_logger import EventLogger
from users_api.services.user_store import UserStore


class TestApiDocs:

    @pytest.mark.asyncio
    async def test_swagger_ui_is_served(self, test_client):
        response = await test_client.get("/swagger")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "swagger-ui" in response.text
        assert "/swagger/openapi.json" in response.text

    @pytest.mark.asyncio
    async def test_openapi_document_describes_user_operations(self, test_client):
        response = await test_client.get("/swagger/openapi.json")
        assert response.status_code == 200
        doc = response.json()

        assert doc["info"]["title"] == "User API"
        assert set(doc["paths"]["/users"]) == {"get", "post"}
        assert set(doc["paths"]["/users/{user_id}"]) == {"put", "delete"}

        post = doc["paths"]["/users"]["post"]
        assert "201" in post["responses"]
        assert "500" in post["responses"]
        assert "requestBody" in post

        delete = doc["paths"]["/users/{user_id}"]["delete"]
        assert "204" in delete["responses"]
        assert delete["parameters"][0]["schema"]["type"] == "integer"


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_when_store_reachable(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unhealthy_when_store_unreachable(self, event_logger):
        app = create_app(store=UserStore("sqlite+aiosqlite:///unused.db"), event_logger=event_logger)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_connects_and_shutdown_closes(self, store_url):
        store = UserStore(store_url)
        events = MagicMock(spec=EventLogger)
        app = create_app(store=store, event_logger=events)

        async with app.router.lifespan_context(app):
            assert store.connected
            events.info.assert_called_with("Connected to the database")

        assert not store.connected
        # Injected loggers belong to the caller
        events.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_failure_aborts_startup(self, tmp_path):
        missing = tmp_path / "missing" / "users.db"
        events = MagicMock(spec=EventLogger)
        app = create_app(store=UserStore(f"sqlite+aiosqlite:///{missing}"), event_logger=events)

        with pytest.raises(StoreConnectionError):
            async with app.router.lifespan_context(app):
                pytest.fail("application must not start without a store")

        message, meta = events.error.call_args.args
        assert message == "Failed to connect to the database"
        assert meta["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_builds_own_event_logger_when_not_injected(self, store_url):
        app = create_app(store=UserStore(store_url))
        assert app.state.event_logger is None

        async with app.router.lifespan_context(app):
            assert isinstance(app.state.event_logger, EventLogger)

    @pytest.mark.asyncio
    async def test_owned_event_logger_closes_off_the_event_loop(self, store_url, monkeypatch):
        events = MagicMock(spec=EventLogger)
        closed_in = []
        events.close.side_effect = lambda: closed_in.append(threading.current_thread())
        monkeypatch.setattr("users_api.main.build_event_logger", lambda config: events)

        app = create_app(store=UserStore(store_url))
        async with app.router.lifespan_context(app):
            pass

        assert len(closed_in) == 1
        assert closed_in[0] is not threading.main_thread()
