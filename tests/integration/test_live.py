"""
Integration tests against a running admin API.

Requires environment variables:
  PATHY_ADMIN_EMAIL     — admin email
  PATHY_ADMIN_PASSWORD  — admin password
  PATHY_ADMIN_BASE_URL  — (optional) defaults to http://localhost:3000

Run: PATHY_ADMIN_INTEGRATION=1 pytest tests/integration/ -v
"""

import os
import pytest
import pytest_asyncio

from pathy_admin import AsyncAdminClient, Feature

SKIP = not os.environ.get("PATHY_ADMIN_INTEGRATION")
EMAIL = os.environ.get("PATHY_ADMIN_EMAIL", "")
PASSWORD = os.environ.get("PATHY_ADMIN_PASSWORD", "")
BASE_URL = os.environ.get("PATHY_ADMIN_BASE_URL", "http://localhost:3000")

pytestmark = pytest.mark.skipif(SKIP, reason="PATHY_ADMIN_INTEGRATION not set")


@pytest_asyncio.fixture
async def client():
    c = AsyncAdminClient(base_url=BASE_URL)
    await c.login(EMAIL, PASSWORD)
    yield c
    await c.close()


class TestDashboard:
    @pytest.mark.asyncio
    async def test_every_section_loads(self, client):
        dashboard = await client.load_dashboard()
        assert dashboard.errors == {}
        assert dashboard.counters.total_users is not None


class TestChat:
    @pytest.mark.asyncio
    async def test_connect_and_open_latest_chat(self, client):
        await client.connect()
        assert client.connected
        chats = await client.chats.list(limit=1)
        if not chats:
            pytest.skip("no conversations on this server")
        view = await client.open_chat(chats[0].id)
        try:
            assert view.live
            assert view.status is not None
            assert client.resolve_view(Feature.CHATS) is Feature.CHATS
        finally:
            view.close()
