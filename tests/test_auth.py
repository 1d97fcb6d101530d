import pytest

from pathy_admin.auth import Auth
from pathy_admin.errors import AuthError
from pathy_admin.models.session import Capability, Role

from conftest import FakeAPI, make_session, make_token


@pytest.mark.asyncio
async def test_admin_login_reads_role_from_token():
    token = make_token("super-admin", email="root@example.com", id="u-1")
    api = FakeAPI({("POST", "/admin/login"): {"token": token}})
    http = api.http(token=None)

    session = await Auth(http).login("root@example.com", "pw")

    assert session.role is Role.SUPER_ADMIN
    assert session.user_id == "u-1"
    assert http.token == token
    assert "Authorization" not in api.calls("POST", "/admin/login")[0].headers


@pytest.mark.asyncio
async def test_admin_login_defaults_to_admin_role():
    api = FakeAPI({("POST", "/admin/login"): {"token": make_token(role=None)}})
    session = await Auth(api.http(None)).login("ops@example.com", "pw")
    assert session.role is Role.ADMIN


@pytest.mark.asyncio
async def test_team_login_carries_permissions():
    api = FakeAPI({("POST", "/teams/login"): {
        "token": make_token("team-member"),
        "user": {
            "_id": "tm-1",
            "email": "tm@example.com",
            "fullName": "Team Member",
            "permissions": {"orders": True, "users": {"read": True, "write": False}},
        },
    }})

    session = await Auth(api.http(None)).team_login("tm@example.com", "pw")

    assert session.role is Role.TEAM_MEMBER
    assert session.user_id == "tm-1"
    assert session.permissions["orders"] == Capability(read=True, write=True)
    assert session.has_capability("users")
    assert not session.has_capability("users", write=True)


@pytest.mark.asyncio
async def test_rejected_credentials_raise_auth_error():
    api = FakeAPI({("POST", "/admin/login"): 401})
    with pytest.raises(AuthError) as exc:
        await Auth(api.http(None)).login("ops@example.com", "wrong")
    assert "401" in str(exc.value)


@pytest.mark.asyncio
async def test_missing_token_raises():
    api = FakeAPI({("POST", "/admin/login"): {"ok": True}})
    with pytest.raises(AuthError) as exc:
        await Auth(api.http(None)).login("ops@example.com", "pw")
    assert exc.value.code == "no_token"


@pytest.mark.asyncio
async def test_unusable_token_raises():
    api = FakeAPI({("POST", "/teams/login"): {"token": "garbage"}})
    with pytest.raises(AuthError) as exc:
        await Auth(api.http(None)).team_login("tm@example.com", "pw")
    assert exc.value.code == "bad_token"


@pytest.mark.asyncio
async def test_refresh_falls_back_to_empty_permissions():
    api = FakeAPI({("GET", "/teams/me"): 500})
    stale = make_session(Role.TEAM_MEMBER, {"orders": True})

    refreshed = await Auth(api.http()).refresh_team_member(stale)

    assert refreshed.role is Role.TEAM_MEMBER
    assert refreshed.permissions == {}
    assert refreshed.token == stale.token


@pytest.mark.asyncio
async def test_refresh_reads_current_permissions():
    api = FakeAPI({("GET", "/teams/me"): {"success": True, "data": {"_id": "agent-1", "permissions": {"chats": True}}}})
    refreshed = await Auth(api.http()).refresh_team_member(make_session(Role.TEAM_MEMBER, {"orders": True}))
    assert set(refreshed.permissions) == {"chats"}


@pytest.mark.asyncio
async def test_refresh_leaves_admins_alone():
    api = FakeAPI()
    session = make_session(Role.ADMIN)
    assert await Auth(api.http()).refresh_team_member(session) is session
    assert api.requests == []


@pytest.mark.asyncio
async def test_refresh_accepts_wrapped_user_record():
    api = FakeAPI({("GET", "/teams/me"): {"user": {"_id": "agent-1", "fullName": "Meera", "permissions": {"orders": True}}}})
    refreshed = await Auth(api.http()).refresh_team_member(make_session(Role.TEAM_MEMBER))
    assert refreshed.full_name == "Meera"
    assert refreshed.has_capability("orders", write=True)


@pytest.mark.asyncio
async def test_refresh_falls_back_on_malformed_record():
    api = FakeAPI({("GET", "/teams/me"): {"fullName": "no id"}})
    refreshed = await Auth(api.http()).refresh_team_member(make_session(Role.TEAM_MEMBER, {"orders": True}))
    assert refreshed.permissions == {}
