from pathy_admin.models.session import AdminSession, Capability, Feature, Role
from pathy_admin.permissions import DEFAULT_VIEW, LOGIN_VIEW, can_edit, can_view, resolve_view, visible_features

from conftest import make_session


def test_team_member_with_orders_can_view_orders_but_not_payments():
    session = make_session(Role.TEAM_MEMBER, {"orders": True})
    assert resolve_view(session, Feature.ORDERS) is Feature.ORDERS
    assert resolve_view(session, Feature.PAYMENTS) is DEFAULT_VIEW


def test_admin_views_everything_regardless_of_map():
    session = make_session(Role.ADMIN, {"orders": False})
    assert resolve_view(session, Feature.ORDERS) is Feature.ORDERS
    assert resolve_view(session, Feature.PAYMENTS) is Feature.PAYMENTS
    assert can_edit(session, Feature.PAYMENTS)


def test_super_admin_has_every_capability():
    session = make_session(Role.SUPER_ADMIN)
    assert all(session.has_capability(f, write=True) for f in Feature)
    assert visible_features(session) == list(Feature)


def test_no_session_goes_to_login():
    assert resolve_view(None, Feature.ORDERS) == LOGIN_VIEW
    assert resolve_view(None, "dashboard") == LOGIN_VIEW
    assert visible_features(None) == []


def test_dashboard_always_reachable_when_logged_in():
    session = make_session(Role.TEAM_MEMBER, {})
    assert can_view(session, Feature.DASHBOARD)
    assert visible_features(session) == [Feature.DASHBOARD]


def test_boolean_and_read_write_shapes_normalize():
    session = make_session(Role.TEAM_MEMBER, {
        "orders": True,
        "users": {"read": True, "write": False},
        "chats": False,
    })
    assert session.permissions["orders"] == Capability(read=True, write=True)
    assert session.has_capability("users")
    assert not session.has_capability("users", write=True)
    assert not can_view(session, Feature.CHATS)
    assert not can_edit(session, Feature.USERS)


def test_string_feature_names_accepted():
    session = make_session(Role.TEAM_MEMBER, {"dailyUpdates": True})
    assert resolve_view(session, "dailyUpdates") is Feature.DAILY_UPDATES


def test_role_parse_accepts_underscore_variant():
    assert Role.parse("team_member", default=Role.ADMIN) is Role.TEAM_MEMBER
    assert Role.parse("owner", default=Role.ADMIN) is Role.ADMIN
    assert Role.parse(None, default=Role.SUPER_ADMIN) is Role.SUPER_ADMIN


def test_no_email_bypass():
    session = AdminSession(token="t", role=Role.TEAM_MEMBER, email="admin@gsbpathy.com")
    assert resolve_view(session, Feature.PAYMENTS) is DEFAULT_VIEW
