from tests.helpers import VIEWER_ID, envelope


def user(**fields):
    return {"_id": VIEWER_ID, "name": "Viewer", "email": "viewer@example.com", **fields}


async def test_login_sets_user_and_notifies_listeners(auth, server, notifier):
    server.add("POST", "/auth/login", {"success": True, "user": user()})
    changes = []

    async def on_change(current):
        changes.append(current.id if current else None)

    auth.on_session_change(on_change)

    result = await auth.login({"email": "viewer@example.com", "password": "secret"})

    assert result.success
    assert auth.viewer_id == VIEWER_ID
    assert changes == [VIEWER_ID]
    assert notifier.messages("success") == ["Logged in successfully"]


async def test_login_failure_records_server_message(auth, server, notifier):
    server.add("POST", "/auth/login", {"success": False, "message": "Invalid credentials"}, status=401)

    result = await auth.login({"email": "viewer@example.com", "password": "wrong"})

    assert not result.success
    assert auth.user is None
    assert auth.error == "Invalid credentials"
    assert notifier.messages("error") == ["Invalid credentials"]


async def test_check_auth_failure_is_silent(auth, server, notifier):
    server.add("GET", "/auth/me", {"success": False, "message": "Not authorized"}, status=401)

    result = await auth.check_auth()

    assert not result.success
    assert auth.is_authenticated is False
    assert notifier.messages() == []


async def test_logout_clears_session(auth, server, viewer, notifier):
    server.add("POST", "/auth/logout", envelope())

    result = await auth.logout()

    assert result.success
    assert auth.user is None
    assert notifier.messages("success") == ["Logged out successfully"]


async def test_listeners_only_fire_on_identity_change(auth, server):
    server.add("GET", "/auth/me", envelope(user()))
    server.add("PUT", "/auth/profile", envelope(user(name="Renamed")))
    changes = []

    async def on_change(current):
        changes.append(current)

    auth.on_session_change(on_change)

    await auth.check_auth()
    await auth.update_profile({"name": "Renamed"})

    assert len(changes) == 1
    assert auth.user.name == "Renamed"


async def test_add_achievement_updates_user(auth, server, viewer):
    server.add("POST", "/auth/achievements", envelope([{"title": "Marathon"}]))

    result = await auth.add_achievement({"title": "Marathon"})

    assert result.data == [{"title": "Marathon"}]
    assert auth.user.achievements == [{"title": "Marathon"}]
