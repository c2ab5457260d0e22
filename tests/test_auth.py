"""Session gate and operator account tests."""

import pytest

from shipdesk.auth import (
    SessionGate,
    UserAdmin,
    ensure_admin,
    hash_password,
    verify_password,
)
from shipdesk.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

ROUNDS = 4


@pytest.fixture()
async def gate(database) -> SessionGate:
    await ensure_admin(database, "admin", "admin-pass", bcrypt_rounds=ROUNDS)
    return SessionGate(database, bcrypt_rounds=ROUNDS)


@pytest.fixture()
def users(gate, database) -> UserAdmin:
    return UserAdmin(database, admin_username="admin", bcrypt_rounds=ROUNDS)


def test_password_hash_round_trip() -> None:
    hashed = hash_password("correct horse", ROUNDS)

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_against_garbage_hash() -> None:
    assert verify_password("secret", "not-a-bcrypt-hash") is False


def test_overlong_password_is_rejected() -> None:
    with pytest.raises(ValidationError):
        hash_password("x" * 73, ROUNDS)


async def test_ensure_admin_is_idempotent(database) -> None:
    assert await ensure_admin(database, "admin", "a", bcrypt_rounds=ROUNDS)
    assert not await ensure_admin(
        database, "admin", "b", bcrypt_rounds=ROUNDS
    )


async def test_login_sets_session(gate) -> None:
    session: dict = {}

    user = await gate.login(session, "admin", "admin-pass")

    assert user.username == "admin"
    assert session == {"user_id": user.id, "username": "admin"}
    assert gate.check(session) == user


@pytest.mark.parametrize(
    ("username", "password"),
    [("admin", "wrong"), ("ghost", "admin-pass")],
)
async def test_login_rejects_bad_credentials(gate, username, password) -> None:
    session: dict = {}

    with pytest.raises(AuthenticationError, match="Invalid username"):
        await gate.login(session, username, password)

    assert session == {}


async def test_login_requires_both_fields(gate) -> None:
    with pytest.raises(ValidationError):
        await gate.login({}, "admin", "  ")


async def test_check_without_session(gate) -> None:
    assert gate.check({}) is None


async def test_admit_returns_session_user(gate) -> None:
    session: dict = {}
    user = await gate.login(session, "admin", "admin-pass")

    assert await gate.admit(session) == user


async def test_admit_without_session(gate) -> None:
    with pytest.raises(AuthenticationError):
        await gate.admit({})


async def test_admit_refuses_disabled_account(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")
    session: dict = {}
    await gate.login(session, "clerk", "clerk-pass")

    await users.set_status(user_id, "disabled")

    with pytest.raises(AuthenticationError):
        await gate.admit(session)
    assert session == {}


async def test_admit_refuses_deleted_account(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")
    session: dict = {}
    await gate.login(session, "clerk", "clerk-pass")

    await users.delete(user_id)

    with pytest.raises(AuthenticationError):
        await gate.admit(session)


async def test_admit_follows_rename(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")
    session: dict = {}
    await gate.login(session, "clerk", "clerk-pass")

    await users.update(user_id, "cashier", None)

    assert (await gate.admit(session)).username == "cashier"


async def test_logout_clears_session(gate) -> None:
    session: dict = {}
    await gate.login(session, "admin", "admin-pass")

    gate.logout(session)

    assert session == {}
    assert gate.check(session) is None


async def test_disabled_account_cannot_log_in(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")
    await users.set_status(user_id, "disabled")

    with pytest.raises(AuthenticationError, match="disabled"):
        await gate.login({}, "clerk", "clerk-pass")

    await users.set_status(user_id, "active")
    user = await gate.login({}, "clerk", "clerk-pass")
    assert user.id == user_id


async def test_change_password(gate) -> None:
    session: dict = {}
    await gate.login(session, "admin", "admin-pass")

    await gate.change_password(session, "admin-pass", "new-pass")

    with pytest.raises(AuthenticationError):
        await gate.login({}, "admin", "admin-pass")
    assert (await gate.login({}, "admin", "new-pass")).username == "admin"


async def test_change_password_checks_old_password(gate) -> None:
    session: dict = {}
    await gate.login(session, "admin", "admin-pass")

    with pytest.raises(ValidationError, match="Old password is incorrect"):
        await gate.change_password(session, "nope", "new-pass")


async def test_change_password_requires_login(gate) -> None:
    with pytest.raises(AuthenticationError):
        await gate.change_password({}, "admin-pass", "new-pass")


async def test_list_users_hides_password(users) -> None:
    await users.create("clerk", "clerk-pass")

    listed = await users.list()

    assert [u.username for u in listed] == ["admin", "clerk"]
    assert all(u.status == "active" for u in listed)
    assert "password" not in listed[0].model_dump()


async def test_create_duplicate_username(users) -> None:
    await users.create("clerk", "clerk-pass")

    with pytest.raises(ConflictError):
        await users.create("clerk", "other-pass")


async def test_update_renames_and_resets_password(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")

    await users.update(user_id, "cashier", "till-pass")

    user = await gate.login({}, "cashier", "till-pass")
    assert user.id == user_id


async def test_update_blank_password_keeps_it(gate, users) -> None:
    user_id = await users.create("clerk", "clerk-pass")

    await users.update(user_id, "clerk", "")

    assert (await gate.login({}, "clerk", "clerk-pass")).id == user_id


async def test_update_to_taken_username(users) -> None:
    user_id = await users.create("clerk", "clerk-pass")

    with pytest.raises(ConflictError):
        await users.update(user_id, "admin", None)


async def test_admin_account_is_protected(users) -> None:
    admin_id = (await users.list())[0].id

    with pytest.raises(PermissionDeniedError):
        await users.update(admin_id, "root", None)
    with pytest.raises(PermissionDeniedError):
        await users.delete(admin_id)
    with pytest.raises(PermissionDeniedError):
        await users.set_status(admin_id, "disabled")


async def test_set_status_rejects_unknown_value(users) -> None:
    user_id = await users.create("clerk", "clerk-pass")

    with pytest.raises(ValidationError):
        await users.set_status(user_id, "banned")


async def test_delete_user(users) -> None:
    user_id = await users.create("clerk", "clerk-pass")

    await users.delete(user_id)

    assert [u.username for u in await users.list()] == ["admin"]
    with pytest.raises(NotFoundError):
        await users.delete(user_id)
