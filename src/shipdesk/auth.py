"""Session gate and operator account administration."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

import bcrypt
from sqlalchemy import delete, insert, select, update

from shipdesk.exceptions import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from shipdesk.registries import is_blank
from shipdesk.schemas import SessionUser, UserRead
from shipdesk.storage.gateway import Database
from shipdesk.storage.models import User, UserStatus

logger = logging.getLogger(__name__)

Session = MutableMapping[str, Any]

# bcrypt only looks at the first 72 bytes and newer releases refuse more.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        return False


class SessionGate:
    """Login, logout and admission checks over the signed session cookie."""

    def __init__(self, db: Database, *, bcrypt_rounds: int = 10) -> None:
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def login(
        self, session: Session, username: str | None, password: str | None
    ) -> SessionUser:
        if is_blank(username) or is_blank(password):
            raise ValidationError("Username and password are required")

        async with self.db.exclusive():
            user = await self.db.query_one(
                select(User.__table__).where(User.username == username)
            )
        if user is None or not verify_password(password, user["password"]):
            logger.warning("Failed login for %r", username)
            raise AuthenticationError("Invalid username or password")
        if user["status"] == UserStatus.DISABLED:
            logger.warning("Login refused for disabled account %r", username)
            raise AuthenticationError(
                "This account has been disabled, contact the administrator"
            )

        session["user_id"] = user["id"]
        session["username"] = user["username"]
        logger.info("User %s logged in", user["username"])
        return SessionUser(id=user["id"], username=user["username"])

    def check(self, session: Session) -> SessionUser | None:
        user_id = session.get("user_id")
        if not user_id:
            return None
        return SessionUser(id=user_id, username=session.get("username", ""))

    async def admit(self, session: Session) -> SessionUser:
        """Session user, re-checked against the stored account.

        A session whose account was deleted or disabled since login is
        cleared and refused.
        """
        current = self.check(session)
        if current is None:
            raise AuthenticationError()
        async with self.db.exclusive():
            user = await self.db.query_one(
                select(User.username, User.status).where(
                    User.id == current.id
                )
            )
        if user is None or user["status"] == UserStatus.DISABLED:
            logger.warning(
                "Session for %s refused, account no longer active",
                current.username,
            )
            session.clear()
            raise AuthenticationError()
        return SessionUser(id=current.id, username=user["username"])

    def logout(self, session: Session) -> None:
        username = session.get("username")
        session.clear()
        if username:
            logger.info("User %s logged out", username)

    async def change_password(
        self,
        session: Session,
        old_password: str | None,
        new_password: str | None,
    ) -> None:
        current = self.check(session)
        if current is None:
            raise AuthenticationError()
        if is_blank(old_password) or is_blank(new_password):
            raise ValidationError("Old and new password are required")

        async with self.db.exclusive():
            user = await self.db.query_one(
                select(User.__table__).where(User.id == current.id)
            )
            if user is None:
                raise NotFoundError("User", current.id)
            if not verify_password(old_password, user["password"]):
                raise ValidationError("Old password is incorrect")
            result = await self.db.execute(
                update(User.__table__)
                .where(User.id == current.id)
                .values(
                    password=hash_password(new_password, self.bcrypt_rounds)
                )
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()
        logger.info("User %s changed password", current.username)


class UserAdmin:
    """Operator account management, reserved for the admin account.

    The admin account itself can be neither renamed, disabled nor deleted.
    """

    def __init__(
        self,
        db: Database,
        *,
        admin_username: str,
        bcrypt_rounds: int = 10,
    ) -> None:
        self.db = db
        self.admin_username = admin_username
        self.bcrypt_rounds = bcrypt_rounds

    async def _fetch(self, user_id: int) -> dict[str, Any]:
        row = await self.db.query_one(
            select(User.__table__).where(User.id == user_id)
        )
        if row is None:
            raise NotFoundError("User", user_id)
        return row

    async def _username_taken(
        self, username: str, exclude_id: int | None = None
    ) -> bool:
        statement = select(User.id).where(User.username == username)
        if exclude_id is not None:
            statement = statement.where(User.id != exclude_id)
        return await self.db.query_one(statement) is not None

    async def list(self) -> list[UserRead]:
        async with self.db.exclusive():
            rows = await self.db.query_all(
                select(
                    User.id, User.username, User.status, User.created_at
                ).order_by(User.id.asc())
            )
        return [UserRead.model_validate(row) for row in rows]

    async def create(self, username: str | None, password: str | None) -> int:
        if is_blank(username) or is_blank(password):
            raise ValidationError("Username and password are required")
        hashed = hash_password(password, self.bcrypt_rounds)

        async with self.db.exclusive():
            if await self._username_taken(username):
                raise ConflictError(f"Username {username} already exists")
            result = await self.db.execute(
                insert(User.__table__).values(
                    username=username,
                    password=hashed,
                    status=UserStatus.ACTIVE.value,
                )
            )
            if not result.inserted_id:
                raise InternalError()
            await self.db.persist()

        logger.info("Created user %s", username)
        return result.inserted_id

    async def update(
        self,
        user_id: int,
        username: str | None,
        password: str | None,
    ) -> None:
        async with self.db.exclusive():
            existing = await self._fetch(user_id)
            new_username = existing["username"]
            if not is_blank(username) and username != existing["username"]:
                if existing["username"] == self.admin_username:
                    raise PermissionDeniedError(
                        "The admin account cannot be renamed"
                    )
                if await self._username_taken(username, exclude_id=user_id):
                    raise ConflictError(f"Username {username} is already used")
                new_username = username

            values: dict[str, Any] = {"username": new_username}
            if not is_blank(password):
                values["password"] = hash_password(
                    password, self.bcrypt_rounds
                )
            result = await self.db.execute(
                update(User.__table__)
                .where(User.id == user_id)
                .values(**values)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Updated user %s", user_id)

    async def delete(self, user_id: int) -> None:
        async with self.db.exclusive():
            existing = await self._fetch(user_id)
            if existing["username"] == self.admin_username:
                raise PermissionDeniedError(
                    "The admin account cannot be deleted"
                )
            result = await self.db.execute(
                delete(User.__table__).where(User.id == user_id)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Deleted user %s", user_id)

    async def set_status(self, user_id: int, status: str | None) -> str:
        try:
            new_status = UserStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Invalid user status {status!r}") from exc

        async with self.db.exclusive():
            existing = await self._fetch(user_id)
            if (
                existing["username"] == self.admin_username
                and new_status is UserStatus.DISABLED
            ):
                raise PermissionDeniedError(
                    "The admin account cannot be disabled"
                )
            result = await self.db.execute(
                update(User.__table__)
                .where(User.id == user_id)
                .values(status=new_status.value)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("User %s is now %s", user_id, new_status.value)
        return new_status.value


async def ensure_admin(
    db: Database, username: str, password: str, *, bcrypt_rounds: int = 10
) -> bool:
    """Create the admin account unless it exists. Returns True if created."""
    async with db.exclusive():
        existing = await db.query_one(
            select(User.id).where(User.username == username)
        )
        if existing is not None:
            return False
        result = await db.execute(
            insert(User.__table__).values(
                username=username,
                password=hash_password(password, bcrypt_rounds),
                status=UserStatus.ACTIVE.value,
            )
        )
        if not result.inserted_id:
            raise InternalError()
        await db.persist()
    logger.info("Created admin account %s", username)
    return True
