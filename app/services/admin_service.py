"""
Administrator accounts - credential store plus login/registration logic.

Login never reveals whether the username or the password was wrong.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.auth import PasswordHasher
from app.core.exceptions import InvalidCredentials, UsernameConflict
from app.core.tokens import ADMIN_ROLE, TokenService
from app.db.postgres import Database, is_unique_violation
from app.models import Administrator
from app.schemas.schemas import LoginResponse

logger = logging.getLogger(__name__)


class AdminStore:
    """Persistence for Administrator rows."""

    def __init__(self, database: Database):
        self.database = database

    def exists_by_username(self, username: str) -> bool:
        with self.database.session() as db:
            found = db.scalar(
                select(Administrator.id).where(Administrator.username == username).limit(1)
            )
        return found is not None

    def find_by_username(self, username: str) -> Optional[Administrator]:
        with self.database.session() as db:
            return db.scalar(
                select(Administrator).where(Administrator.username == username)
            )

    def add(self, username: str, password_hash: str) -> Administrator:
        """
        Insert a new administrator.

        Raises:
            UsernameConflict: the unique constraint rejected the username
        """
        admin = Administrator(username=username, password_hash=password_hash)
        try:
            with self.database.session() as db:
                db.add(admin)
                db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UsernameConflict() from e
            raise
        return admin


class AuthService:
    """Entry points behind POST /api/auth/login and /api/auth/register."""

    def __init__(self, store: AdminStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def login(self, username: str, password: str) -> LoginResponse:
        admin = self.store.find_by_username(username)
        if admin is None:
            # Spend the same hashing time as a real check
            self.hasher.dummy_verify()
            logger.warning("Failed login for %r", username)
            raise InvalidCredentials()

        if not self.hasher.verify(password, admin.password_hash):
            logger.warning("Failed login for %r", username)
            raise InvalidCredentials()

        token = self.tokens.issue(admin.username, ADMIN_ROLE)
        logger.info("Admin %s logged in", admin.username)
        return LoginResponse(access_token=token, token_type="Bearer", username=admin.username)

    def register(self, username: str, password: str) -> Administrator:
        """
        Create an administrator.

        The existence check only gives a fast answer; the unique constraint
        on admins.username decides concurrent registrations.
        """
        if self.store.exists_by_username(username):
            raise UsernameConflict()

        admin = self.store.add(username, self.hasher.hash(password))
        logger.info("Registered admin %s", username)
        return admin
