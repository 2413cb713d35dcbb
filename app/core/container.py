"""
Composition root - builds every long-lived collaborator once at startup.

Routes reach these through request.app.state.container.
"""

from dataclasses import dataclass

from fastapi import Request

from app.core.auth import PasswordHasher
from app.core.config import Settings
from app.core.tokens import TokenService
from app.db.postgres import Database
from app.services.admin_service import AdminStore, AuthService
from app.services.student_service import StudentService, StudentStore


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    database: Database
    token_service: TokenService
    auth_service: AuthService
    student_service: StudentService


def build_container(settings: Settings) -> AppContainer:
    database = Database(settings.sqlalchemy_url, echo=settings.debug)
    token_service = TokenService(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )
    auth_service = AuthService(
        store=AdminStore(database),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=token_service,
    )
    student_service = StudentService(StudentStore(database))
    return AppContainer(
        settings=settings,
        database=database,
        token_service=token_service,
        auth_service=auth_service,
        student_service=student_service,
    )


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.container.auth_service


def get_student_service(request: Request) -> StudentService:
    return request.app.state.container.student_service
