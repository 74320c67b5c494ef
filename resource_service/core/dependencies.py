# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories and services.

The container owns the database engine. It is created by the application
lifespan and disposed on shutdown; handlers reach it through app.state.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from resource_service.core.config import Settings, settings as default_settings
from resource_service.core.errors import MissingTokenError
from resource_service.models.domain import Caller
from resource_service.repositories.project_repository import ProjectRepository
from resource_service.repositories.task_repository import TaskRepository
from resource_service.repositories.user_repository import UserRepository
from resource_service.services.auth_service import AuthService
from resource_service.services.project_service import ProjectService
from resource_service.services.task_service import TaskService
from resource_service.services.token_service import TokenService

_bearer = HTTPBearer(auto_error=False)


class ServiceContainer:
    """Repositories and services bound to one engine."""

    def __init__(self, engine: Engine, config: Settings = default_settings):
        self.engine = engine

        # ── Repositories ──
        self.user_repo = UserRepository(engine)
        self.project_repo = ProjectRepository(engine)
        self.task_repo = TaskRepository(engine)

        # ── Services ──
        self.token_service = TokenService(
            secret=config.JWT_KEY,
            algorithm=config.JWT_ALGORITHM,
            ttl_hours=config.TOKEN_TTL_HOURS,
        )
        self.auth_service = AuthService(
            self.user_repo, self.token_service, self.project_repo, self.task_repo,
            bcrypt_rounds=config.BCRYPT_ROUNDS,
        )
        self.project_service = ProjectService(self.project_repo, self.user_repo, self.task_repo)
        self.task_service = TaskService(
            self.task_repo, self.project_repo, self.user_repo,
            auto_enroll=config.AUTO_ENROLL_ON_ASSIGN,
        )

    def dispose(self) -> None:
        self.engine.dispose()


# ── FastAPI dependency functions ──

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    return container.auth_service


def get_project_service(container: ServiceContainer = Depends(get_container)) -> ProjectService:
    return container.project_service


def get_task_service(container: ServiceContainer = Depends(get_container)) -> TaskService:
    return container.task_service


def get_user_repo(container: ServiceContainer = Depends(get_container)) -> UserRepository:
    return container.user_repo


def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    container: ServiceContainer = Depends(get_container),
) -> Caller:
    """Verify the bearer credential and return the caller's identity."""
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    return container.token_service.verify(credentials.credentials)
