# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer — users, projects (with membership) and tasks."""
from resource_service.repositories.user_repository import UserRepository
from resource_service.repositories.project_repository import ProjectRepository
from resource_service.repositories.task_repository import TaskRepository

__all__ = ["UserRepository", "ProjectRepository", "TaskRepository"]
