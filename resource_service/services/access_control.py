# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Access-control rules — the single place where role and ownership checks live.

Role gates:   some actions are open to Managers only (MANAGER_ONLY).
Ownership:    a Manager owns the projects they created; only the owner may
              mutate a project or read its task list.
Visibility:   a project is visible to its owner and to engineers in its
              assignedEngineers set.

A missing project and a foreign project raise different error kinds so they
can be told apart in logs and tests, but both answer 404 with the same
message so callers cannot discover which project ids exist.

Pure Python logic — no FastAPI imports, no database access.
"""
from enum import Enum
from typing import Any, Dict, Optional

from resource_service.core.errors import (
    ForbiddenError,
    ProjectAccessDeniedError,
    ProjectNotFoundError,
)
from resource_service.models.domain import Caller, Role


class Action(str, Enum):
    LIST_ENGINEERS = "list_engineers"
    CREATE_PROJECT = "create_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    ASSIGN_TASK = "assign_task"
    VIEW_PROJECT_TASKS = "view_project_tasks"


MANAGER_ONLY: dict[Action, str] = {
    Action.LIST_ENGINEERS: "Only managers can view engineers",
    Action.CREATE_PROJECT: "Only managers can create projects",
    Action.UPDATE_PROJECT: "Only managers can update projects",
    Action.DELETE_PROJECT: "Only managers can delete projects",
    Action.ASSIGN_TASK: "Only managers can assign tasks",
    Action.VIEW_PROJECT_TASKS: "Only managers can view project tasks",
}


def authorize(caller: Caller, action: Action) -> None:
    """Raise ForbiddenError if the caller's role may not perform the action."""
    message = MANAGER_ONLY.get(action)
    if message is not None and caller.role is not Role.MANAGER:
        raise ForbiddenError(message)


def is_owner(caller: Caller, project: Dict[str, Any]) -> bool:
    return caller.role is Role.MANAGER and project["manager_id"] == caller.user_id


def is_member(caller: Caller, project: Dict[str, Any]) -> bool:
    return caller.user_id in project.get("assigned_engineers", [])


def can_view(caller: Caller, project: Optional[Dict[str, Any]]) -> bool:
    if project is None:
        return False
    return project["manager_id"] == caller.user_id or is_member(caller, project)


def ensure_owner(caller: Caller, project: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if project is None:
        raise ProjectNotFoundError()
    if not is_owner(caller, project):
        raise ProjectAccessDeniedError()
    return project


def ensure_visible(caller: Caller, project: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if project is None:
        raise ProjectNotFoundError()
    if not can_view(caller, project):
        raise ProjectAccessDeniedError()
    return project
