# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Task allocation.

Assigning a task to an engineer who is not yet on the project enrolls them
(auto_enroll=True). With auto_enroll=False the assignment is rejected
instead. Enrollment and task insert are two separate writes.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from resource_service.core.errors import EngineerNotAssignedError, ForbiddenError
from resource_service.core.logging import get_logger
from resource_service.metrics import AUTO_ENROLLMENTS, TASKS_ASSIGNED
from resource_service.models.domain import Caller, Role, to_iso
from resource_service.repositories.project_repository import ProjectRepository
from resource_service.repositories.task_repository import TaskRepository
from resource_service.repositories.user_repository import UserRepository
from resource_service.services import access_control
from resource_service.services.access_control import Action
from resource_service.services.project_service import ensure_engineers

logger = get_logger(__name__)


class TaskService:
    """Business logic for allocating engineers' effort to projects."""

    def __init__(self, task_repo: TaskRepository, project_repo: ProjectRepository,
                 user_repo: UserRepository, auto_enroll: bool = True):
        self._tasks = task_repo
        self._projects = project_repo
        self._users = user_repo
        self._auto_enroll = auto_enroll

    # ── Commands ──

    def assign_task(self, caller: Caller, engineer_id: str, project_id: str,
                    allocation_percentage: float,
                    start_date: Optional[str] = None,
                    end_date: Optional[str] = None) -> Dict[str, Any]:
        access_control.authorize(caller, Action.ASSIGN_TASK)
        project = access_control.ensure_owner(caller, self._projects.get(project_id))
        ensure_engineers(self._users, [engineer_id])

        if engineer_id not in project["assigned_engineers"]:
            if not self._auto_enroll:
                raise EngineerNotAssignedError()
            if self._projects.add_engineer(project_id, engineer_id):
                AUTO_ENROLLMENTS.inc()
                logger.info("Engineer %s auto-enrolled in project %s", engineer_id, project_id,
                            extra={"project_id": project_id, "engineer_id": engineer_id})

        now = datetime.now(timezone.utc).isoformat()
        task = self._tasks.create({
            "id": str(uuid.uuid4()),
            "engineer_id": engineer_id,
            "project_id": project_id,
            "allocation_percentage": allocation_percentage,
            "start_date": to_iso(start_date),
            "end_date": to_iso(end_date),
            "created_at": now,
            "updated_at": now,
        })

        TASKS_ASSIGNED.inc()
        logger.info("Task assigned id=%s project=%s engineer=%s allocation=%s",
                    task["id"], project_id, engineer_id, allocation_percentage,
                    extra={"user_id": caller.user_id, "project_id": project_id,
                           "engineer_id": engineer_id})
        return task

    # ── Queries ──

    def list_tasks_for_caller(self, caller: Caller) -> List[Dict[str, Any]]:
        if caller.role is Role.ENGINEER:
            return self._tasks.list_by_engineer(caller.user_id)
        if caller.role is Role.MANAGER:
            return self._tasks.list_by_manager(caller.user_id)
        raise ForbiddenError("Unauthorized")

    def list_tasks_for_project(self, caller: Caller, project_id: str) -> List[Dict[str, Any]]:
        access_control.authorize(caller, Action.VIEW_PROJECT_TASKS)
        access_control.ensure_owner(caller, self._projects.get(project_id))
        return self._tasks.list_by_project(project_id)
