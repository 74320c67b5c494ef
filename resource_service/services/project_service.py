# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Project management — ownership-gated CRUD and membership.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from resource_service.core.errors import ForbiddenError, ValidationError
from resource_service.core.logging import get_logger
from resource_service.metrics import PROJECTS_CREATED, PROJECTS_DELETED
from resource_service.models.domain import (
    Caller,
    ProjectStatus,
    Role,
    dates_in_order,
    enum_value,
    to_iso,
)
from resource_service.repositories.project_repository import ProjectRepository
from resource_service.repositories.task_repository import TaskRepository
from resource_service.repositories.user_repository import UserRepository
from resource_service.services import access_control
from resource_service.services.access_control import Action

logger = get_logger(__name__)

# attribute -> wire name
PATCHABLE_FIELDS = {
    "name": "projectName",
    "description": "projectDescription",
    "start_date": "startDate",
    "end_date": "endDate",
    "required_skills": "requiredSkills",
    "team_size": "teamSize",
    "status": "projectStatus",
}

# an explicit null clears these
CLEARABLE_FIELDS = ("description", "required_skills", "team_size")


def ensure_engineers(user_repo: UserRepository, engineer_ids: List[str]) -> None:
    """Every id must reference an existing user whose role is Engineer."""
    if not engineer_ids:
        return
    found = user_repo.get_many(engineer_ids)
    invalid = [
        eid for eid in dict.fromkeys(engineer_ids)
        if eid not in found or found[eid]["role"] != Role.ENGINEER.value
    ]
    if invalid:
        raise ValidationError(f"Not engineers: {', '.join(invalid)}")


class ProjectService:
    """Business logic for projects owned by managers."""

    def __init__(self, project_repo: ProjectRepository, user_repo: UserRepository,
                 task_repo: TaskRepository):
        self._projects = project_repo
        self._users = user_repo
        self._tasks = task_repo

    # ── Commands ──

    def create_project(self, caller: Caller, fields: Dict[str, Any]) -> Dict[str, Any]:
        access_control.authorize(caller, Action.CREATE_PROJECT)
        if not fields.get("name") or not fields.get("start_date") or not fields.get("end_date"):
            raise ValidationError("Required fields missing")
        if not dates_in_order(fields["start_date"], fields["end_date"]):
            raise ValidationError("endDate must not be before startDate")

        members = list(fields.get("assigned_engineers") or [])
        ensure_engineers(self._users, members)

        now = datetime.now(timezone.utc).isoformat()
        status = fields.get("status") or ProjectStatus.PLANNING
        project = self._projects.create({
            "id": str(uuid.uuid4()),
            "name": fields["name"],
            "description": fields.get("description"),
            "start_date": to_iso(fields["start_date"]),
            "end_date": to_iso(fields["end_date"]),
            "required_skills": list(fields.get("required_skills") or []),
            "team_size": fields.get("team_size"),
            "status": enum_value(ProjectStatus, status, "projectStatus"),
            "manager_id": caller.user_id,
            "assigned_engineers": members,
            "created_at": now,
            "updated_at": now,
        })

        PROJECTS_CREATED.inc()
        logger.info("Project created id=%s manager=%s members=%d",
                    project["id"], caller.user_id, len(members),
                    extra={"user_id": caller.user_id, "project_id": project["id"]})
        return project

    def update_project(self, caller: Caller, project_id: str,
                       patch: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update. Absent keys are kept; an explicit null clears
        description, teamSize, requiredSkills or assignedEngineers."""
        access_control.authorize(caller, Action.UPDATE_PROJECT)
        current = access_control.ensure_owner(caller, self._projects.get(project_id))

        fields: Dict[str, Any] = {}
        for key in PATCHABLE_FIELDS:
            if key not in patch:
                continue
            value = patch[key]
            if value is None:
                if key not in CLEARABLE_FIELDS:
                    raise ValidationError(f"{PATCHABLE_FIELDS[key]} cannot be null")
                fields[key] = [] if key == "required_skills" else None
            else:
                fields[key] = value
        if "status" in fields:
            fields["status"] = enum_value(ProjectStatus, fields["status"], "projectStatus")
        for key in ("start_date", "end_date"):
            if key in fields:
                fields[key] = to_iso(fields[key])
        if not dates_in_order(fields.get("start_date", current["start_date"]),
                              fields.get("end_date", current["end_date"])):
            raise ValidationError("endDate must not be before startDate")

        members = None
        if "assigned_engineers" in patch:
            members = list(patch["assigned_engineers"] or [])
            ensure_engineers(self._users, members)

        if not fields and members is None:
            return current

        fields["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = self._projects.update(project_id, fields, members)
        logger.info("Project updated id=%s fields=%s", project_id,
                    sorted(k for k in fields if k != "updated_at"),
                    extra={"user_id": caller.user_id, "project_id": project_id})
        return updated

    def delete_project(self, caller: Caller, project_id: str) -> None:
        access_control.authorize(caller, Action.DELETE_PROJECT)
        access_control.ensure_owner(caller, self._projects.get(project_id))

        self._projects.delete(project_id)
        removed = self._tasks.delete_by_project(project_id)
        PROJECTS_DELETED.inc()
        logger.info("Project deleted id=%s tasks_removed=%d", project_id, removed,
                    extra={"user_id": caller.user_id, "project_id": project_id})

    # ── Queries ──

    def list_projects(self, caller: Caller) -> List[Dict[str, Any]]:
        if caller.role is Role.MANAGER:
            return self._projects.list_by_manager(caller.user_id)
        if caller.role is Role.ENGINEER:
            return self._projects.list_by_engineer(caller.user_id)
        raise ForbiddenError("Unauthorized")

    def get_project(self, caller: Caller, project_id: str) -> Dict[str, Any]:
        return access_control.ensure_visible(caller, self._projects.get(project_id))
