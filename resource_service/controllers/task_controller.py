# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Task assignment and task listings.
Thin HTTP layer — delegates ALL logic to TaskService.
"""
from fastapi import APIRouter, Depends

from resource_service.core.dependencies import get_caller, get_task_service
from resource_service.models.domain import Caller
from resource_service.schemas import TaskCreateRequest, TaskEnvelope, TaskOut
from resource_service.services.task_service import TaskService

router = APIRouter(prefix="/v1/auth", tags=["Tasks"])


@router.post("/tasks", status_code=201, response_model=TaskEnvelope)
def assign_task(
    payload: TaskCreateRequest,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    """Allocate an engineer to a project the caller owns."""
    task = service.assign_task(caller, **payload.model_dump(mode="json"))
    return TaskEnvelope(message="Task assigned successfully", task=TaskOut(**task))


@router.get("/tasks", response_model=list[TaskOut])
def list_tasks(
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    return [TaskOut(**t) for t in service.list_tasks_for_caller(caller)]


@router.get("/projects/{project_id}/tasks", response_model=list[TaskOut])
def list_project_tasks(
    project_id: str,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
):
    return [TaskOut(**t) for t in service.list_tasks_for_project(caller, project_id)]
