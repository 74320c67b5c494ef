# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Project CRUD endpoints.
Thin HTTP layer — delegates ALL logic to ProjectService.
"""
from fastapi import APIRouter, Depends

from resource_service.core.dependencies import get_caller, get_project_service
from resource_service.models.domain import Caller
from resource_service.schemas import (
    MessageResponse,
    ProjectCreateRequest,
    ProjectEnvelope,
    ProjectOut,
    ProjectUpdateRequest,
)
from resource_service.services.project_service import ProjectService

router = APIRouter(prefix="/v1/auth", tags=["Projects"])


@router.post("/projects", status_code=201, response_model=ProjectEnvelope)
def create_project(
    payload: ProjectCreateRequest,
    caller: Caller = Depends(get_caller),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project owned by the calling manager."""
    project = service.create_project(caller, payload.model_dump(mode="json"))
    return ProjectEnvelope(message="Project created successfully", project=ProjectOut(**project))


@router.get("/projects", response_model=list[ProjectOut])
def list_projects(
    caller: Caller = Depends(get_caller),
    service: ProjectService = Depends(get_project_service),
):
    """Managers see the projects they own; engineers the ones they are on."""
    return [ProjectOut(**p) for p in service.list_projects(caller)]


@router.get("/projects/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: str,
    caller: Caller = Depends(get_caller),
    service: ProjectService = Depends(get_project_service),
):
    return ProjectOut(**service.get_project(caller, project_id))


@router.post("/update/projects/{project_id}", response_model=ProjectEnvelope)
def update_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    caller: Caller = Depends(get_caller),
    service: ProjectService = Depends(get_project_service),
):
    patch = payload.model_dump(mode="json", exclude_unset=True)
    project = service.update_project(caller, project_id, patch)
    return ProjectEnvelope(message="Project updated successfully", project=ProjectOut(**project))


@router.delete("/delete/projects/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: str,
    caller: Caller = Depends(get_caller),
    service: ProjectService = Depends(get_project_service),
):
    service.delete_project(caller, project_id)
    return MessageResponse(message="Project deleted successfully")
