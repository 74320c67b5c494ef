# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
Attributes are snake_case; the wire uses the camelCase aliases.
"""
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from resource_service.models.domain import (
    DateValue,
    ProjectStatus,
    Role,
    Seniority,
    dates_in_order,
)

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Text = Annotated[str, StringConstraints(strip_whitespace=True, max_length=5000)]
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
Password = Annotated[str, StringConstraints(min_length=1, max_length=72)]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# ── Users ──

class SignupRequest(CamelModel):
    name: Name = Field(..., alias="userName")
    email: EmailStr = Field(..., alias="userEmail")
    password: Password = Field(..., alias="userPassword")
    role: Role = Field(..., alias="userRole")
    skills: list[Name] = Field(default_factory=list, alias="userSkills")
    seniority: Optional[Seniority] = Field(None, alias="userSeniority")
    department: Optional[Name] = Field(None, alias="userDepartment")
    max_capacity: Optional[float] = Field(None, alias="maxCapacity", ge=0)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(CamelModel):
    email: str = Field(..., alias="userEmail", min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdateRequest(CamelModel):
    """Partial update model for POST /v1/auth/update/me."""
    name: Optional[Name] = Field(None, alias="userName")
    email: Optional[EmailStr] = Field(None, alias="userEmail")
    password: Optional[Password] = Field(None, alias="userPassword")
    role: Optional[Role] = Field(None, alias="userRole")
    skills: Optional[list[Name]] = Field(None, alias="userSkills")
    seniority: Optional[Seniority] = Field(None, alias="userSeniority")
    department: Optional[Name] = Field(None, alias="userDepartment")
    max_capacity: Optional[float] = Field(None, alias="maxCapacity", ge=0)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v


class UserOut(CamelModel):
    id: str
    name: str = Field(..., alias="userName")
    email: str = Field(..., alias="userEmail")
    role: Role = Field(..., alias="userRole")
    skills: list[str] = Field(default_factory=list, alias="userSkills")
    seniority: Optional[Seniority] = Field(None, alias="userSeniority")
    department: Optional[str] = Field(None, alias="userDepartment")
    max_capacity: Optional[float] = Field(None, alias="maxCapacity")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class SignupResponse(CamelModel):
    message: str
    user_id: str = Field(..., alias="userId")


class LoginResponse(BaseModel):
    message: str
    token: str


class UserEnvelope(BaseModel):
    message: str
    user: UserOut


# ── Projects ──

class ProjectCreateRequest(CamelModel):
    name: Name = Field(..., alias="projectName")
    description: Optional[Text] = Field(None, alias="projectDescription")
    start_date: DateValue = Field(..., alias="startDate")
    end_date: DateValue = Field(..., alias="endDate")
    required_skills: list[Name] = Field(default_factory=list, alias="requiredSkills")
    team_size: Optional[int] = Field(None, alias="teamSize", ge=0)
    status: ProjectStatus = Field(ProjectStatus.PLANNING, alias="projectStatus")
    assigned_engineers: list[Identifier] = Field(default_factory=list, alias="assignedEngineers")

    @model_validator(mode="after")
    def check_date_order(self):
        if not dates_in_order(self.start_date, self.end_date):
            raise ValueError("endDate must not be before startDate")
        return self


class ProjectUpdateRequest(CamelModel):
    """Partial update model for POST /v1/auth/update/projects/{id}."""
    name: Optional[Name] = Field(None, alias="projectName")
    description: Optional[Text] = Field(None, alias="projectDescription")
    start_date: Optional[DateValue] = Field(None, alias="startDate")
    end_date: Optional[DateValue] = Field(None, alias="endDate")
    required_skills: Optional[list[Name]] = Field(None, alias="requiredSkills")
    team_size: Optional[int] = Field(None, alias="teamSize", ge=0)
    status: Optional[ProjectStatus] = Field(None, alias="projectStatus")
    assigned_engineers: Optional[list[Identifier]] = Field(None, alias="assignedEngineers")

    @model_validator(mode="after")
    def check_date_order(self):
        if not dates_in_order(self.start_date, self.end_date):
            raise ValueError("endDate must not be before startDate")
        return self


class ManagerRef(CamelModel):
    id: str
    name: str = Field(..., alias="userName")
    email: str = Field(..., alias="userEmail")


class ProjectOut(CamelModel):
    id: str
    name: str = Field(..., alias="projectName")
    description: Optional[str] = Field(None, alias="projectDescription")
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    required_skills: list[str] = Field(default_factory=list, alias="requiredSkills")
    team_size: Optional[int] = Field(None, alias="teamSize")
    status: ProjectStatus = Field(..., alias="projectStatus")
    manager_id: str = Field(..., alias="managerId")
    assigned_engineers: list[str] = Field(default_factory=list, alias="assignedEngineers")
    manager: Optional[ManagerRef] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class ProjectEnvelope(BaseModel):
    message: str
    project: ProjectOut


# ── Tasks ──

class TaskCreateRequest(CamelModel):
    engineer_id: Identifier = Field(..., alias="engineerId")
    project_id: Identifier = Field(..., alias="projectId")
    allocation_percentage: float = Field(..., alias="allocationPercentage", ge=0, le=100)
    start_date: Optional[DateValue] = Field(None, alias="startDate")
    end_date: Optional[DateValue] = Field(None, alias="endDate")

    @model_validator(mode="after")
    def check_date_order(self):
        if not dates_in_order(self.start_date, self.end_date):
            raise ValueError("endDate must not be before startDate")
        return self


class TaskProjectRef(CamelModel):
    id: str
    name: str = Field(..., alias="projectName")
    status: ProjectStatus = Field(..., alias="projectStatus")


class TaskEngineerRef(CamelModel):
    id: str
    name: str = Field(..., alias="userName")
    email: Optional[str] = Field(None, alias="userEmail")
    max_capacity: Optional[float] = Field(None, alias="maxCapacity")


class TaskOut(CamelModel):
    id: str
    engineer_id: str = Field(..., alias="engineerId")
    project_id: str = Field(..., alias="projectId")
    allocation_percentage: Optional[float] = Field(None, alias="allocationPercentage")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    project: Optional[TaskProjectRef] = None
    engineer: Optional[TaskEngineerRef] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class TaskEnvelope(BaseModel):
    message: str
    task: TaskOut
