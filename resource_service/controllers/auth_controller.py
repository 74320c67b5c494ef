# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: signup, login and the caller's own profile.
Thin HTTP layer — delegates ALL logic to AuthService.
"""
from fastapi import APIRouter, Depends

from resource_service.core.dependencies import get_auth_service, get_caller
from resource_service.models.domain import Caller
from resource_service.schemas import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserEnvelope,
    UserOut,
    UserUpdateRequest,
)
from resource_service.services.auth_service import AuthService

router = APIRouter(prefix="/v1", tags=["Auth"])


@router.post("/signup", status_code=201, response_model=SignupResponse)
def signup(
    payload: SignupRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Register a new Engineer or Manager."""
    user_id = service.register_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        skills=payload.skills,
        seniority=payload.seniority,
        department=payload.department,
        max_capacity=payload.max_capacity,
    )
    return SignupResponse(message="User registered successfully", user_id=user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    token = service.authenticate(payload.email, payload.password)
    return LoginResponse(message="Login successful", token=token)


@router.get("/auth/me", response_model=UserOut)
def get_me(
    caller: Caller = Depends(get_caller),
    service: AuthService = Depends(get_auth_service),
):
    return UserOut(**service.get_self(caller))


@router.post("/auth/update/me", response_model=UserEnvelope)
def update_me(
    payload: UserUpdateRequest,
    caller: Caller = Depends(get_caller),
    service: AuthService = Depends(get_auth_service),
):
    """Partially update the caller's own profile."""
    patch = payload.model_dump(mode="json", exclude_unset=True)
    user = service.update_self(caller, patch)
    return UserEnvelope(message="User updated successfully", user=UserOut(**user))


@router.get("/auth/engineers", response_model=list[UserOut])
def list_engineers(
    caller: Caller = Depends(get_caller),
    service: AuthService = Depends(get_auth_service),
):
    return [UserOut(**u) for u in service.list_engineers(caller)]
