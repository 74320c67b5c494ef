# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: identity — signup, login, self-service profile, engineer directory.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from resource_service.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from resource_service.core.logging import get_logger
from resource_service.core.security import hash_password, verify_password
from resource_service.metrics import LOGINS_TOTAL, USERS_REGISTERED
from resource_service.models.domain import Caller, Role, Seniority, enum_value
from resource_service.repositories.project_repository import ProjectRepository
from resource_service.repositories.task_repository import TaskRepository
from resource_service.repositories.user_repository import UserRepository
from resource_service.services import access_control
from resource_service.services.access_control import Action
from resource_service.services.token_service import TokenService

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

# attribute -> wire name
USER_FIELDS = {
    "name": "userName",
    "email": "userEmail",
    "password": "userPassword",
    "role": "userRole",
    "skills": "userSkills",
    "seniority": "userSeniority",
    "department": "userDepartment",
    "max_capacity": "maxCapacity",
}

# an explicit null clears these
CLEARABLE_FIELDS = ("skills", "seniority", "department", "max_capacity")


def public_view(user: Dict[str, Any]) -> Dict[str, Any]:
    """User record without the password hash."""
    return {k: v for k, v in user.items() if k != "password_hash"}


def _check_password(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"userPassword must be at most {MAX_PASSWORD_BYTES} bytes")


class AuthService:
    """Identity store operations and credential issuance."""

    def __init__(self, user_repo: UserRepository, token_service: TokenService,
                 project_repo: ProjectRepository, task_repo: TaskRepository,
                 bcrypt_rounds: Optional[int] = None):
        self._users = user_repo
        self._tokens = token_service
        self._projects = project_repo
        self._tasks = task_repo
        self._rounds = bcrypt_rounds

    # ── Commands ──

    def register_user(self, name: str, email: str, password: str, role: str,
                      skills: Optional[List[str]] = None,
                      seniority: Optional[str] = None,
                      department: Optional[str] = None,
                      max_capacity: Optional[float] = None) -> str:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email or not password or not role:
            raise ValidationError("Required fields missing")
        role_value = enum_value(Role, role, "userRole")
        seniority_value = enum_value(Seniority, seniority, "userSeniority")
        _check_password(password)

        if self._users.email_exists(email):
            raise DuplicateEmailError()

        now = datetime.now(timezone.utc).isoformat()
        user = {
            "id": str(uuid.uuid4()),
            "name": name,
            "email": email,
            "password_hash": hash_password(password, self._rounds),
            "role": role_value,
            "skills": list(skills or []),
            "seniority": seniority_value,
            "max_capacity": float(max_capacity) if max_capacity is not None else None,
            "department": department,
            "created_at": now,
            "updated_at": now,
        }
        self._users.create(user)

        USERS_REGISTERED.labels(role=role_value).inc()
        logger.info("User registered id=%s role=%s", user["id"], role_value,
                    extra={"user_id": user["id"]})
        return user["id"]

    def authenticate(self, email: str, password: str) -> str:
        user = self._users.get_by_email((email or "").strip().lower())
        if user is None:
            LOGINS_TOTAL.labels(result="unknown_user").inc()
            raise NotFoundError("User not found")
        if not verify_password(password or "", user["password_hash"]):
            LOGINS_TOTAL.labels(result="bad_password").inc()
            logger.warning("Login rejected: bad password for user id=%s", user["id"],
                           extra={"user_id": user["id"]})
            raise InvalidCredentialsError("Invalid credentials")

        LOGINS_TOTAL.labels(result="success").inc()
        logger.info("Login succeeded id=%s", user["id"], extra={"user_id": user["id"]})
        return self._tokens.issue(user)

    def update_self(self, caller: Caller, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update to the caller's own record.

        Absent keys are left alone; an explicit null clears the optional
        profile fields and is rejected for the required ones.
        """
        fields: Dict[str, Any] = {}
        for key, value in patch.items():
            if key not in USER_FIELDS:
                raise ValidationError(f"Unknown field '{key}'")
            if value is None:
                if key not in CLEARABLE_FIELDS:
                    raise ValidationError(f"{USER_FIELDS[key]} cannot be null")
                fields[key] = [] if key == "skills" else None
            elif key == "role":
                fields["role"] = enum_value(Role, value, "userRole")
            elif key == "seniority":
                fields["seniority"] = enum_value(Seniority, value, "userSeniority")
            elif key == "password":
                _check_password(value)
                fields["password_hash"] = hash_password(value, self._rounds)
            elif key == "email":
                fields["email"] = value.strip().lower()
            else:
                fields[key] = value

        if not fields:
            return self.get_self(caller)

        if "role" in fields:
            self._check_role_change(self._require_user(caller.user_id), fields["role"])

        if "email" in fields:
            existing = self._users.get_by_email(fields["email"])
            if existing is not None and existing["id"] != caller.user_id:
                raise DuplicateEmailError("Email already in use")

        fields["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = self._users.update(caller.user_id, fields)
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("User updated id=%s fields=%s", caller.user_id,
                    sorted(k for k in fields if k not in ("updated_at", "password_hash")),
                    extra={"user_id": caller.user_id})
        return public_view(updated)

    def _check_role_change(self, user: Dict[str, Any], new_role: str) -> None:
        """Projects reference managers as owners and engineers as members."""
        if new_role == user["role"]:
            return
        if user["role"] == Role.MANAGER.value and self._projects.count_by_manager(user["id"]):
            raise ValidationError("Cannot change role while managing projects")
        if user["role"] == Role.ENGINEER.value and (
            self._projects.count_memberships(user["id"])
            or self._tasks.count_by_engineer(user["id"])
        ):
            raise ValidationError("Cannot change role while assigned to projects or tasks")

    def _require_user(self, user_id: str) -> Dict[str, Any]:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # ── Queries ──

    def get_self(self, caller: Caller) -> Dict[str, Any]:
        return public_view(self._require_user(caller.user_id))

    def list_engineers(self, caller: Caller) -> List[Dict[str, Any]]:
        access_control.authorize(caller, Action.LIST_ENGINEERS)
        return [public_view(u) for u in self._users.list_by_role(Role.ENGINEER.value)]
