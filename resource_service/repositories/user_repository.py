# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: User data access.
Encapsulates all read/write operations on the users table.
NO business rules here — pure CRUD.
"""
import json
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from resource_service.core.errors import DuplicateEmailError

USER_COLS = (
    "id, name, email, password_hash, role, skills, seniority, "
    "max_capacity, department, created_at, updated_at"
)

# attribute name -> column name for partial updates
UPDATABLE_COLUMNS = {
    "name": "name",
    "email": "email",
    "password_hash": "password_hash",
    "role": "role",
    "skills": "skills",
    "seniority": "seniority",
    "max_capacity": "max_capacity",
    "department": "department",
}


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "email": row["email"],
        "password_hash": row["password_hash"],
        "role": row["role"],
        "skills": json.loads(row["skills"] or "[]"),
        "seniority": row["seniority"],
        "max_capacity": row["max_capacity"],
        "department": row["department"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


class UserRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──

    def create(self, user: Dict[str, Any]) -> Dict[str, Any]:
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text(f"""
                        INSERT INTO users ({USER_COLS})
                        VALUES (:id, :name, :email, :password_hash, :role, :skills,
                                :seniority, :max_capacity, :department, :created_at, :updated_at)
                    """),
                    {**user, "skills": json.dumps(user.get("skills") or [])},
                )
        except IntegrityError:
            raise DuplicateEmailError()
        return dict(user)

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        params: Dict[str, Any] = {"id": user_id}
        assignments: List[str] = []
        for attr, value in fields.items():
            column = UPDATABLE_COLUMNS.get(attr)
            if column is None:
                continue
            if attr == "skills":
                value = json.dumps(value or [])
            assignments.append(f"{column} = :{attr}")
            params[attr] = value
        if "updated_at" in fields:
            assignments.append("updated_at = :updated_at")
            params["updated_at"] = fields["updated_at"]

        try:
            with self._engine.begin() as conn:
                if assignments:
                    conn.execute(
                        text(f"UPDATE users SET {', '.join(assignments)} WHERE id = :id"),
                        params,
                    )
                row = conn.execute(
                    text(f"SELECT {USER_COLS} FROM users WHERE id = :id"),
                    {"id": user_id},
                ).mappings().first()
        except IntegrityError:
            raise DuplicateEmailError()
        return _row_to_dict(row) if row else None

    # ── Read ──

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {USER_COLS} FROM users WHERE id = :id"),
                {"id": user_id},
            ).mappings().first()
        return _row_to_dict(row) if row else None

    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {USER_COLS} FROM users WHERE email = :email"),
                {"email": email},
            ).mappings().first()
        return _row_to_dict(row) if row else None

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        stmt = text(f"SELECT {USER_COLS} FROM users WHERE id IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt, {"ids": ids}).mappings().all()
        return {r["id"]: _row_to_dict(r) for r in rows}

    def list_by_role(self, role: str) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {USER_COLS} FROM users WHERE role = :role ORDER BY name, created_at"),
                {"role": role},
            ).mappings().all()
        return [_row_to_dict(r) for r in rows]

    def email_exists(self, email: str) -> bool:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT 1 FROM users WHERE email = :email"), {"email": email}
            ).first() is not None

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))
