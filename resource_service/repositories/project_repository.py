# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Project data access.
Projects live in `projects`; the assignedEngineers set lives in
`project_engineers`, ordered by insertion position.
NO business rules here — pure CRUD.
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from resource_service.core.logging import get_logger

logger = get_logger(__name__)

PROJECT_SELECT = """
    SELECT p.id, p.name, p.description, p.start_date, p.end_date, p.required_skills,
           p.team_size, p.status, p.manager_id, p.created_at, p.updated_at,
           u.name AS manager_name, u.email AS manager_email
    FROM projects p
    LEFT JOIN users u ON u.id = p.manager_id
"""

UPDATABLE_COLUMNS = {
    "name": "name",
    "description": "description",
    "start_date": "start_date",
    "end_date": "end_date",
    "required_skills": "required_skills",
    "team_size": "team_size",
    "status": "status",
}


def _row_to_dict(row, members: List[str]) -> Dict[str, Any]:
    manager = None
    if row["manager_name"] is not None:
        manager = {
            "id": row["manager_id"],
            "name": row["manager_name"],
            "email": row["manager_email"],
        }
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "start_date": row["start_date"],
        "end_date": row["end_date"],
        "required_skills": json.loads(row["required_skills"] or "[]"),
        "team_size": row["team_size"],
        "status": row["status"],
        "manager_id": row["manager_id"],
        "assigned_engineers": members,
        "manager": manager,
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


class ProjectRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──

    def create(self, project: Dict[str, Any]) -> Dict[str, Any]:
        members = list(dict.fromkeys(project.get("assigned_engineers") or []))
        with self._engine.begin() as conn:
            conn.execute(
                text("""
                    INSERT INTO projects
                        (id, name, description, start_date, end_date, required_skills,
                         team_size, status, manager_id, created_at, updated_at)
                    VALUES
                        (:id, :name, :description, :start_date, :end_date, :required_skills,
                         :team_size, :status, :manager_id, :created_at, :updated_at)
                """),
                {
                    "id": project["id"],
                    "name": project["name"],
                    "description": project.get("description"),
                    "start_date": project["start_date"],
                    "end_date": project["end_date"],
                    "required_skills": json.dumps(project.get("required_skills") or []),
                    "team_size": project.get("team_size"),
                    "status": project["status"],
                    "manager_id": project["manager_id"],
                    "created_at": project["created_at"],
                    "updated_at": project["updated_at"],
                },
            )
            self._replace_members(conn, project["id"], members)
            return self._fetch_one(conn, project["id"])

    def update(self, project_id: str, fields: Dict[str, Any],
               assigned_engineers: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        params: Dict[str, Any] = {"id": project_id}
        assignments: List[str] = []
        for attr, value in fields.items():
            column = UPDATABLE_COLUMNS.get(attr)
            if column is None:
                continue
            if attr == "required_skills":
                value = json.dumps(value or [])
            assignments.append(f"{column} = :{attr}")
            params[attr] = value
        if assignments or assigned_engineers is not None:
            assignments.append("updated_at = :updated_at")
            params["updated_at"] = fields.get("updated_at") or _now()

        with self._engine.begin() as conn:
            if assignments:
                conn.execute(
                    text(f"UPDATE projects SET {', '.join(assignments)} WHERE id = :id"),
                    params,
                )
            if assigned_engineers is not None:
                self._replace_members(conn, project_id, list(dict.fromkeys(assigned_engineers)))
            return self._fetch_one(conn, project_id)

    def add_engineer(self, project_id: str, engineer_id: str) -> bool:
        """Append an engineer to the membership set. Returns False if already present."""
        try:
            with self._engine.begin() as conn:
                exists = conn.execute(
                    text("SELECT 1 FROM project_engineers WHERE project_id = :pid AND engineer_id = :eid"),
                    {"pid": project_id, "eid": engineer_id},
                ).first()
                if exists:
                    return False
                conn.execute(
                    text("""
                        INSERT INTO project_engineers (project_id, engineer_id, position)
                        SELECT :pid, :eid, COALESCE(MAX(position), -1) + 1
                        FROM project_engineers WHERE project_id = :pid
                    """),
                    {"pid": project_id, "eid": engineer_id},
                )
                conn.execute(
                    text("UPDATE projects SET updated_at = :ts WHERE id = :pid"),
                    {"ts": _now(), "pid": project_id},
                )
        except IntegrityError:
            # concurrent enrollment of the same engineer
            logger.info("Engineer %s already enrolled in project %s", engineer_id, project_id)
            return False
        return True

    def delete(self, project_id: str) -> bool:
        with self._engine.begin() as conn:
            conn.execute(
                text("DELETE FROM project_engineers WHERE project_id = :id"), {"id": project_id}
            )
            result = conn.execute(
                text("DELETE FROM projects WHERE id = :id"), {"id": project_id}
            )
        return result.rowcount > 0

    # ── Read ──

    def get(self, project_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            return self._fetch_one(conn, project_id)

    def list_by_manager(self, manager_id: str) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"{PROJECT_SELECT} WHERE p.manager_id = :mid ORDER BY p.created_at, p.id"),
                {"mid": manager_id},
            ).mappings().all()
            return self._with_members(conn, rows)

    def list_by_engineer(self, engineer_id: str) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"""
                    {PROJECT_SELECT}
                    JOIN project_engineers pe ON pe.project_id = p.id
                    WHERE pe.engineer_id = :eid
                    ORDER BY p.created_at, p.id
                """),
                {"eid": engineer_id},
            ).mappings().all()
            return self._with_members(conn, rows)

    def count_by_manager(self, manager_id: str) -> int:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM projects WHERE manager_id = :mid"),
                {"mid": manager_id},
            ).scalar_one()

    def count_memberships(self, engineer_id: str) -> int:
        """Number of projects whose assignedEngineers contain the user."""
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM project_engineers WHERE engineer_id = :eid"),
                {"eid": engineer_id},
            ).scalar_one()

    def is_member(self, project_id: str, engineer_id: str) -> bool:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT 1 FROM project_engineers WHERE project_id = :pid AND engineer_id = :eid"),
                {"pid": project_id, "eid": engineer_id},
            ).first() is not None

    # ── Private ──

    def _fetch_one(self, conn: Connection, project_id: str) -> Optional[Dict[str, Any]]:
        row = conn.execute(
            text(f"{PROJECT_SELECT} WHERE p.id = :id"), {"id": project_id}
        ).mappings().first()
        if not row:
            return None
        return _row_to_dict(row, self._load_members(conn, [project_id]).get(project_id, []))

    def _with_members(self, conn: Connection, rows) -> List[Dict[str, Any]]:
        members = self._load_members(conn, [r["id"] for r in rows])
        return [_row_to_dict(r, members.get(r["id"], [])) for r in rows]

    def _load_members(self, conn: Connection, project_ids: List[str]) -> Dict[str, List[str]]:
        if not project_ids:
            return {}
        stmt = text("""
            SELECT project_id, engineer_id FROM project_engineers
            WHERE project_id IN :ids ORDER BY project_id, position
        """).bindparams(bindparam("ids", expanding=True))
        members: Dict[str, List[str]] = {}
        for project_id, engineer_id in conn.execute(stmt, {"ids": project_ids}).fetchall():
            members.setdefault(project_id, []).append(engineer_id)
        return members

    def _replace_members(self, conn: Connection, project_id: str, members: List[str]) -> None:
        conn.execute(
            text("DELETE FROM project_engineers WHERE project_id = :pid"), {"pid": project_id}
        )
        for position, engineer_id in enumerate(members):
            conn.execute(
                text("""
                    INSERT INTO project_engineers (project_id, engineer_id, position)
                    VALUES (:pid, :eid, :pos)
                """),
                {"pid": project_id, "eid": engineer_id, "pos": position},
            )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
