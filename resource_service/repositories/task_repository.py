# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Task data access.
Read views join the referenced project and engineer with outer joins so
tasks whose project disappeared still come back (with project = None).
"""
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Engine

TASK_SELECT = """
    SELECT t.id, t.engineer_id, t.project_id, t.allocation_percentage,
           t.start_date, t.end_date, t.created_at, t.updated_at,
           p.name AS project_name, p.status AS project_status,
           u.name AS engineer_name, u.email AS engineer_email,
           u.max_capacity AS engineer_max_capacity
    FROM tasks t
    LEFT JOIN projects p ON p.id = t.project_id
    LEFT JOIN users u ON u.id = t.engineer_id
"""


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "engineer_id": row["engineer_id"],
        "project_id": row["project_id"],
        "allocation_percentage": row["allocation_percentage"],
        "start_date": row["start_date"],
        "end_date": row["end_date"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def _project_ref(row):
    if row["project_name"] is None:
        return None
    return {"id": row["project_id"], "name": row["project_name"], "status": row["project_status"]}


def _engineer_ref(row, with_email: bool = False, with_capacity: bool = False):
    if row["engineer_name"] is None:
        return None
    ref: Dict[str, Any] = {"id": row["engineer_id"], "name": row["engineer_name"]}
    if with_email:
        ref["email"] = row["engineer_email"]
    if with_capacity:
        ref["max_capacity"] = row["engineer_max_capacity"]
    return ref



class TaskRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──

    def create(self, task: Dict[str, Any]) -> Dict[str, Any]:
        with self._engine.begin() as conn:
            conn.execute(
                text("""
                    INSERT INTO tasks
                        (id, engineer_id, project_id, allocation_percentage,
                         start_date, end_date, created_at, updated_at)
                    VALUES
                        (:id, :engineer_id, :project_id, :allocation_percentage,
                         :start_date, :end_date, :created_at, :updated_at)
                """),
                task,
            )
        return dict(task)

    def delete_by_project(self, project_id: str) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                text("DELETE FROM tasks WHERE project_id = :pid"), {"pid": project_id}
            )
        return result.rowcount

    # ── Read ──

    def count_by_engineer(self, engineer_id: str) -> int:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM tasks WHERE engineer_id = :eid"),
                {"eid": engineer_id},
            ).scalar_one()

    def list_by_engineer(self, engineer_id: str) -> List[Dict[str, Any]]:
        """Engineer view: each task with its project's name and status."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"{TASK_SELECT} WHERE t.engineer_id = :eid ORDER BY t.created_at, t.id"),
                {"eid": engineer_id},
            ).mappings().all()
        return [{**_row_to_dict(r), "project": _project_ref(r)} for r in rows]

    def list_by_manager(self, manager_id: str) -> List[Dict[str, Any]]:
        """Manager view: tasks across every project the manager owns."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"{TASK_SELECT} WHERE p.manager_id = :mid ORDER BY t.created_at, t.id"),
                {"mid": manager_id},
            ).mappings().all()
        return [
            {
                **_row_to_dict(r),
                "project": _project_ref(r),
                "engineer": _engineer_ref(r, with_capacity=True),
            }
            for r in rows
        ]

    def list_by_project(self, project_id: str) -> List[Dict[str, Any]]:
        """Project view: each task with its engineer's name and email."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"{TASK_SELECT} WHERE t.project_id = :pid ORDER BY t.created_at, t.id"),
                {"pid": project_id},
            ).mappings().all()
        return [{**_row_to_dict(r), "engineer": _engineer_ref(r, with_email=True)} for r in rows]