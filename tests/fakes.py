"""In-memory DatabasePort used by the service and router tests."""

import uuid
from datetime import datetime
from typing import Any

from marketplace.domain.enums import SubmissionKind
from marketplace.ports.database_port import DatabasePort

_SUBMISSION_TABLES = {
    SubmissionKind.REFERENCE: "worker_references",
    SubmissionKind.ID_DOCUMENT: "id_verifications",
    SubmissionKind.QUALIFICATION: "qualification_uploads",
}


class InMemoryDatabase(DatabasePort):
    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {
            name: {}
            for name in (
                "profiles",
                "worker_profiles",
                "business_profiles",
                "test_attempts",
                "test_sessions",
                "worker_references",
                "id_verifications",
                "qualification_uploads",
                "test_questions",
            )
        }
        self.admin_user_ids: set[str] = set()

    # ── Seeding helpers ───────────────────────────────────────

    def add(self, table: str, **row: Any) -> dict[str, Any]:
        row.setdefault("id", str(uuid.uuid4()))
        row["id"] = str(row["id"])
        self.tables[table][row["id"]] = row
        return row

    def add_worker(self, roles: list[str] | None = None, **row: Any) -> dict[str, Any]:
        row.setdefault("name", "Jamie Doe")
        row.setdefault("approval_status", "pending")
        return self.add("worker_profiles", roles=roles or [], **row)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return list(self.tables[table].values())

    def _newest_first(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [dict(r) for r in reversed(rows)]

    # ── Accounts ──────────────────────────────────────────────

    async def get_profile_by_user(self, user_id: str) -> dict[str, Any] | None:
        for row in self.rows("profiles"):
            if row.get("user_id") == user_id:
                return dict(row)
        return None

    async def is_admin(self, user_id: str) -> bool:
        return user_id in self.admin_user_ids

    async def get_worker(self, worker_id: str) -> dict[str, Any] | None:
        row = self.tables["worker_profiles"].get(str(worker_id))
        return dict(row) if row else None

    async def get_worker_by_profile(self, profile_id: str) -> dict[str, Any] | None:
        for row in self.rows("worker_profiles"):
            if str(row.get("profile_id")) == str(profile_id):
                return dict(row)
        return None

    async def list_workers(self, approval_status: str | None = None) -> list[dict[str, Any]]:
        rows = [
            r for r in self.rows("worker_profiles")
            if approval_status is None or r.get("approval_status") == approval_status
        ]
        return self._newest_first(rows)

    async def _update(self, table: str, row_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        row = self.tables[table].get(str(row_id))
        if row is None:
            return None
        row.update(data)
        return dict(row)

    async def update_worker(self, worker_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        return await self._update("worker_profiles", worker_id, data)

    async def update_business(self, business_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        return await self._update("business_profiles", business_id, data)

    # ── Test attempts ─────────────────────────────────────────

    async def list_test_attempts(self, worker_id: str) -> list[dict[str, Any]]:
        rows = [
            r for r in self.rows("test_attempts")
            if str(r["worker_profile_id"]) == str(worker_id)
        ]
        return self._newest_first(rows)

    async def insert_test_attempts(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [dict(self.add("test_attempts", **dict(r))) for r in rows]

    async def delete_forced_attempts(self, worker_id: str) -> int:
        doomed = [
            r["id"] for r in self.rows("test_attempts")
            if str(r["worker_profile_id"]) == str(worker_id) and r.get("forced_by")
        ]
        for row_id in doomed:
            del self.tables["test_attempts"][row_id]
        return len(doomed)

    # ── Test sessions ─────────────────────────────────────────

    async def create_test_session(self, data: dict[str, Any]) -> dict[str, Any]:
        return dict(self.add("test_sessions", **data))

    async def get_open_test_session(self, worker_id: str, role: str) -> dict[str, Any] | None:
        for row in self._newest_first(self.rows("test_sessions")):
            if (
                str(row["worker_profile_id"]) == str(worker_id)
                and row["role"] == role
                and row.get("submitted_at") is None
            ):
                return row
        return None

    async def close_test_session(
        self, session_id: str, submitted_at: datetime
    ) -> dict[str, Any] | None:
        row = self.tables["test_sessions"].get(str(session_id))
        if row is None or row.get("submitted_at") is not None:
            return None
        row["submitted_at"] = submitted_at.isoformat()
        return dict(row)

    # ── Submissions ───────────────────────────────────────────

    async def list_references(self, worker_id: str) -> list[dict[str, Any]]:
        rows = [
            r for r in self.rows("worker_references")
            if str(r["worker_profile_id"]) == str(worker_id)
        ]
        return self._newest_first(rows)

    async def list_id_verifications(self, worker_id: str) -> list[dict[str, Any]]:
        rows = [
            r for r in self.rows("id_verifications")
            if str(r["worker_profile_id"]) == str(worker_id)
        ]
        return self._newest_first(rows)

    async def create_submission(self, kind: SubmissionKind, data: dict[str, Any]) -> dict[str, Any]:
        return dict(self.add(_SUBMISSION_TABLES[kind], **data))

    async def get_submission(self, kind: SubmissionKind, submission_id: str) -> dict[str, Any] | None:
        row = self.tables[_SUBMISSION_TABLES[kind]].get(str(submission_id))
        return dict(row) if row else None

    async def list_submissions(self, kind: SubmissionKind, status: str | None = None) -> list[dict[str, Any]]:
        rows = []
        for r in self.rows(_SUBMISSION_TABLES[kind]):
            if status is not None and r.get("status") != status:
                continue
            worker = self.tables["worker_profiles"].get(str(r["worker_profile_id"]), {})
            rows.append({**r, "worker_profiles": {"name": worker.get("name")}})
        return self._newest_first(rows)

    async def update_submission(
        self,
        kind: SubmissionKind,
        submission_id: str,
        data: dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        table = _SUBMISSION_TABLES[kind]
        row = self.tables[table].get(str(submission_id))
        if row is None:
            return None
        if expected_updated_at is not None:
            current = row.get("updated_at")
            if current is None or datetime.fromisoformat(current) != expected_updated_at:
                return None
        row.update(data)
        return dict(row)

    # ── Question bank ─────────────────────────────────────────

    async def list_questions(self, role: str | None = None) -> list[dict[str, Any]]:
        rows = [r for r in self.rows("test_questions") if role is None or r["role"] == role]
        return self._newest_first(rows)

    async def get_questions(self, question_ids: list[str]) -> list[dict[str, Any]]:
        table = self.tables["test_questions"]
        return [dict(table[str(q)]) for q in question_ids if str(q) in table]

    async def create_question(self, data: dict[str, Any]) -> dict[str, Any]:
        return dict(self.add("test_questions", **data))

    async def update_question(self, question_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        return await self._update("test_questions", question_id, data)

    async def delete_question(self, question_id: str) -> bool:
        return self.tables["test_questions"].pop(str(question_id), None) is not None
