"""
Concrete implementation of DatabasePort using the Supabase Python client.
"""

from datetime import datetime
from typing import Any

from supabase import Client

from marketplace.domain.enums import SubmissionKind
from marketplace.ports.database_port import DatabasePort

_SUBMISSION_TABLES: dict[SubmissionKind, str] = {
    SubmissionKind.REFERENCE: "worker_references",
    SubmissionKind.ID_DOCUMENT: "id_verifications",
    SubmissionKind.QUALIFICATION: "qualification_uploads",
}


class SupabaseAdapter(DatabasePort):
    """All database I/O goes through the Supabase REST client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ── Accounts ──────────────────────────────────────────────

    async def get_profile_by_user(self, user_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("profiles")
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def is_admin(self, user_id: str) -> bool:
        result = (
            self._client.table("user_roles")
            .select("id")
            .eq("user_id", user_id)
            .eq("role", "admin")
            .limit(1)
            .execute()
        )
        return bool(result.data)

    async def get_worker(self, worker_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("worker_profiles")
            .select("*")
            .eq("id", worker_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def get_worker_by_profile(self, profile_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("worker_profiles")
            .select("*")
            .eq("profile_id", profile_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def list_workers(
        self, approval_status: str | None = None
    ) -> list[dict[str, Any]]:
        query = (
            self._client.table("worker_profiles")
            .select("*")
            .order("created_at", desc=True)
        )
        if approval_status:
            query = query.eq("approval_status", approval_status)
        result = query.execute()
        return result.data or []

    async def update_worker(
        self, worker_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("worker_profiles")
            .update(data)
            .eq("id", worker_id)
            .execute()
        )
        return result.data[0] if result.data else None

    async def update_business(
        self, business_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("business_profiles")
            .update(data)
            .eq("id", business_id)
            .execute()
        )
        return result.data[0] if result.data else None

    # ── Test Attempts ─────────────────────────────────────────

    async def list_test_attempts(self, worker_id: str) -> list[dict[str, Any]]:
        result = (
            self._client.table("test_attempts")
            .select("*")
            .eq("worker_profile_id", worker_id)
            .order("attempted_at", desc=True)
            .execute()
        )
        return result.data or []

    async def insert_test_attempts(
        self, rows: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        if not rows:
            return []
        result = self._client.table("test_attempts").insert(rows).execute()
        return result.data or []

    async def delete_forced_attempts(self, worker_id: str) -> int:
        result = (
            self._client.table("test_attempts")
            .delete()
            .eq("worker_profile_id", worker_id)
            .not_.is_("forced_by", "null")
            .execute()
        )
        return len(result.data or [])

    # ── Test Sessions ─────────────────────────────────────────

    async def create_test_session(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("test_sessions").insert(data).execute()
        return result.data[0]

    async def get_open_test_session(
        self, worker_id: str, role: str
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("test_sessions")
            .select("*")
            .eq("worker_profile_id", worker_id)
            .eq("role", role)
            .is_("submitted_at", "null")
            .order("started_at", desc=True)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    async def close_test_session(
        self, session_id: str, submitted_at: datetime
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("test_sessions")
            .update({"submitted_at": submitted_at.isoformat()})
            .eq("id", session_id)
            .is_("submitted_at", "null")
            .execute()
        )
        return result.data[0] if result.data else None

    # ── Submissions ───────────────────────────────────────────

    async def list_references(self, worker_id: str) -> list[dict[str, Any]]:
        result = (
            self._client.table("worker_references")
            .select("*")
            .eq("worker_profile_id", worker_id)
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []

    async def list_id_verifications(self, worker_id: str) -> list[dict[str, Any]]:
        result = (
            self._client.table("id_verifications")
            .select("*")
            .eq("worker_profile_id", worker_id)
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []

    async def create_submission(
        self, kind: SubmissionKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        result = self._client.table(_SUBMISSION_TABLES[kind]).insert(data).execute()
        return result.data[0]

    async def get_submission(
        self, kind: SubmissionKind, submission_id: str
    ) -> dict[str, Any] | None:
        result = (
            self._client.table(_SUBMISSION_TABLES[kind])
            .select("*")
            .eq("id", submission_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def list_submissions(
        self, kind: SubmissionKind, status: str | None = None
    ) -> list[dict[str, Any]]:
        query = (
            self._client.table(_SUBMISSION_TABLES[kind])
            .select("*, worker_profiles(name)")
            .order("created_at", desc=True)
        )
        if status:
            query = query.eq("status", status)
        result = query.execute()
        return result.data or []

    async def update_submission(
        self,
        kind: SubmissionKind,
        submission_id: str,
        data: dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        query = (
            self._client.table(_SUBMISSION_TABLES[kind])
            .update(data)
            .eq("id", submission_id)
        )
        if expected_updated_at is not None:
            # Compare-and-set: a concurrent review bumps updated_at first
            query = query.eq("updated_at", expected_updated_at.isoformat())
        result = query.execute()
        return result.data[0] if result.data else None

    # ── Question Bank ─────────────────────────────────────────

    async def list_questions(self, role: str | None = None) -> list[dict[str, Any]]:
        query = (
            self._client.table("test_questions")
            .select("*")
            .order("created_at", desc=True)
        )
        if role:
            query = query.eq("role", role)
        result = query.execute()
        return result.data or []

    async def get_questions(self, question_ids: list[str]) -> list[dict[str, Any]]:
        if not question_ids:
            return []
        result = (
            self._client.table("test_questions")
            .select("*")
            .in_("id", question_ids)
            .execute()
        )
        return result.data or []

    async def create_question(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("test_questions").insert(data).execute()
        return result.data[0]

    async def update_question(
        self, question_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("test_questions")
            .update(data)
            .eq("id", question_id)
            .execute()
        )
        return result.data[0] if result.data else None

    async def delete_question(self, question_id: str) -> bool:
        result = (
            self._client.table("test_questions")
            .delete()
            .eq("id", question_id)
            .execute()
        )
        return bool(result.data)
