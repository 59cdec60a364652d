from typing import Any

from marketplace.domain.enums import FinanceRole
from marketplace.domain.errors import RecordNotFound
from marketplace.domain.models import TestQuestionCreate, TestQuestionUpdate
from marketplace.ports.database_port import DatabasePort


class QuestionBankService:
    """CRUD over the skills-test question bank (admin only)."""

    def __init__(self, db: DatabasePort) -> None:
        self._db = db

    async def list_questions(self, role: FinanceRole | None = None) -> list[dict[str, Any]]:
        return await self._db.list_questions(role.value if role else None)

    async def create_question(self, body: TestQuestionCreate) -> dict[str, Any]:
        return await self._db.create_question(body.model_dump(mode="json"))

    async def update_question(
        self, question_id: str, body: TestQuestionUpdate
    ) -> dict[str, Any]:
        rows = await self._db.get_questions([question_id])
        if not rows:
            raise RecordNotFound("Test question", question_id)

        current = rows[0]
        merged = {
            "role": current["role"],
            "question_text": current["question_text"],
            "options": current["options"],
            "correct_answer": current["correct_answer"],
            **body.model_dump(exclude_none=True),
        }
        # Re-validate the merged question (e.g. correct_answer vs. fewer options)
        validated = TestQuestionCreate(**merged)

        updated = await self._db.update_question(
            question_id, validated.model_dump(mode="json")
        )
        if updated is None:
            raise RecordNotFound("Test question", question_id)
        return updated

    async def delete_question(self, question_id: str) -> None:
        if not await self._db.delete_question(question_id):
            raise RecordNotFound("Test question", question_id)
