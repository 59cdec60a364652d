from abc import ABC, abstractmethod
from typing import Any


class QuestionPort(ABC):
    """Port for the skills-test question bank."""

    @abstractmethod
    async def list_questions(self, role: str | None = None) -> list[dict[str, Any]]:
        """List questions, newest first, optionally for one role."""
        ...

    @abstractmethod
    async def get_questions(self, question_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch the questions with the given IDs (missing IDs are skipped)."""
        ...

    @abstractmethod
    async def create_question(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a question and return the created row."""
        ...

    @abstractmethod
    async def update_question(
        self, question_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Partially update a question; returns the row or None if missing."""
        ...

    @abstractmethod
    async def delete_question(self, question_id: str) -> bool:
        """Delete a question; returns False if it did not exist."""
        ...
