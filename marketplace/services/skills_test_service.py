"""
Skills test service — serves timed tests, scores submissions, and
enforces the pass/lockout rules per role.
"""

import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from marketplace.config import Settings, settings
from marketplace.domain import attempt_policy
from marketplace.domain.enums import FinanceRole
from marketplace.domain.errors import (
    ForcedPassesDisabled,
    NoActiveTest,
    NoQuestionsAvailable,
    RecordNotFound,
    RoleNotDeclared,
)
from marketplace.domain.models import (
    AnswerSubmission,
    ServedQuestion,
    ServedTest,
    TestAttempt,
    TestQuestion,
    TestResult,
    TestSession,
    WorkerProfile,
)
from marketplace.ports.database_port import DatabasePort

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SkillsTestService:
    """
    Orchestrates the skills test flow:
    1. Start a test (eligibility check + random question selection).
    2. Submit answers → score → pass, or fail with a lockout.
    3. Admin shortcut to force or revoke passes for every declared role.
    """

    def __init__(
        self,
        db: DatabasePort,
        config: Settings = settings,
        clock: Callable[[], datetime] = utcnow,
        rng: random.Random | None = None,
    ) -> None:
        self._db = db
        self._config = config
        self._clock = clock
        self._rng = rng or random.Random()

    async def _get_worker(self, worker_id: str) -> WorkerProfile:
        row = await self._db.get_worker(worker_id)
        if not row:
            raise RecordNotFound("Worker", worker_id)
        return WorkerProfile(**row)

    async def _get_test_taker(self, worker_id: str, role: FinanceRole) -> WorkerProfile:
        worker = await self._get_worker(worker_id)
        if role not in worker.roles:
            raise RoleNotDeclared(role.value)
        return worker

    async def _attempts(self, worker_id: str) -> list[TestAttempt]:
        rows = await self._db.list_test_attempts(worker_id)
        return [TestAttempt(**r) for r in rows]

    async def start_test(self, worker_id: str, role: FinanceRole) -> TestSession:
        """
        Pick a random subset of the role's questions, without the answer key.

        The served question ids are stored so the submission is scored
        against all of them. Starting again replaces an unsubmitted test.
        """
        await self._get_test_taker(worker_id, role)
        now = self._clock()
        attempt_policy.ensure_can_attempt(await self._attempts(worker_id), role, now)

        rows = await self._db.list_questions(role.value)
        if not rows:
            raise NoQuestionsAvailable(role.value)

        questions = [TestQuestion(**r) for r in rows]
        self._rng.shuffle(questions)
        selected = questions[: self._config.questions_per_test]

        await self._db.create_test_session({
            "worker_profile_id": worker_id,
            "role": role.value,
            "question_ids": [str(q.id) for q in selected],
            "started_at": now.isoformat(),
            "submitted_at": None,
        })
        logger.info(
            "Test started: worker=%s role=%s questions=%d",
            worker_id, role.value, len(selected),
        )

        return TestSession(
            role=role,
            questions=[
                ServedQuestion(id=q.id, question_text=q.question_text, options=q.options)
                for q in selected
            ],
            time_limit_seconds=self._config.test_duration_seconds,
            pass_threshold=self._config.pass_threshold,
        )

    async def submit_attempt(
        self, worker_id: str, role: FinanceRole, answers: list[AnswerSubmission]
    ) -> TestResult:
        """
        Score the answers against every question served by start_test.

        Served questions left out of the submission, or answered blank,
        count as wrong, so a timed-out test can still be submitted with
        whatever was answered.
        """
        await self._get_test_taker(worker_id, role)
        now = self._clock()
        attempt_policy.ensure_can_attempt(await self._attempts(worker_id), role, now)

        row = await self._db.get_open_test_session(worker_id, role.value)
        if row is None:
            raise NoActiveTest(role.value)
        served = ServedTest(**row)
        served_ids = [str(q) for q in served.question_ids]

        # One answer per question; a repeated id keeps the last answer
        by_question = {str(a.question_id): a.answer for a in answers}
        for question_id in by_question:
            if question_id not in served_ids:
                raise RecordNotFound("Test question", question_id)

        rows = await self._db.get_questions(served_ids)
        answer_key = {str(q.id): q.correct_answer for q in (TestQuestion(**r) for r in rows)}

        answered: list[dict[str, Any]] = []
        correct = 0
        for question_id in served_ids:
            answer = by_question.get(question_id)
            # A question deleted from the bank since it was served scores as wrong
            is_correct = answer is not None and answer == answer_key.get(question_id)
            correct += is_correct
            answered.append(
                {"question_id": question_id, "answer": answer, "correct": is_correct}
            )

        if await self._db.close_test_session(str(served.id), now) is None:
            raise NoActiveTest(role.value)

        score = attempt_policy.score_answers(correct, len(served_ids), role.value)
        passed = attempt_policy.is_passing(score, self._config.pass_threshold)
        lockout_until = attempt_policy.lockout_for(
            score, now, self._config.pass_threshold, self._config.lockout_days
        )

        await self._db.insert_test_attempts([
            {
                "worker_profile_id": worker_id,
                "role": role.value,
                "score": score,
                "passed": passed,
                "attempted_at": now.isoformat(),
                "lockout_until": lockout_until.isoformat() if lockout_until else None,
                "questions_answered": answered,
            }
        ])
        logger.info(
            "Test attempt: worker=%s role=%s score=%d passed=%s",
            worker_id, role.value, score, passed,
        )

        return TestResult(score=score, passed=passed, lockout_until=lockout_until)

    async def force_pass_all_roles(
        self, worker_id: str, admin_id: str
    ) -> list[dict[str, Any]]:
        """Insert a 100% attempt for every declared role not yet passed."""
        if not self._config.allow_forced_passes:
            raise ForcedPassesDisabled()

        worker = await self._get_worker(worker_id)
        passed_roles = {a.role for a in await self._attempts(worker_id) if a.passed}
        now = self._clock().isoformat()

        rows = [
            {
                "worker_profile_id": worker_id,
                "role": role.value,
                "score": 100,
                "passed": True,
                "attempted_at": now,
                "lockout_until": None,
                "forced_by": admin_id,
            }
            for role in worker.roles
            if role not in passed_roles
        ]
        created = await self._db.insert_test_attempts(rows)
        logger.info(
            "Forced passes: worker=%s roles=%s by=%s",
            worker_id, [r["role"] for r in rows], admin_id,
        )
        return created

    async def revoke_forced_passes(self, worker_id: str) -> int:
        if not self._config.allow_forced_passes:
            raise ForcedPassesDisabled()

        await self._get_worker(worker_id)
        removed = await self._db.delete_forced_attempts(worker_id)
        logger.info("Revoked %d forced passes for worker %s", removed, worker_id)
        return removed
