"""Tests for SkillsTestService against the in-memory store."""

import random
import uuid
from datetime import timedelta

import pytest

from marketplace.domain.enums import FinanceRole
from marketplace.domain.errors import (
    AlreadyPassed,
    ForcedPassesDisabled,
    LockedOut,
    NoActiveTest,
    NoQuestionsAvailable,
    RecordNotFound,
    RoleNotDeclared,
)
from marketplace.domain.models import AnswerSubmission
from marketplace.services.skills_test_service import SkillsTestService

BOOKKEEPER = FinanceRole.BOOKKEEPER
PAYROLL = FinanceRole.PAYROLL_CLERK
ADMIN_ID = str(uuid.uuid4())


@pytest.fixture
def service(db, config, clock):
    return SkillsTestService(db=db, config=config, clock=clock, rng=random.Random(7))


@pytest.fixture
def worker(db):
    return db.add_worker(roles=["bookkeeper", "payroll_clerk"])


def answers_for(questions, correct: int):
    """Answer the first `correct` served questions right (option 1) and the rest wrong."""
    return [
        AnswerSubmission(question_id=q.id, answer=1 if i < correct else 0)
        for i, q in enumerate(questions)
    ]


async def take_test(service, worker_id, role, correct: int):
    session = await service.start_test(worker_id, role)
    return await service.submit_attempt(
        worker_id, role, answers_for(session.questions, correct)
    )


class TestStartTest:
    @pytest.mark.asyncio
    async def test_serves_random_subset_without_answer_key(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 15)

        session = await service.start_test(worker["id"], BOOKKEEPER)

        assert len(session.questions) == 10
        assert len({q.id for q in session.questions}) == 10
        assert session.time_limit_seconds == 600
        assert session.pass_threshold == 80
        assert "correct_answer" not in session.questions[0].model_dump()

    @pytest.mark.asyncio
    async def test_records_served_questions(self, service, db, clock, worker, seed_questions):
        seed_questions("bookkeeper", 15)

        session = await service.start_test(worker["id"], BOOKKEEPER)

        [row] = db.rows("test_sessions")
        assert row["role"] == "bookkeeper"
        assert row["question_ids"] == [str(q.id) for q in session.questions]
        assert row["started_at"] == clock.now.isoformat()
        assert row["submitted_at"] is None

    @pytest.mark.asyncio
    async def test_fewer_questions_than_test_size(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 4)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        assert len(session.questions) == 4

    @pytest.mark.asyncio
    async def test_no_questions_for_role(self, service, worker, seed_questions):
        seed_questions("payroll_clerk", 10)
        with pytest.raises(NoQuestionsAvailable):
            await service.start_test(worker["id"], BOOKKEEPER)

    @pytest.mark.asyncio
    async def test_undeclared_role(self, service, db, worker, seed_questions):
        seed_questions("credit_controller", 10)

        with pytest.raises(RoleNotDeclared):
            await service.start_test(worker["id"], FinanceRole.CREDIT_CONTROLLER)
        assert db.rows("test_sessions") == []

    @pytest.mark.asyncio
    async def test_unknown_worker(self, service):
        with pytest.raises(RecordNotFound):
            await service.start_test("missing-worker", BOOKKEEPER)


class TestSubmitAttempt:
    @pytest.mark.asyncio
    async def test_passing_attempt(self, service, db, worker, seed_questions):
        seed_questions("bookkeeper", 10)

        result = await take_test(service, worker["id"], BOOKKEEPER, correct=8)

        assert result.score == 80
        assert result.passed is True
        assert result.lockout_until is None
        [row] = db.rows("test_attempts")
        assert row["role"] == "bookkeeper"
        assert row["passed"] is True
        assert row["lockout_until"] is None
        assert sum(a["correct"] for a in row["questions_answered"]) == 8
        assert db.rows("test_sessions")[0]["submitted_at"] is not None

    @pytest.mark.asyncio
    async def test_failing_attempt_locks_role(self, service, clock, worker, seed_questions):
        seed_questions("bookkeeper", 10)

        result = await take_test(service, worker["id"], BOOKKEEPER, correct=7)

        assert result.score == 70
        assert result.passed is False
        assert result.lockout_until == clock.now + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_score_uses_every_served_question(self, service, db, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        first = session.questions[0]

        result = await service.submit_attempt(
            worker["id"], BOOKKEEPER, [AnswerSubmission(question_id=first.id, answer=1)]
        )

        assert result.score == 10
        assert result.passed is False
        [row] = db.rows("test_attempts")
        assert len(row["questions_answered"]) == 10
        assert sum(a["answer"] is None for a in row["questions_answered"]) == 9

    @pytest.mark.asyncio
    async def test_nothing_answered_scores_zero(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        await service.start_test(worker["id"], BOOKKEEPER)

        result = await service.submit_attempt(worker["id"], BOOKKEEPER, [])

        assert result.score == 0
        assert result.passed is False

    @pytest.mark.asyncio
    async def test_blank_answers_count_as_wrong(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        answers = answers_for(session.questions, 10)
        for i in range(3):
            answers[i] = AnswerSubmission(question_id=session.questions[i].id, answer=None)

        result = await service.submit_attempt(worker["id"], BOOKKEEPER, answers)

        assert result.score == 70
        assert result.passed is False

    @pytest.mark.asyncio
    async def test_submit_without_starting(self, service, db, worker, seed_questions):
        questions = seed_questions("bookkeeper", 10)
        answers = [AnswerSubmission(question_id=q["id"], answer=1) for q in questions]

        with pytest.raises(NoActiveTest):
            await service.submit_attempt(worker["id"], BOOKKEEPER, answers)
        assert db.rows("test_attempts") == []

    @pytest.mark.asyncio
    async def test_session_cannot_be_submitted_twice(self, service, db, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        # Another request submitted this session first
        db.rows("test_sessions")[0]["submitted_at"] = "2026-01-15T12:05:00+00:00"

        with pytest.raises(NoActiveTest):
            await service.submit_attempt(
                worker["id"], BOOKKEEPER, answers_for(session.questions, 10)
            )
        assert db.rows("test_attempts") == []

    @pytest.mark.asyncio
    async def test_question_outside_served_set_is_rejected(self, service, db, worker, seed_questions):
        seed_questions("bookkeeper", 11)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        served = {str(q.id) for q in session.questions}
        [unserved] = [q for q in db.rows("test_questions") if q["id"] not in served]

        answers = answers_for(session.questions, 10)
        answers.append(AnswerSubmission(question_id=unserved["id"], answer=1))

        with pytest.raises(RecordNotFound):
            await service.submit_attempt(worker["id"], BOOKKEEPER, answers)
        assert db.rows("test_attempts") == []
        assert db.rows("test_sessions")[0]["submitted_at"] is None

    @pytest.mark.asyncio
    async def test_question_deleted_after_serving_counts_as_wrong(
        self, service, db, worker, seed_questions
    ):
        seed_questions("bookkeeper", 10)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        del db.tables["test_questions"][str(session.questions[0].id)]

        result = await service.submit_attempt(
            worker["id"], BOOKKEEPER, answers_for(session.questions, 10)
        )

        assert result.score == 90

    @pytest.mark.asyncio
    async def test_repeated_question_counts_once(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 2)
        session = await service.start_test(worker["id"], BOOKKEEPER)
        first, second = session.questions
        answers = [
            AnswerSubmission(question_id=first.id, answer=1),
            AnswerSubmission(question_id=first.id, answer=1),
            AnswerSubmission(question_id=second.id, answer=3),
        ]

        result = await service.submit_attempt(worker["id"], BOOKKEEPER, answers)

        assert result.score == 50

    @pytest.mark.asyncio
    async def test_undeclared_role(self, service, worker):
        with pytest.raises(RoleNotDeclared):
            await service.submit_attempt(worker["id"], FinanceRole.CFO_FPA, [])


class TestEligibility:
    @pytest.mark.asyncio
    async def test_locked_out_until_expiry_then_retake(self, service, clock, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        await take_test(service, worker["id"], BOOKKEEPER, correct=5)

        clock.advance(days=29, hours=23)
        with pytest.raises(LockedOut):
            await service.start_test(worker["id"], BOOKKEEPER)
        with pytest.raises(LockedOut):
            await service.submit_attempt(worker["id"], BOOKKEEPER, [])

        clock.advance(hours=1)
        result = await take_test(service, worker["id"], BOOKKEEPER, correct=10)
        assert result.passed is True

    @pytest.mark.asyncio
    async def test_already_passed_is_permanent(self, service, clock, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        await take_test(service, worker["id"], BOOKKEEPER, correct=9)

        clock.advance(days=400)
        with pytest.raises(AlreadyPassed):
            await service.start_test(worker["id"], BOOKKEEPER)
        with pytest.raises(AlreadyPassed):
            await service.submit_attempt(worker["id"], BOOKKEEPER, [])

    @pytest.mark.asyncio
    async def test_other_role_unaffected_by_lockout(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        seed_questions("payroll_clerk", 10)
        await take_test(service, worker["id"], BOOKKEEPER, correct=0)

        result = await take_test(service, worker["id"], PAYROLL, correct=10)
        assert result.passed is True


class TestForcedPasses:
    @pytest.mark.asyncio
    async def test_force_pass_marks_remaining_roles(self, service, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        await take_test(service, worker["id"], BOOKKEEPER, correct=10)

        created = await service.force_pass_all_roles(worker["id"], admin_id=ADMIN_ID)

        assert [row["role"] for row in created] == ["payroll_clerk"]
        assert created[0]["forced_by"] == ADMIN_ID
        assert created[0]["score"] == 100

    @pytest.mark.asyncio
    async def test_revoke_only_removes_forced_rows(self, service, db, worker, seed_questions):
        seed_questions("bookkeeper", 10)
        await take_test(service, worker["id"], BOOKKEEPER, correct=10)
        await service.force_pass_all_roles(worker["id"], admin_id=ADMIN_ID)

        removed = await service.revoke_forced_passes(worker["id"])

        assert removed == 1
        [remaining] = db.rows("test_attempts")
        assert remaining["role"] == "bookkeeper"
        assert remaining.get("forced_by") is None

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, db, clock, config, worker):
        locked_down = SkillsTestService(
            db=db, config=config.model_copy(update={"allow_forced_passes": False}), clock=clock
        )
        with pytest.raises(ForcedPassesDisabled):
            await locked_down.force_pass_all_roles(worker["id"], admin_id=ADMIN_ID)
        with pytest.raises(ForcedPassesDisabled):
            await locked_down.revoke_forced_passes(worker["id"])
