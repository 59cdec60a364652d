"""
Dependency Injection container.

Wires abstract ports → concrete adapters. To swap the data store,
change the adapter instantiation here. Nothing else in the codebase
changes (Open/Closed Principle).
"""

from functools import lru_cache

from fastapi import Depends
from supabase import create_client

from marketplace.adapters.supabase_adapter import SupabaseAdapter
from marketplace.config import settings
from marketplace.ports.database_port import DatabasePort


# ── Singletons (cached) ──────────────────────────────────────


@lru_cache(maxsize=1)
def _get_supabase_client():
    # Use service role key — bypasses RLS for server-side operations
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


@lru_cache(maxsize=1)
def _get_supabase_adapter() -> SupabaseAdapter:
    return SupabaseAdapter(client=_get_supabase_client())


# ── FastAPI Dependencies (return abstract types) ──────────────


def get_db() -> DatabasePort:
    """Inject the database adapter."""
    return _get_supabase_adapter()


# ── Domain Services ───────────────────────────────────────────

from marketplace.services.moderation_service import ModerationService  # noqa: E402
from marketplace.services.question_bank_service import QuestionBankService  # noqa: E402
from marketplace.services.skills_test_service import SkillsTestService  # noqa: E402
from marketplace.services.verification_service import VerificationService  # noqa: E402


def get_skills_test_service(db: DatabasePort = Depends(get_db)) -> SkillsTestService:
    """Injects the DB adapter into the skills test service."""
    return SkillsTestService(db=db)


def get_verification_service(db: DatabasePort = Depends(get_db)) -> VerificationService:
    """Injects the DB adapter into the verification read model."""
    return VerificationService(db=db)


def get_moderation_service(db: DatabasePort = Depends(get_db)) -> ModerationService:
    """Injects the DB adapter into the moderation service."""
    return ModerationService(db=db)


def get_question_bank_service(db: DatabasePort = Depends(get_db)) -> QuestionBankService:
    """Injects the DB adapter into the question bank service."""
    return QuestionBankService(db=db)
