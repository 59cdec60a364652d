"""
Print the verification score and channel statuses of every worker
awaiting approval. Run from the repo root: python verification_report.py
"""
import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from marketplace.dependencies import _get_supabase_client  # noqa: E402
from marketplace.adapters.supabase_adapter import SupabaseAdapter  # noqa: E402
from marketplace.domain.enums import ApprovalStatus  # noqa: E402
from marketplace.services.verification_service import VerificationService  # noqa: E402


async def report(status: ApprovalStatus):
    db = SupabaseAdapter(_get_supabase_client())
    service = VerificationService(db)

    print(f"Fetching {status.value} workers...")
    workers = await service.list_workers_for_approval(status)
    print(f"Found {len(workers)} workers.\n")

    for w in sorted(workers, key=lambda w: w.verification_score, reverse=True):
        channels = await service.get_channel_statuses(str(w.id))
        print(
            f"{w.verification_score:>3}%  {w.name:<30} "
            f"tests={channels.testing.value:<11} "
            f"refs={channels.references.value:<11} "
            f"id={channels.id_verification.value:<13} "
            f"insurance={channels.insurance.value}"
        )


if __name__ == "__main__":
    arg = sys.argv[1] if len(sys.argv) > 1 else ApprovalStatus.PENDING.value
    asyncio.run(report(ApprovalStatus(arg)))
