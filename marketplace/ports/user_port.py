from abc import ABC, abstractmethod
from typing import Any


class UserPort(ABC):
    """Port for account rows: profiles, worker/business profiles, roles."""

    @abstractmethod
    async def get_profile_by_user(self, user_id: str) -> dict[str, Any] | None:
        """Fetch the `profiles` row owned by an auth user."""
        ...

    @abstractmethod
    async def is_admin(self, user_id: str) -> bool:
        """True if the auth user holds the admin app role."""
        ...

    @abstractmethod
    async def get_worker(self, worker_id: str) -> dict[str, Any] | None:
        """Fetch a single worker profile by ID."""
        ...

    @abstractmethod
    async def get_worker_by_profile(self, profile_id: str) -> dict[str, Any] | None:
        """Fetch the worker profile attached to a `profiles` row."""
        ...

    @abstractmethod
    async def list_workers(
        self, approval_status: str | None = None
    ) -> list[dict[str, Any]]:
        """List worker profiles, newest first, optionally filtered by approval status."""
        ...

    @abstractmethod
    async def update_worker(
        self, worker_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Partially update a worker profile; returns the row or None if missing."""
        ...

    @abstractmethod
    async def update_business(
        self, business_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Partially update a business profile; returns the row or None if missing."""
        ...
