"""Repository for Name entity."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.registry.models import Name, NameStatus
from src.registry.models.base import utc_now
from src.registry.repositories.base import BaseRepository


class NameRepository(BaseRepository[Name]):
    """Repository for the name pool."""

    model = Name

    async def get_by_text(self, text: str) -> Name | None:
        """Get name by exact (case-sensitive) text."""
        result = await self.session.execute(select(Name).where(Name.text == text))
        return result.scalar_one_or_none()

    async def list_all(self, status: NameStatus | None = None) -> list[Name]:
        """List names ordered by text, optionally filtered by status."""
        query = select(Name)
        if status is not None:
            query = query.where(Name.status == status.value)
        result = await self.session.execute(query.order_by(Name.text.asc()))
        return list(result.scalars().all())

    async def compare_and_set_status(
        self,
        name_id: UUID,
        expected_status: NameStatus,
        to_status: NameStatus,
        assigned_project_id: UUID | None,
        kept_warm: bool,
    ) -> bool:
        """Write a new status only if the row still has ``expected_status``.

        Returns:
            True if the row was updated, False if another writer changed it first.
        """
        result = await self.session.execute(
            update(Name)
            .where(Name.id == name_id, Name.status == expected_status.value)
            .values(
                status=to_status.value,
                assigned_project_id=assigned_project_id,
                kept_warm=kept_warm,
                updated_at=utc_now(),
            )
        )
        return result.rowcount == 1
