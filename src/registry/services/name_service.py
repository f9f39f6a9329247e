"""Name pool service."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.registry.core.exceptions import (
    DuplicateNameError,
    InvalidNameTextError,
    InvalidTransitionError,
    NameConflictError,
    NameInUseError,
    NotFoundError,
)
from src.registry.core.logging import get_logger
from src.registry.models import Name, NameStatus
from src.registry.models.base import utc_now
from src.registry.repositories import NameRepository, ProjectRepository

logger = get_logger(__name__)


class NameService:
    """Name pool CRUD plus the guarded status state machine.

    Public operations commit. ``transition`` and ``set_kept_warm`` run inside
    the caller's transaction and are meant for the linking engine only.
    """

    TRANSITIONS: dict[NameStatus, frozenset[NameStatus]] = {
        NameStatus.AVAILABLE: frozenset({NameStatus.CONSIDERING, NameStatus.ASSIGNED}),
        NameStatus.CONSIDERING: frozenset({NameStatus.AVAILABLE, NameStatus.ASSIGNED}),
        NameStatus.ASSIGNED: frozenset({NameStatus.AVAILABLE}),
    }

    def __init__(
        self,
        name_repo: NameRepository,
        project_repo: ProjectRepository,
        session: AsyncSession,
    ):
        self.name_repo = name_repo
        self.project_repo = project_repo
        self.session = session

    @classmethod
    def can_transition(cls, from_status: NameStatus, to_status: NameStatus) -> bool:
        """Check whether ``from_status -> to_status`` is in the transition table."""
        return to_status in cls.TRANSITIONS.get(from_status, frozenset())

    async def get_name(self, name_id: UUID) -> Name:
        """Get a name by id.

        Raises:
            NotFoundError: If the id is unknown.
        """
        name = await self.name_repo.get_by_id(name_id)
        if name is None:
            raise NotFoundError("name", name_id)
        return name

    async def list_names(self, status: NameStatus | None = None) -> list[Name]:
        """List names ordered by text, optionally filtered by status."""
        return await self.name_repo.list_all(status)

    async def list_available_names(self) -> list[Name]:
        return await self.name_repo.list_all(NameStatus.AVAILABLE)

    @staticmethod
    def _clean_text(text: str) -> str:
        cleaned = text.strip()
        if not cleaned:
            raise InvalidNameTextError(text)
        return cleaned

    async def create_name(self, text: str, notes: str | None = None) -> Name:
        """Add a name to the pool. New names start ``available``.

        The text is trimmed before the duplicate check.

        Raises:
            InvalidNameTextError: If the text is blank.
            DuplicateNameError: If a name with the exact same text exists.
        """
        text = self._clean_text(text)
        if await self.name_repo.get_by_text(text) is not None:
            raise DuplicateNameError(text)

        # Unique index on text covers races between the check and the insert
        try:
            name = Name(text=text, notes=notes)
            self.name_repo.add(name)
            await self.session.commit()
            await self.session.refresh(name)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError(text) from e

        logger.info("Name created", name_id=str(name.id), text=name.text)
        return name

    async def update_name(self, name_id: UUID, changes: Mapping[str, Any]) -> Name:
        """Rename and/or replace notes in one transaction.

        Only ``text`` and ``notes`` keys present in ``changes`` are applied;
        ``notes: None`` clears the notes. Status and assignment are untouched.

        Raises:
            NotFoundError: If the id is unknown.
            InvalidNameTextError: If the new text is blank.
            DuplicateNameError: If another name already has the new text.
        """
        name = await self.get_name(name_id)
        old_text = name.text

        new_text = old_text
        if changes.get("text") is not None:
            new_text = self._clean_text(changes["text"])
            if new_text != old_text:
                existing = await self.name_repo.get_by_text(new_text)
                if existing is not None and existing.id != name_id:
                    raise DuplicateNameError(new_text)

        notes_changed = "notes" in changes and changes["notes"] != name.notes
        if new_text == old_text and not notes_changed:
            return name

        try:
            name.text = new_text
            if notes_changed:
                name.notes = changes["notes"]
            name.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(name)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError(new_text) from e
        except Exception:
            await self.session.rollback()
            raise

        if new_text != old_text:
            logger.info("Name renamed", name_id=str(name_id), old_text=old_text, new_text=new_text)
        if notes_changed:
            logger.info("Name notes updated", name_id=str(name_id))
        return name

    async def rename_name(self, name_id: UUID, new_text: str) -> Name:
        """Change a name's text. Renaming to the current text is a no-op."""
        return await self.update_name(name_id, {"text": new_text})

    async def update_name_notes(self, name_id: UUID, notes: str | None) -> Name:
        """Replace the free-text notes of a name."""
        return await self.update_name(name_id, {"notes": notes})

    async def delete_name(self, name_id: UUID) -> None:
        """Remove a name from the pool.

        Raises:
            NotFoundError: If the id is unknown.
            NameInUseError: If the name is assigned or any project considers it.
        """
        name = await self.get_name(name_id)
        if name.is_assigned or await self.project_repo.count_considering_references(name_id):
            raise NameInUseError(name_id, name.text, name.status)

        try:
            await self.name_repo.delete(name)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Name deleted", name_id=str(name_id), text=name.text)

    async def transition(
        self,
        name_id: UUID,
        to_status: NameStatus,
        assigned_project_id: UUID | None = None,
        kept_warm: bool = False,
    ) -> Name:
        """Move a name to ``to_status`` (no commit).

        The write only lands if the stored status still equals the status read
        here, so two transactions racing on the same name cannot both win.

        Raises:
            NotFoundError: If the id is unknown.
            InvalidTransitionError: If the move is not in the transition table,
                or the name moved elsewhere concurrently.
            NameConflictError: If a concurrent writer assigned the name first.
        """
        name = await self.get_name(name_id)
        from_status = name.status_enum
        if not self.can_transition(from_status, to_status):
            raise InvalidTransitionError(name_id, from_status.value, to_status.value)

        if to_status is not NameStatus.ASSIGNED:
            assigned_project_id = None
        if to_status is not NameStatus.CONSIDERING:
            kept_warm = False

        updated = await self.name_repo.compare_and_set_status(
            name_id, from_status, to_status, assigned_project_id, kept_warm
        )
        await self.session.refresh(name)
        if not updated:
            if name.is_assigned and name.assigned_project_id != assigned_project_id:
                raise NameConflictError(name_id, name.text, name.assigned_project_id)
            raise InvalidTransitionError(name_id, name.status, to_status.value)

        logger.info(
            "Name transitioned",
            name_id=str(name_id),
            from_status=from_status.value,
            to_status=to_status.value,
            assigned_project_id=str(assigned_project_id) if assigned_project_id else None,
            kept_warm=kept_warm,
        )
        return name

    async def set_kept_warm(self, name_id: UUID, kept_warm: bool) -> Name:
        """Flip the keep-warm flag of a ``considering`` name (no commit)."""
        name = await self.get_name(name_id)
        if name.kept_warm == kept_warm:
            return name
        updated = await self.name_repo.compare_and_set_status(
            name_id, NameStatus.CONSIDERING, NameStatus.CONSIDERING, None, kept_warm
        )
        await self.session.refresh(name)
        if not updated:
            raise InvalidTransitionError(name_id, name.status, NameStatus.CONSIDERING.value)
        return name
