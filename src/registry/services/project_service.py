"""Project write service."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.registry.core.exceptions import NotFoundError, ProjectValidationError
from src.registry.core.logging import get_logger
from src.registry.core.validators import is_valid_absolute_url, is_valid_repo_ref
from src.registry.models import Project, ProjectStatus
from src.registry.models.base import utc_now
from src.registry.repositories import ProjectRepository
from src.registry.services.linking_service import LinkingService, LinkState

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProjectDraft:
    """A complete candidate project record, validated before any write."""

    status: ProjectStatus
    name_id: UUID | None = None
    considering_name_ids: tuple[UUID, ...] = field(default_factory=tuple)
    description: str | None = None
    repo_ref: str | None = None
    deploy_url: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_project(cls, project: Project, considering_name_ids: Sequence[UUID]) -> "ProjectDraft":
        return cls(
            status=project.status_enum,
            name_id=project.name_id,
            considering_name_ids=tuple(considering_name_ids),
            description=project.description,
            repo_ref=project.repo_ref,
            deploy_url=project.deploy_url,
            tags=tuple(project.tags or ()),
        )

    def merge(self, changes: Mapping[str, Any]) -> "ProjectDraft":
        """Overlay only the fields present in ``changes``.

        Candidate ids are a set: repeats collapse, first occurrence wins.
        """
        values = dict(changes)
        if "status" in values:
            values["status"] = ProjectStatus(values["status"])
        if "considering_name_ids" in values:
            values["considering_name_ids"] = tuple(
                dict.fromkeys(values["considering_name_ids"] or ())
            )
        if "tags" in values:
            values["tags"] = tuple(values["tags"] or ())
        return replace(self, **values)

    @property
    def link_state(self) -> LinkState:
        return LinkState(
            status=self.status,
            name_id=self.name_id,
            considering_name_ids=self.considering_name_ids,
        )


def validate_project_rules(draft: ProjectDraft) -> None:
    """Check the business rules on a fully merged project record.

    Raises:
        ProjectValidationError: Naming the first rule the record breaks.
    """
    if draft.status is ProjectStatus.IDEA:
        for field_name in ("name_id", "repo_ref", "deploy_url"):
            if getattr(draft, field_name) is not None:
                raise ProjectValidationError(
                    "idea_has_no_name_or_deployment",
                    field_name,
                    f"Ideas cannot have {field_name} set",
                )
    else:
        if draft.name_id is None:
            raise ProjectValidationError(
                "named_project_requires_name",
                "name_id",
                f"A {draft.status.value} project must have a name",
            )
        if draft.considering_name_ids:
            raise ProjectValidationError(
                "named_project_has_no_candidates",
                "considering_name_ids",
                "Only ideas can consider names",
            )

    if draft.repo_ref is not None and not is_valid_repo_ref(draft.repo_ref):
        raise ProjectValidationError(
            "repo_ref_format", "repo_ref", "Repository must look like owner/repo"
        )
    if draft.deploy_url is not None and not is_valid_absolute_url(draft.deploy_url):
        raise ProjectValidationError(
            "deploy_url_format", "deploy_url", "Deploy URL must be an absolute URL"
        )


class ProjectService:
    """Project create/update/delete/promote - one transaction per operation."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        linking_service: LinkingService,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.linking_service = linking_service
        self.session = session

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

    async def create_project(self, draft: ProjectDraft) -> Project:
        """Validate, insert and link a new project.

        Raises:
            ProjectValidationError: If the record breaks a business rule.
            NameConflictError: If a referenced name is assigned elsewhere.
            NotFoundError: If a referenced name does not exist.
        """
        validate_project_rules(draft)

        project = Project(
            status=draft.status.value,
            name_id=draft.name_id,
            description=draft.description,
            repo_ref=draft.repo_ref,
            deploy_url=draft.deploy_url,
            tags=list(draft.tags),
        )
        try:
            await self.linking_service.apply_links(
                project.id, draft.status, draft.name_id, draft.considering_name_ids
            )
            self.project_repo.add(project)
            # Link rows reference the project row
            await self.session.flush()
            await self.project_repo.replace_considering_name_ids(
                project.id, draft.considering_name_ids
            )
            await self.session.commit()
            await self.session.refresh(project)
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project created", project_id=str(project.id), status=project.status)
        return project

    async def update_project(self, project_id: UUID, changes: Mapping[str, Any]) -> Project:
        """Merge ``changes`` over the stored record and reconcile name links.

        Only keys present in ``changes`` are applied; a ``None`` value clears
        the field.

        Raises:
            NotFoundError: If the project does not exist.
            ProjectValidationError: If the merged record breaks a business rule.
            NameConflictError: If a newly referenced name is assigned elsewhere.
        """
        project = await self._get_project(project_id)
        considering_ids = await self.project_repo.get_considering_name_ids(project_id)
        old = ProjectDraft.from_project(project, considering_ids)
        new = old.merge(changes)
        validate_project_rules(new)

        try:
            await self.linking_service.reconcile_links(project_id, old.link_state, new.link_state)

            project.status = new.status.value
            project.name_id = new.name_id
            project.description = new.description
            project.repo_ref = new.repo_ref
            project.deploy_url = new.deploy_url
            project.tags = list(new.tags)
            project.updated_at = utc_now()
            if new.considering_name_ids != old.considering_name_ids:
                await self.project_repo.replace_considering_name_ids(
                    project_id, new.considering_name_ids
                )
            await self.session.commit()
            await self.session.refresh(project)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project updated",
            project_id=str(project_id),
            fields=sorted(changes),
            status=project.status,
        )
        return project

    async def delete_project(self, project_id: UUID, release_names_to_pool: bool = True) -> None:
        """Release the project's names, then delete it.

        Raises:
            NotFoundError: If the project does not exist.
        """
        project = await self._get_project(project_id)
        try:
            await self.linking_service.release_all(project_id, release_names_to_pool)
            await self.project_repo.delete(project)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Project deleted",
            project_id=str(project_id),
            release_names_to_pool=release_names_to_pool,
        )

    async def promote_idea(self, project_id: UUID, chosen_name_id: UUID) -> Project:
        """Promote an idea to active with one of its considered names."""
        try:
            project = await self.linking_service.promote_idea(project_id, chosen_name_id)
            await self.session.commit()
            await self.session.refresh(project)
            return project
        except Exception:
            await self.session.rollback()
            raise
