"""Integration tests for the linking engine through the project service."""

import pytest

from src.registry.core.db import get_session
from src.registry.core.exceptions import (
    NameConflictError,
    NameNotConsideredError,
    NotAnIdeaError,
    NotFoundError,
    ProjectValidationError,
)
from src.registry.models import NameStatus, ProjectStatus
from tests.factories import generate_uuid
from tests.helpers import (
    Registry,
    assert_registry_consistent,
    build_registry,
    create_names,
    draft,
    reload_name,
)

pytestmark = pytest.mark.integration

AVAILABLE = NameStatus.AVAILABLE.value
CONSIDERING = NameStatus.CONSIDERING.value
ASSIGNED = NameStatus.ASSIGNED.value


async def test_idea_considers_names_then_promotes(registry: Registry):
    session = registry.session
    sous, chefbot = await create_names(session, "sous", "chefbot")

    project = await registry.projects.create_project(
        draft(considering_name_ids=[sous.id, chefbot.id], description="recipe helper")
    )
    assert (await reload_name(session, sous.id)).status == CONSIDERING
    assert (await reload_name(session, chefbot.id)).status == CONSIDERING

    promoted = await registry.projects.promote_idea(project.id, sous.id)

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == ASSIGNED
    assert sous_now.assigned_project_id == project.id
    assert (await reload_name(session, chefbot.id)).status == AVAILABLE
    assert promoted.status == ProjectStatus.ACTIVE.value
    assert promoted.name_id == sous.id

    view = await registry.queries.get_project(project.id)
    assert view is not None
    assert view.considering_name_ids == []
    assert view.name == "sous"
    await assert_registry_consistent(session)


async def test_taking_an_assigned_name_conflicts(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    owner = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))
    owner_id = owner.id

    with pytest.raises(NameConflictError) as exc_info:
        await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    assert exc_info.value.assigned_project_id == owner_id
    stats = await registry.queries.get_project_stats()
    assert stats.total == 1
    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == ASSIGNED
    assert sous_now.assigned_project_id == owner_id


async def test_delete_releases_name_to_pool(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    project = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    await registry.projects.delete_project(project.id, release_names_to_pool=True)

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == AVAILABLE
    assert sous_now.assigned_project_id is None
    assert await registry.queries.get_project(project.id) is None


async def test_delete_keeps_name_warm(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    project = await registry.projects.create_project(draft(ProjectStatus.PAUSED, name_id=sous.id))

    await registry.projects.delete_project(project.id, release_names_to_pool=False)

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == CONSIDERING
    assert sous_now.kept_warm is True
    assert sous_now.assigned_project_id is None
    await assert_registry_consistent(session)

    # Nothing uses a warm name, so it can be dropped
    await registry.names.delete_name(sous.id)


async def test_linking_a_warm_name_clears_the_flag(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    first = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))
    await registry.projects.delete_project(first.id, release_names_to_pool=False)

    idea = await registry.projects.create_project(draft(considering_name_ids=[sous.id]))

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == CONSIDERING
    assert sous_now.kept_warm is False

    await registry.projects.delete_project(idea.id, release_names_to_pool=True)
    assert (await reload_name(session, sous.id)).status == AVAILABLE


async def test_demoting_requires_clearing_the_name(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    project = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    with pytest.raises(ProjectValidationError) as exc_info:
        await registry.projects.update_project(project.id, {"status": "idea"})
    assert exc_info.value.field == "name_id"
    assert (await reload_name(session, sous.id)).status == ASSIGNED

    demoted = await registry.projects.update_project(
        project.id, {"status": "idea", "name_id": None, "considering_name_ids": [sous.id]}
    )

    assert demoted.status == ProjectStatus.IDEA.value
    assert demoted.name_id is None
    assert (await reload_name(session, sous.id)).status == CONSIDERING
    await assert_registry_consistent(session)


async def test_conflicting_apply_links_leaves_name_untouched(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    owner = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))
    owner_id = owner.id

    with pytest.raises(NameConflictError):
        await registry.linking.apply_links(generate_uuid(), ProjectStatus.ACTIVE, sous.id, [])
    await session.rollback()

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == ASSIGNED
    assert sous_now.assigned_project_id == owner_id


async def test_ideas_cannot_consider_an_assigned_name(registry: Registry):
    (sous,) = await create_names(registry.session, "sous")
    await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    with pytest.raises(NameConflictError):
        await registry.projects.create_project(draft(considering_name_ids=[sous.id]))

    assert (await registry.queries.get_project_stats()).by_status["idea"] == 0


async def test_release_all_is_idempotent(registry: Registry):
    session = registry.session
    sous, chefbot = await create_names(session, "sous", "chefbot")
    project = await registry.projects.create_project(
        draft(considering_name_ids=[sous.id, chefbot.id])
    )

    for _ in range(2):
        await registry.linking.release_all(project.id, release_to_pool=True)
        await session.commit()
        assert (await reload_name(session, sous.id)).status == AVAILABLE
        assert (await reload_name(session, chefbot.id)).status == AVAILABLE

    await registry.projects.delete_project(project.id, release_names_to_pool=True)
    with pytest.raises(NotFoundError):
        await registry.linking.release_all(project.id, release_to_pool=True)
    assert (await reload_name(session, sous.id)).status == AVAILABLE


async def test_keep_warm_release_is_idempotent(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    project = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    for _ in range(2):
        await registry.linking.release_all(project.id, release_to_pool=False)
        await session.commit()
        sous_now = await reload_name(session, sous.id)
        assert sous_now.status == CONSIDERING
        assert sous_now.kept_warm is True


async def test_name_considered_by_two_ideas(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    first = await registry.projects.create_project(draft(considering_name_ids=[sous.id]))
    second = await registry.projects.create_project(draft(considering_name_ids=[sous.id]))

    await registry.projects.delete_project(first.id, release_names_to_pool=True)
    assert (await reload_name(session, sous.id)).status == CONSIDERING

    await registry.projects.delete_project(second.id, release_names_to_pool=True)
    assert (await reload_name(session, sous.id)).status == AVAILABLE


async def test_released_name_returns_to_remaining_idea(registry: Registry):
    session = registry.session
    (sous,) = await create_names(session, "sous")
    idea = await registry.projects.create_project(draft(considering_name_ids=[sous.id]))
    owner = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))
    assert (await reload_name(session, sous.id)).status == ASSIGNED

    await registry.projects.delete_project(owner.id, release_names_to_pool=True)

    sous_now = await reload_name(session, sous.id)
    assert sous_now.status == CONSIDERING
    assert sous_now.kept_warm is False
    await assert_registry_consistent(session)

    promoted = await registry.projects.promote_idea(idea.id, sous.id)
    assert promoted.name_id == sous.id


async def test_promoting_another_ideas_shared_candidate(registry: Registry):
    session = registry.session
    sous, chefbot = await create_names(session, "sous", "chefbot")
    first = await registry.projects.create_project(
        draft(considering_name_ids=[sous.id, chefbot.id])
    )
    await registry.projects.create_project(draft(considering_name_ids=[chefbot.id]))

    await registry.projects.promote_idea(first.id, sous.id)

    # chefbot is still a candidate of the second idea
    assert (await reload_name(session, chefbot.id)).status == CONSIDERING
    await assert_registry_consistent(session)


async def test_promote_rejects_non_ideas(registry: Registry):
    (sous,) = await create_names(registry.session, "sous")
    project = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=sous.id))

    with pytest.raises(NotAnIdeaError):
        await registry.projects.promote_idea(project.id, sous.id)


async def test_promote_rejects_names_not_considered(registry: Registry):
    session = registry.session
    sous, chefbot = await create_names(session, "sous", "chefbot")
    idea = await registry.projects.create_project(draft(considering_name_ids=[sous.id]))

    with pytest.raises(NameNotConsideredError):
        await registry.projects.promote_idea(idea.id, chefbot.id)

    assert (await reload_name(session, sous.id)).status == CONSIDERING
    assert (await reload_name(session, chefbot.id)).status == AVAILABLE


async def test_update_reconciles_only_the_delta(registry: Registry):
    session = registry.session
    a, b, c = await create_names(session, "a-name", "b-name", "c-name")
    idea = await registry.projects.create_project(draft(considering_name_ids=[a.id, b.id]))

    await registry.projects.update_project(idea.id, {"considering_name_ids": [b.id, c.id]})

    assert (await reload_name(session, a.id)).status == AVAILABLE
    assert (await reload_name(session, b.id)).status == CONSIDERING
    assert (await reload_name(session, c.id)).status == CONSIDERING
    view = await registry.queries.get_project(idea.id)
    assert view is not None
    assert view.considering_name_ids == [b.id, c.id]
    await assert_registry_consistent(session)


async def test_repeated_candidate_ids_collapse_on_create(registry: Registry):
    session = registry.session
    a, b = await create_names(session, "a-name", "b-name")

    idea = await registry.projects.create_project(
        draft(considering_name_ids=[a.id, b.id, a.id])
    )

    view = await registry.queries.get_project(idea.id)
    assert view is not None
    assert view.considering_name_ids == [a.id, b.id]
    assert (await reload_name(session, a.id)).status == CONSIDERING
    await assert_registry_consistent(session)


async def test_repeated_candidate_ids_collapse_on_update(registry: Registry):
    session = registry.session
    a, b = await create_names(session, "a-name", "b-name")
    idea = await registry.projects.create_project(draft(considering_name_ids=[a.id]))

    await registry.projects.update_project(
        idea.id, {"considering_name_ids": [b.id, b.id, a.id]}
    )

    view = await registry.queries.get_project(idea.id)
    assert view is not None
    assert view.considering_name_ids == [b.id, a.id]
    assert (await reload_name(session, b.id)).status == CONSIDERING
    await assert_registry_consistent(session)


async def test_update_to_active_with_a_candidate(registry: Registry):
    session = registry.session
    a, b = await create_names(session, "a-name", "b-name")
    idea = await registry.projects.create_project(draft(considering_name_ids=[a.id, b.id]))

    await registry.projects.update_project(
        idea.id, {"status": "active", "name_id": a.id, "considering_name_ids": []}
    )

    assert (await reload_name(session, a.id)).status == ASSIGNED
    assert (await reload_name(session, b.id)).status == AVAILABLE
    await assert_registry_consistent(session)


async def test_update_swaps_assigned_name(registry: Registry):
    session = registry.session
    old, new = await create_names(session, "old-name", "new-name")
    project = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=old.id))

    await registry.projects.update_project(project.id, {"name_id": new.id})

    assert (await reload_name(session, old.id)).status == AVAILABLE
    new_now = await reload_name(session, new.id)
    assert new_now.status == ASSIGNED
    assert new_now.assigned_project_id == project.id


async def test_failed_update_leaves_project_unchanged(registry: Registry):
    session = registry.session
    sous, taken = await create_names(session, "sous", "taken")
    await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=taken.id))
    project = await registry.projects.create_project(
        draft(ProjectStatus.ACTIVE, name_id=sous.id, description="before")
    )
    project_id = project.id

    with pytest.raises(NameConflictError):
        await registry.projects.update_project(
            project_id, {"name_id": taken.id, "description": "after"}
        )

    view = await registry.queries.get_project(project_id)
    assert view is not None
    assert view.name_id == sous.id
    assert view.description == "before"
    assert (await reload_name(session, sous.id)).status == ASSIGNED


async def test_create_with_unknown_name_persists_nothing(registry: Registry):
    with pytest.raises(NotFoundError):
        await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=generate_uuid()))

    assert (await registry.queries.get_project_stats()).total == 0


async def test_delete_unknown_project(registry: Registry):
    with pytest.raises(NotFoundError):
        await registry.projects.delete_project(generate_uuid())


async def test_racing_assignment_loses_with_conflict(registry: Registry, engine):
    """A writer working from a stale read cannot overwrite a newer assignment."""
    session = registry.session
    (sous,) = await create_names(session, "sous")
    # Loaded into this session's identity map as available
    assert (await registry.names.get_name(sous.id)).status == AVAILABLE

    async with get_session(engine) as other_session:
        winner = await build_registry(other_session).projects.create_project(
            draft(ProjectStatus.ACTIVE, name_id=sous.id)
        )

    with pytest.raises(NameConflictError) as exc_info:
        await registry.linking.apply_links(generate_uuid(), ProjectStatus.ACTIVE, sous.id, [])
    await session.rollback()

    assert exc_info.value.assigned_project_id == winner.id
    sous_now = await reload_name(session, sous.id)
    assert sous_now.assigned_project_id == winner.id


async def test_invariants_hold_across_a_mixed_workload(registry: Registry):
    session = registry.session
    names = await create_names(session, "ash", "birch", "cedar", "dogwood", "elm")
    ash, birch, cedar, dogwood, elm = (n.id for n in names)

    idea_one = await registry.projects.create_project(draft(considering_name_ids=[ash, birch]))
    idea_two = await registry.projects.create_project(draft(considering_name_ids=[birch, cedar]))
    active = await registry.projects.create_project(draft(ProjectStatus.ACTIVE, name_id=dogwood))
    await assert_registry_consistent(session)

    await registry.projects.promote_idea(idea_one.id, birch)
    await assert_registry_consistent(session)

    await registry.projects.update_project(idea_two.id, {"considering_name_ids": [cedar, elm]})
    await assert_registry_consistent(session)

    await registry.projects.update_project(active.id, {"status": "archived"})
    await registry.projects.delete_project(active.id, release_names_to_pool=False)
    await assert_registry_consistent(session)

    await registry.projects.update_project(idea_one.id, {"status": "paused"})
    await registry.projects.delete_project(idea_one.id, release_names_to_pool=True)
    await assert_registry_consistent(session)

    assert (await reload_name(session, birch)).status == AVAILABLE
    assert (await reload_name(session, dogwood)).kept_warm is True
