"""Resource controller: the create/read/update/delete/import capability set.

Controllers know nothing about the host that drives them. They take and
return declarative state objects and let errors from the client propagate;
the host decides what a NotFoundError on read means for its tracked state.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from tableau_projects.client.errors import CreatedNotVisibleError, ValidationError
from tableau_projects.client.projects import ProjectsAPI
from tableau_projects.models.project import Project
from tableau_projects.resource.state import (
    ProjectState,
    refresh_state,
    stamp,
    to_project,
)

S = TypeVar("S")

logger = logging.getLogger(__name__)


class ResourceController(Protocol[S]):
    """Capabilities a declarative host needs to converge one resource type."""

    def create(self, desired: S) -> S: ...

    def read(self, state: S) -> S: ...

    def update(self, state: S, desired: S) -> S: ...

    def delete(self, state: S) -> None: ...

    def import_state(self, identifier: str) -> S: ...


class ProjectController:
    """ResourceController for Tableau projects."""

    def __init__(self, api: ProjectsAPI) -> None:
        self.api = api

    def create(self, desired: ProjectState) -> ProjectState:
        draft = to_project(desired)
        try:
            created = self.api.create_project(
                draft.name,
                draft.parent_project_id,
                draft.description,
                draft.content_permissions,
                draft.owner.id,
            )
        except CreatedNotVisibleError as exc:
            exc.state = _created_state(desired, exc.project)
            raise
        return _created_state(desired, created)

    def read(self, state: ProjectState) -> ProjectState:
        project_id = _require_id(state)
        observed = self.api.get_project(project_id)
        return refresh_state(state, observed)

    def update(self, state: ProjectState, desired: ProjectState) -> ProjectState:
        project_id = _require_id(state)
        draft = to_project(desired)
        self.api.update_project(
            project_id,
            draft.name,
            draft.parent_project_id,
            draft.description,
            draft.content_permissions,
            draft.owner.id,
        )
        # The PUT response is not trusted for refresh; read the listing back
        observed = self.api.get_project(project_id)
        base = desired.model_copy(update={"id": project_id})
        return stamp(refresh_state(base, observed))

    def delete(self, state: ProjectState) -> None:
        self.api.delete_project(_require_id(state))

    def import_state(self, identifier: str) -> ProjectState:
        logger.debug("Importing project %s", identifier)
        return self.read(ProjectState(id=identifier))


def _require_id(state: ProjectState) -> str:
    if not state.id:
        raise ValidationError("Project state has no ID; create or import it first.")
    return state.id


def _created_state(desired: ProjectState, created: Project) -> ProjectState:
    state = desired.model_copy(
        update={"id": created.id, "owner_id": created.owner.id},
    )
    return stamp(state)
