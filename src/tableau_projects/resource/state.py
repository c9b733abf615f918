"""Declarative project attributes and their mapping to/from the REST entity."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tableau_projects.models.project import ContentPermissions, Owner, Project

# RFC 850 layout, e.g. "Monday, 02-Jan-06 15:04:05 UTC"
LAST_UPDATED_FORMAT = "%A, %d-%b-%y %H:%M:%S %Z"


class ProjectState(BaseModel):
    """Attributes of one project as the declarative host records them."""

    id: str | None = None
    name: str = ""
    parent_project_id: str | None = None
    description: str = ""
    content_permissions: str = ""
    owner_id: str | None = None
    last_updated: str | None = None


class DesiredProject(BaseModel):
    """A project as declared in the desired configuration file."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    name: str = Field(min_length=1, description="Display name for project")
    parent_project_id: str | None = Field(
        default=None, description="Identifier for the parent project",
    )
    description: str = Field(default="", description="Description for the project")
    content_permissions: ContentPermissions = Field(
        description="Permissions for the project content",
    )
    owner_id: str | None = Field(
        default=None, description="Identifier for the project owner",
    )

    def to_state(self, project_id: str | None = None) -> ProjectState:
        return ProjectState(id=project_id, **self.model_dump())


def to_project(state: ProjectState) -> Project:
    """Desired attributes in the shape the CRUD operations expect."""
    return Project(
        id=state.id or "",
        name=state.name,
        parent_project_id=state.parent_project_id or "",
        description=state.description,
        content_permissions=state.content_permissions,
        owner=Owner(id=state.owner_id or ""),
    )


def refresh_state(state: ProjectState, observed: Project) -> ProjectState:
    """Copy an observed project onto recorded state.

    The parent is only copied when the server reports one; an empty observed
    parent leaves the recorded value alone. Every other field is copied as is,
    empty or not.
    """
    updates: dict[str, str] = {
        "id": observed.id,
        "name": observed.name,
        "description": observed.description,
        "content_permissions": observed.content_permissions,
        "owner_id": observed.owner.id,
    }
    if observed.parent_project_id != "":
        updates["parent_project_id"] = observed.parent_project_id
    return state.model_copy(update=updates)


def stamp(state: ProjectState, now: datetime | None = None) -> ProjectState:
    """Record the time of the last create or update."""
    now = now or datetime.now().astimezone()
    return state.model_copy(update={"last_updated": now.strftime(LAST_UPDATED_FORMAT)})
