"""Project-related data models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from tableau_projects.models.common import PaginationDetails, TableauModel


class ContentPermissions(str, Enum):
    """Who may manage permissions on content inside a project."""

    LOCKED_TO_PROJECT = "LockedToProject"
    MANAGED_BY_OWNER = "ManagedByOwner"
    LOCKED_TO_PROJECT_WITHOUT_NESTED = "LockedToProjectWithoutNested"


class Owner(TableauModel):
    """Reference to the user that owns a project."""

    id: str = ""


class Project(TableauModel):
    """A project on the server."""

    id: str = ""
    name: str = ""
    parent_project_id: str = ""
    description: str = ""
    content_permissions: str = ""
    owner: Owner = Field(default_factory=Owner)


class ProjectEnvelope(TableauModel):
    """Request and create/update response body: ``{"project": {...}}``."""

    project: Project


class ProjectCollection(TableauModel):
    project: list[Project] = Field(default_factory=list)


class ProjectListResponse(TableauModel):
    """One page of ``GET /projects``."""

    projects: ProjectCollection = Field(default_factory=ProjectCollection)
    pagination: PaginationDetails
