"""Pydantic data models for the Tableau REST API."""

from tableau_projects.models.common import ErrorDetail, PaginationDetails
from tableau_projects.models.project import (
    ContentPermissions,
    Owner,
    Project,
    ProjectEnvelope,
    ProjectListResponse,
)

__all__ = [
    "ContentPermissions",
    "ErrorDetail",
    "Owner",
    "PaginationDetails",
    "Project",
    "ProjectEnvelope",
    "ProjectListResponse",
]
