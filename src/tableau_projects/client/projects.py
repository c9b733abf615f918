"""Project CRUD operations on top of the server transport."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)
from tenacity.wait import wait_base

from tableau_projects.client.errors import (
    CreatedNotVisibleError,
    DecodeError,
    NotFoundError,
)
from tableau_projects.client.pagination import Page, PageScanner
from tableau_projects.client.server import ServerClient
from tableau_projects.models.project import (
    Owner,
    Project,
    ProjectEnvelope,
    ProjectListResponse,
)

logger = logging.getLogger(__name__)

PROJECTS_PATH = "/projects"


def decode_project_page(body: bytes) -> Page[Project]:
    """Decode one ``GET /projects`` page, envelope included."""
    try:
        data = ProjectListResponse.model_validate_json(body)
    except PydanticValidationError as exc:
        raise DecodeError(f"Malformed project listing: {exc}") from exc
    return Page(items=data.projects.project, pagination=data.pagination)


def decode_project(body: bytes) -> Project:
    """Decode a ``{"project": {...}}`` body."""
    try:
        return ProjectEnvelope.model_validate_json(body).project
    except PydanticValidationError as exc:
        raise DecodeError(f"Malformed project response: {exc}") from exc


class ProjectsAPI:
    """List, find, create, update and delete projects on one site.

    After a create the new project is read back until the listing shows it,
    with exponential backoff bounded by ``settle_attempts`` and
    ``settle_max_delay`` from the server profile.
    """

    def __init__(
        self,
        client: ServerClient,
        *,
        settle_wait: wait_base | None = None,
    ) -> None:
        self.client = client
        profile = client.profile
        self.page_size = profile.page_size
        self.settle_attempts = profile.settle_attempts
        self.settle_max_delay = profile.settle_max_delay
        self.settle_wait = settle_wait or wait_exponential(multiplier=0.25, max=4)

    def scanner(self) -> PageScanner[Project]:
        return PageScanner(
            self.client,
            PROJECTS_PATH,
            decode_project_page,
            page_size=self.page_size,
            kind="project",
        )

    def list_projects(self) -> list[Project]:
        return self.scanner().collect_all()

    def get_project(self, project_id: str) -> Project:
        return self.scanner().find_by_id(project_id)

    def create_project(
        self,
        name: str,
        parent_project_id: str = "",
        description: str = "",
        content_permissions: str = "",
        owner_id: str = "",
    ) -> Project:
        """Create a project and wait until it is visible in the listing.

        Empty optional fields are left out of the request, and the owner is
        only attached when *owner_id* is given.
        """
        draft = Project(
            name=name,
            parent_project_id=parent_project_id,
            description=description,
            content_permissions=content_permissions,
        )
        fields = draft.model_dump(by_alias=True, exclude={"id", "owner"})
        payload: dict[str, Any] = {key: value for key, value in fields.items() if value}
        if owner_id:
            payload["owner"] = Owner(id=owner_id).model_dump(by_alias=True)

        body = self.client.execute("POST", PROJECTS_PATH, {"project": payload})
        created = decode_project(body)
        if not created.id:
            raise DecodeError("Create response did not include a project ID")
        logger.info("Created project %s (%s)", created.id, created.name)

        try:
            self._settle(created.id)
        except NotFoundError as exc:
            raise CreatedNotVisibleError(created) from exc
        return created

    def _settle(self, project_id: str) -> None:
        if self.settle_attempts <= 0:
            return
        retrying = Retrying(
            stop=stop_after_attempt(self.settle_attempts)
            | stop_after_delay(self.settle_max_delay),
            wait=self.settle_wait,
            retry=retry_if_exception_type(NotFoundError),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        )
        retrying(self.get_project, project_id)

    def update_project(
        self,
        project_id: str,
        name: str,
        parent_project_id: str,
        description: str,
        content_permissions: str,
        owner_id: str,
    ) -> Project:
        """Replace all five fields of a project, owner included even when empty."""
        replacement = Project(
            name=name,
            parent_project_id=parent_project_id,
            description=description,
            content_permissions=content_permissions,
            owner=Owner(id=owner_id),
        )
        payload = replacement.model_dump(by_alias=True, exclude={"id"})
        body = self.client.execute(
            "PUT", f"{PROJECTS_PATH}/{project_id}", {"project": payload},
        )
        updated = decode_project(body)
        logger.info("Updated project %s", project_id)
        return updated

    def delete_project(self, project_id: str) -> None:
        self.client.execute("DELETE", f"{PROJECTS_PATH}/{project_id}")
        logger.info("Deleted project %s", project_id)
