"""File-backed declarative host: desired config, recorded state, plan and apply."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from tableau_projects.client.errors import (
    ConfigurationError,
    CreatedNotVisibleError,
    NotFoundError,
    ValidationError,
)
from tableau_projects.config.constants import STATE_FORMAT_VERSION
from tableau_projects.resource.controller import ResourceController
from tableau_projects.resource.state import DesiredProject, ProjectState

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"
DELETE = "delete"
NOOP = "no-op"


class StateDocument(BaseModel):
    """Everything the host has recorded, keyed by resource address."""

    version: int = STATE_FORMAT_VERSION
    resources: dict[str, ProjectState] = Field(default_factory=dict)
    # Addresses created on the server but not yet seen in the listing
    unconfirmed: list[str] = Field(default_factory=list)


class StateFile:
    """JSON state file, written atomically."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> StateDocument:
        if not self.path.exists():
            return StateDocument()
        try:
            doc = StateDocument.model_validate_json(self.path.read_bytes())
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid state file {self.path}: {exc}") from exc
        if doc.version != STATE_FORMAT_VERSION:
            raise ConfigurationError(
                f"Unsupported state file version {doc.version} in {self.path}"
            )
        return doc

    def save(self, doc: StateDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp = self.path.with_suffix(self.path.suffix + ".tmp")
        temp.write_text(doc.model_dump_json(indent=2, exclude_none=True) + "\n")
        os.replace(temp, self.path)


def load_desired(path: Path) -> dict[str, ProjectState]:
    """Read ``[projects.<address>]`` tables from a TOML file."""
    if not path.exists():
        raise ConfigurationError(f"Desired configuration not found: {path}")
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
    desired: dict[str, ProjectState] = {}
    for address, attrs in data.get("projects", {}).items():
        try:
            desired[address] = DesiredProject.model_validate(attrs).to_state()
        except PydanticValidationError as exc:
            raise ValidationError(f"projects.{address}: {_first_error(exc)}") from exc
    return desired


def _first_error(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


def needs_update(recorded: ProjectState, desired: ProjectState) -> bool:
    """Whether recorded state has drifted from the declared attributes.

    The owner is only compared when one is declared; otherwise the server
    assigns it and whatever it reports is kept.
    """
    if (
        recorded.name != desired.name
        or recorded.description != desired.description
        or recorded.content_permissions != desired.content_permissions
        or (recorded.parent_project_id or "") != (desired.parent_project_id or "")
    ):
        return True
    return desired.owner_id is not None and recorded.owner_id != desired.owner_id


@dataclass
class Change:
    """One planned action for one resource address."""

    address: str
    action: str
    before: ProjectState | None = None
    after: ProjectState | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "action": self.action,
            "before": self.before.model_dump(exclude_none=True) if self.before else None,
            "after": self.after.model_dump(exclude_none=True) if self.after else None,
        }


class Reconciler:
    """Converge recorded state toward a desired configuration."""

    def __init__(
        self,
        controller: ResourceController[ProjectState],
        state_file: StateFile,
    ) -> None:
        self.controller = controller
        self.state_file = state_file

    def refresh(self, doc: StateDocument | None = None, *, save: bool = True) -> StateDocument:
        """Re-read every tracked resource; drop the ones deleted outside."""
        if doc is None:
            doc = self.state_file.load()
        refreshed: dict[str, ProjectState] = {}
        unconfirmed: list[str] = []
        for address, state in doc.resources.items():
            try:
                refreshed[address] = self.controller.read(state)
            except NotFoundError:
                if address in doc.unconfirmed:
                    logger.warning("%s (%s) is still not listed; keeping it", address, state.id)
                    refreshed[address] = state
                    unconfirmed.append(address)
                else:
                    logger.warning("%s (%s) no longer exists; removing from state", address, state.id)
        doc = doc.model_copy(update={"resources": refreshed, "unconfirmed": unconfirmed})
        if save:
            self.state_file.save(doc)
        return doc

    def plan(
        self,
        desired: dict[str, ProjectState],
        doc: StateDocument | None = None,
    ) -> list[Change]:
        doc = doc if doc is not None else self.refresh(save=False)
        changes: list[Change] = []
        for address, wanted in desired.items():
            recorded = doc.resources.get(address)
            if recorded is None:
                changes.append(Change(address, CREATE, after=wanted))
            elif needs_update(recorded, wanted):
                if wanted.owner_id is None:
                    # An undeclared owner keeps the one the server assigned
                    wanted = wanted.model_copy(update={"owner_id": recorded.owner_id})
                changes.append(Change(address, UPDATE, before=recorded, after=wanted))
            else:
                changes.append(Change(address, NOOP, before=recorded, after=recorded))
        for address, recorded in doc.resources.items():
            if address not in desired:
                changes.append(Change(address, DELETE, before=recorded))
        return changes

    def apply(
        self,
        desired: dict[str, ProjectState],
        doc: StateDocument | None = None,
    ) -> list[Change]:
        """Plan against freshly read state and carry the plan out.

        Pass the *doc* a plan was shown for to carry out exactly that plan
        instead of reading the server again.

        State is saved after every change so a failure part way through keeps
        what already happened on the server. A project whose create succeeded
        but which never showed up in the listing is recorded before the error
        propagates, and kept by later refreshes until it is listed.
        """
        if doc is None:
            doc = self.refresh()
        changes = self.plan(desired, doc)
        for change in changes:
            if change.action == NOOP:
                continue
            logger.info("%s: %s", change.address, change.action)
            if change.action == CREATE and change.after is not None:
                try:
                    doc.resources[change.address] = self.controller.create(change.after)
                except CreatedNotVisibleError as exc:
                    if exc.state is not None:
                        doc.resources[change.address] = exc.state
                        doc.unconfirmed.append(change.address)
                        self.state_file.save(doc)
                    raise
            elif change.action == UPDATE and change.before and change.after:
                doc.resources[change.address] = self.controller.update(
                    change.before, change.after,
                )
            elif change.action == DELETE and change.before is not None:
                self.controller.delete(change.before)
                del doc.resources[change.address]
                if change.address in doc.unconfirmed:
                    doc.unconfirmed.remove(change.address)
            self.state_file.save(doc)
        return changes

    def import_resource(self, address: str, identifier: str) -> ProjectState:
        doc = self.state_file.load()
        if address in doc.resources:
            raise ValidationError(f"{address} is already tracked; remove it from state first.")
        state = self.controller.import_state(identifier)
        doc.resources[address] = state
        self.state_file.save(doc)
        return state

    def destroy(self) -> list[Change]:
        """Delete every tracked project still on the server."""
        doc = self.refresh()
        changes: list[Change] = []
        for address in list(doc.resources):
            state = doc.resources[address]
            self.controller.delete(state)
            del doc.resources[address]
            if address in doc.unconfirmed:
                doc.unconfirmed.remove(address)
            self.state_file.save(doc)
            changes.append(Change(address, DELETE, before=state))
        return changes
