"""Tests for REST payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tableau_projects.models import (
    ContentPermissions,
    PaginationDetails,
    Project,
    ProjectListResponse,
)


class TestPaginationDetails:
    def test_string_numbers_are_coerced(self):
        p = PaginationDetails.model_validate(
            {"pageNumber": "1", "pageSize": "100", "totalAvailable": "250"}
        )
        assert p.page_number == 1
        assert p.page_size == 100
        assert p.total_available == 250
        assert p.total_page_count == 3

    @pytest.mark.parametrize(
        ("total", "size", "pages"),
        [(0, 100, 0), (1, 100, 1), (100, 100, 1), (101, 100, 2), (5, 2, 3)],
    )
    def test_total_page_count(self, total, size, pages):
        p = PaginationDetails(page_number=1, page_size=size, total_available=total)
        assert p.total_page_count == pages

    def test_explicit_total_page_count_wins(self):
        p = PaginationDetails.model_validate(
            {"pageNumber": 1, "totalAvailable": 5, "totalPageCount": 4}
        )
        assert p.total_page_count == 4

    def test_unparseable_number(self):
        with pytest.raises(ValidationError):
            PaginationDetails.model_validate(
                {"pageNumber": "one", "pageSize": "100", "totalAvailable": "5"}
            )

    def test_zero_page_size_with_items(self):
        with pytest.raises(ValidationError, match="pageSize must be positive"):
            PaginationDetails.model_validate(
                {"pageNumber": "1", "pageSize": "0", "totalAvailable": "5"}
            )

    def test_negative_total(self):
        with pytest.raises(ValidationError):
            PaginationDetails.model_validate(
                {"pageNumber": "1", "pageSize": "10", "totalAvailable": "-1"}
            )


class TestProject:
    def test_camel_case_aliases(self):
        p = Project.model_validate({
            "id": "p-1",
            "name": "Sales",
            "parentProjectId": "p-0",
            "contentPermissions": "LockedToProject",
            "owner": {"id": "u-1"},
            "createdAt": "2024-01-01T00:00:00Z",
        })
        assert p.parent_project_id == "p-0"
        assert p.content_permissions == "LockedToProject"
        assert p.owner.id == "u-1"

    def test_defaults_are_empty(self):
        p = Project.model_validate({"id": "p-1", "name": "Top"})
        assert p.parent_project_id == ""
        assert p.description == ""
        assert p.owner.id == ""

    def test_dump_by_alias(self):
        p = Project(name="A", parent_project_id="p-0")
        dumped = p.model_dump(by_alias=True)
        assert dumped["parentProjectId"] == "p-0"
        assert dumped["owner"] == {"id": ""}


class TestProjectListResponse:
    def test_empty_projects_object(self):
        r = ProjectListResponse.model_validate({
            "pagination": {"pageNumber": "1", "pageSize": "100", "totalAvailable": "0"},
            "projects": {},
        })
        assert r.projects.project == []


class TestContentPermissions:
    def test_values(self):
        assert {c.value for c in ContentPermissions} == {
            "LockedToProject",
            "ManagedByOwner",
            "LockedToProjectWithoutNested",
        }
