"""Common response models."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TableauModel(BaseModel):
    """Base for REST payloads: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(TableauModel):
    """Error body returned by the server: ``{"error": {...}}``."""

    summary: str = ""
    detail: str = ""
    code: str | int | None = None


class PaginationDetails(TableauModel):
    """Pagination envelope accompanying every listing response.

    The server sends the numbers as strings; they are coerced to integers and
    anything unparseable fails validation.
    """

    page_number: int = Field(ge=1)
    page_size: int = Field(default=0, ge=0)
    total_available: int = Field(ge=0)
    total_page_count_hint: int | None = Field(
        default=None, ge=0, alias="totalPageCount",
    )

    @model_validator(mode="after")
    def _check_page_size(self) -> PaginationDetails:
        if self.total_page_count_hint is None and self.total_available and not self.page_size:
            raise ValueError("pageSize must be positive when items are available")
        return self

    @property
    def total_page_count(self) -> int:
        if self.total_page_count_hint is not None:
            return self.total_page_count_hint
        if not self.total_available:
            return 0
        return math.ceil(self.total_available / self.page_size)
