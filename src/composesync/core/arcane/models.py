"""
Arcane API data models.

Defines Pydantic models for the project records and pagination envelopes
returned by the Arcane projects API. Field names follow Python conventions;
the camelCase JSON names are accepted through aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RemoteProject(BaseModel):
    """
    A project as known to Arcane.

    Names are not unique on the Arcane side, so a single disk project can
    map to several of these records. Timestamps are kept as the raw strings
    Arcane sent; see ``composesync.core.reconcile.selection`` for parsing.

    Example:
        >>> RemoteProject.model_validate({"id": "p1", "name": "web", "updatedAt": ""})
        RemoteProject(id='p1', name='web', ...)
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default="", description="Opaque Arcane project ID")
    name: str = Field(default="", description="Project name")
    status: str = Field(default="", description="Runtime status reported by Arcane")
    status_reason: str = Field(default="", alias="statusReason")
    dir_name: str = Field(default="", alias="dirName")
    path: str = Field(default="")
    compose_content: str = Field(default="", alias="composeContent")
    env_content: str = Field(default="", alias="envContent")
    created_at: str = Field(default="", alias="createdAt")
    updated_at: str = Field(default="", alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: object) -> object:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if v is not None}
        return value


class Pagination(BaseModel):
    """Pagination block of a list response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_page: int = Field(default=0, alias="currentPage")
    grand_total_items: int = Field(default=0, alias="grandTotalItems")
    items_per_page: int = Field(default=0, alias="itemsPerPage")
    total_items: int = Field(default=0, alias="totalItems")
    total_pages: int = Field(default=0, alias="totalPages")

    @property
    def total(self) -> int:
        """
        Best available total count, or 0 when Arcane did not report one.

        ``grandTotalItems`` counts across every page and wins over
        ``totalItems`` when both are present.
        """
        if self.grand_total_items > 0:
            return self.grand_total_items
        if self.total_items > 0:
            return self.total_items
        return 0


class ProjectPage(BaseModel):
    """One page of ``GET /projects``."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: list[RemoteProject] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    @field_validator("data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value: object) -> object:
        # Arcane sends "data": null for an empty environment
        return [] if value is None else value


class CreatedProject(BaseModel):
    """The ``data`` part of a create response."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""


class CreateResponse(BaseModel):
    """Envelope of ``POST /projects``."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: CreatedProject = Field(default_factory=CreatedProject)
