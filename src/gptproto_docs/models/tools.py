from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SearchDocsInput(BaseModel):
    query: str = Field(..., max_length=500)
    limit: int = Field(20, ge=1, le=100)

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be empty")
        return v


class GetDocInput(BaseModel):
    path: str = Field(..., max_length=1024)

    @field_validator("path")
    @classmethod
    def path_not_empty(cls, v: str) -> str:
        # Paths are matched verbatim, so only emptiness is rejected
        if not v.strip():
            raise ValueError("path must not be empty")
        return v


class ListApisInput(BaseModel):
    vendor: str | None = Field(None, max_length=100)

    @field_validator("vendor")
    @classmethod
    def blank_vendor_means_all(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class SearchResult(BaseModel):
    path: str
    title: str
    description: str
    vendor: str
    model: str
    capability: str


class SearchDocsOutput(BaseModel):
    query: str
    result_count: int
    results: list[SearchResult]
    message: str | None = None
    suggestion: str | None = None


class GetDocOutput(BaseModel):
    path: str
    title: str
    vendor: str
    model: str
    url: str
    content: str


class ApiSummary(BaseModel):
    """One row of a list_apis response.

    For a single vendor, one row per model with its capabilities. For the
    all-vendors listing, ``model`` carries a "<n> models available" summary
    and ``capabilities`` is empty.
    """

    vendor: str
    model: str
    capabilities: list[str]


class VendorListing(BaseModel):
    vendors: list[str]
    apis: list[ApiSummary]


class ListApisOutput(BaseModel):
    vendor: str  # requested vendor, or "all"
    vendors: list[str]
    apis: list[ApiSummary]
