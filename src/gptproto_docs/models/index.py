from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DocEntry(BaseModel):
    """Single documentation page in docs-index.json."""

    model_config = ConfigDict(frozen=True)

    path: str  # e.g. "docs/allapi/OpenAI/gpt-4o/official-format/text-to-text-chat"
    title: str = ""
    description: str = ""
    vendor: str = ""  # e.g. "OpenAI", "Google", "Claude"
    model: str = ""  # e.g. "gpt-4o"
    format: str = ""  # e.g. "official-format", "openai-format"
    capability: str = ""  # e.g. "text-to-text-chat"
    category: str = "api"  # "api", "guide", "quickstart", "getting-started", ...
    content: str = ""  # Full document body

    @field_validator(
        "title", "description", "vendor", "model", "format", "capability", "content",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        # The index builder writes "api" for pages without an explicit category
        return v or "api"


class DocsIndex(BaseModel):
    """Immutable snapshot of the whole documentation index.

    ``vendors`` and ``total_docs`` are always derived from ``entries`` so the
    summary can never disagree with the entries it describes.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = ""
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    total_docs: int = Field(default=0, alias="totalDocs")
    vendors: tuple[str, ...] = ()
    entries: tuple[DocEntry, ...] = ()

    @field_validator("generated_at", mode="before")
    @classmethod
    def blank_timestamp_to_none(cls, v: Any) -> Any:
        return v or None

    @model_validator(mode="before")
    @classmethod
    def derive_summary(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        entries = data.get("entries") or []
        if not isinstance(entries, (list, tuple)):
            return data  # Let field validation report the bad shape

        vendors: set[str] = set()
        for entry in entries:
            if isinstance(entry, DocEntry):
                vendor = entry.vendor
            elif isinstance(entry, dict):
                vendor = entry.get("vendor") or ""
            else:
                continue
            if vendor:
                vendors.add(vendor)

        derived = {k: v for k, v in data.items() if k not in ("total_docs", "totalDocs")}
        derived["vendors"] = sorted(vendors)
        derived["totalDocs"] = len(entries)
        return derived

    @model_validator(mode="after")
    def check_unique_paths(self) -> DocsIndex:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.path in seen:
                raise ValueError(f"Duplicate document path: {entry.path!r}")
            seen.add(entry.path)
        return self
