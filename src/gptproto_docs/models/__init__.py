from __future__ import annotations

from gptproto_docs.models.index import DocEntry, DocsIndex
from gptproto_docs.models.tools import (
    ApiSummary,
    GetDocInput,
    GetDocOutput,
    ListApisInput,
    ListApisOutput,
    SearchDocsInput,
    SearchDocsOutput,
    SearchResult,
    VendorListing,
)

__all__ = [
    # index
    "DocEntry",
    "DocsIndex",
    # tools
    "SearchDocsInput",
    "SearchDocsOutput",
    "SearchResult",
    "GetDocInput",
    "GetDocOutput",
    "ListApisInput",
    "ListApisOutput",
    "ApiSummary",
    "VendorListing",
]
