"""Query engine: ranked search, exact path lookup and vendor listings.

Pure functions over an immutable DocsIndex snapshot. No I/O and no shared
state, so they are safe to call concurrently on the same snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gptproto_docs.config import SearchWeights
from gptproto_docs.errors import DocsError, ErrorCode
from gptproto_docs.models.tools import ApiSummary, VendorListing

if TYPE_CHECKING:
    from gptproto_docs.models.index import DocEntry, DocsIndex

DEFAULT_SEARCH_LIMIT = 20
_DEFAULT_WEIGHTS = SearchWeights()


def tokenise_query(query: str) -> list[str]:
    """Lowercase and split on whitespace, dropping empty tokens."""
    return query.lower().split()


def score_entry(
    entry: DocEntry,
    terms: list[str],
    weights: SearchWeights = _DEFAULT_WEIGHTS,
) -> int:
    """Score one entry against already-tokenised query terms.

    Every field a term is found in adds its weight; bonuses accumulate
    across fields and across terms.
    """
    model = entry.model.lower()
    vendor = entry.vendor.lower()
    title = entry.title.lower()
    capability = entry.capability.lower()
    description = entry.description.lower()
    searchable = " ".join(
        [entry.title, entry.description, entry.path, entry.vendor, entry.model, entry.capability]
    ).lower()

    score = 0
    for term in terms:
        if term in model:
            score += weights.model
        if term in vendor:
            score += weights.vendor
        if term in title:
            score += weights.title
        if term in capability:
            score += weights.capability
        if term in description:
            score += weights.description
        if term in searchable:
            score += weights.anywhere
    return score


def search(
    index: DocsIndex,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    weights: SearchWeights = _DEFAULT_WEIGHTS,
) -> list[DocEntry]:
    """Return up to ``limit`` entries ranked by descending score.

    Entries scoring zero are dropped. Ties keep index order (``sorted`` is
    stable), so results are deterministic for a given snapshot and query.
    An empty or whitespace-only query matches nothing.
    """
    terms = tokenise_query(query)
    if not terms or limit <= 0:
        return []

    scored: list[tuple[int, DocEntry]] = []
    for entry in index.entries:
        score = score_entry(entry, terms, weights)
        if score > 0:
            scored.append((score, entry))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in scored[:limit]]


def get_by_path(index: DocsIndex, path: str) -> DocEntry:
    """Exact-match lookup on ``path``. Raises DOCUMENT_NOT_FOUND on a miss."""
    for entry in index.entries:
        if entry.path == path:
            return entry
    raise DocsError(
        code=ErrorCode.DOCUMENT_NOT_FOUND,
        message=f"Document not found: {path}",
        suggestion="Use search_docs to find a valid document path.",
        recoverable=True,
    )


def list_by_vendor(index: DocsIndex, vendor: str | None = None) -> VendorListing:
    """List API models, either for one vendor or summarised across all vendors."""
    if vendor:
        return _list_single_vendor(index, vendor)
    return _list_all_vendors(index)


def _list_single_vendor(index: DocsIndex, vendor: str) -> VendorListing:
    vendor_lower = vendor.lower()
    matching = [
        entry
        for entry in index.entries
        if entry.category == "api" and entry.vendor.lower() == vendor_lower
    ]

    # dicts keep first-seen model order
    capabilities_by_model: dict[str, set[str]] = {}
    for entry in matching:
        capabilities = capabilities_by_model.setdefault(entry.model, set())
        if entry.capability:
            capabilities.add(entry.capability)

    display_vendor = matching[0].vendor if matching else vendor
    apis = [
        ApiSummary(vendor=display_vendor, model=model, capabilities=sorted(capabilities))
        for model, capabilities in capabilities_by_model.items()
    ]
    return VendorListing(vendors=[vendor], apis=apis)


def _list_all_vendors(index: DocsIndex) -> VendorListing:
    models_by_vendor: dict[str, set[str]] = {}
    for entry in index.entries:
        if entry.vendor and entry.category == "api":
            models_by_vendor.setdefault(entry.vendor, set()).add(entry.model)

    apis = [
        ApiSummary(vendor=vendor, model=f"{len(models)} models available", capabilities=[])
        for vendor, models in models_by_vendor.items()
    ]
    return VendorListing(vendors=list(index.vendors), apis=apis)
