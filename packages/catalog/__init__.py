"""Client-side catalog pipeline: snapshot store, filter engine and paginator."""

from packages.catalog.filter_engine import filter_records
from packages.catalog.paginator import ELLIPSIS, Page, build_page, page_tokens, paginate, total_pages
from packages.catalog.store import CatalogSnapshot, CatalogStore

# Export public API
__all__ = [
    "CatalogSnapshot",
    "CatalogStore",
    "ELLIPSIS",
    "Page",
    "build_page",
    "filter_records",
    "page_tokens",
    "paginate",
    "total_pages",
]
