"""Resolve a filter signature and offset into a remote page query."""
from bookfeed.models import Category, Endpoint, FilterSignature, PageRequest

PAGE_SIZE = 40
DEFAULT_BASE_URL = "https://openlibrary.org"


def resolve(
    signature: FilterSignature,
    offset: int,
    base_url: str = DEFAULT_BASE_URL
) -> PageRequest:
    """
    Build the page request for a browsing context.

    A non-empty search term always wins over the category; a category
    other than "all" browses that subject; otherwise the default browse
    query is used. Every request kind uses the same page size so offsets
    advance uniformly.

    Args:
        signature: Active category and search term
        offset: Index of the first record to fetch
        base_url: Catalog root, without trailing slash

    Returns:
        PageRequest for the given offset
    """
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")

    base_url = base_url.rstrip("/")

    if signature.search_term:
        return PageRequest(
            endpoint=Endpoint.SEARCH_BY_TITLE,
            offset=offset,
            limit=PAGE_SIZE,
            base_url=base_url,
            search_term=signature.search_term
        )

    if signature.category is not Category.ALL:
        return PageRequest(
            endpoint=Endpoint.SEARCH_BY_SUBJECT_CATEGORY,
            offset=offset,
            limit=PAGE_SIZE,
            base_url=base_url,
            category=signature.category
        )

    return PageRequest(
        endpoint=Endpoint.DEFAULT_BROWSE,
        offset=offset,
        limit=PAGE_SIZE,
        base_url=base_url
    )
