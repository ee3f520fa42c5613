"""Tests for query resolution."""
import pytest

from bookfeed.models import Category, Endpoint, FilterSignature
from bookfeed.query import PAGE_SIZE, resolve


def test_search_term_wins_over_category():
    """A search term always selects title search, whatever the category."""
    request = resolve(FilterSignature(category="fantasy", search_term="dune"), 0)

    assert request.endpoint is Endpoint.SEARCH_BY_TITLE
    assert request.url == "https://openlibrary.org/search.json?title=dune&limit=40&offset=0"


def test_category_browse():
    """A non-"all" category without search browses the subject."""
    request = resolve(FilterSignature(category="science"), 80)

    assert request.endpoint is Endpoint.SEARCH_BY_SUBJECT_CATEGORY
    assert request.category is Category.SCIENCE
    assert request.records_field == "works"
    assert request.url == "https://openlibrary.org/subjects/science.json?limit=40&offset=80"


def test_default_browse():
    """No search and category "all" uses the default query."""
    request = resolve(FilterSignature(), 40)

    assert request.endpoint is Endpoint.DEFAULT_BROWSE
    assert request.records_field == "docs"
    assert request.url == "https://openlibrary.org/search.json?q=book&limit=40&offset=40"


def test_search_term_is_url_encoded():
    """Spaces and reserved characters are percent-encoded."""
    request = resolve(FilterSignature(search_term="war & peace/2"), 0)

    assert request.url == (
        "https://openlibrary.org/search.json?title=war%20%26%20peace%2F2&limit=40&offset=0"
    )


def test_fixed_page_size_for_every_endpoint():
    """Offsets advance uniformly because every kind uses the same limit."""
    signatures = [
        FilterSignature(search_term="x"),
        FilterSignature(category="history"),
        FilterSignature(),
    ]

    assert {resolve(s, 0).limit for s in signatures} == {PAGE_SIZE}
    assert PAGE_SIZE == 40


def test_custom_base_url():
    """The catalog root can be pointed elsewhere."""
    request = resolve(FilterSignature(), 0, base_url="http://localhost:8080/")

    assert request.url == "http://localhost:8080/search.json?q=book&limit=40&offset=0"


def test_negative_offset_rejected():
    """Offsets are non-negative."""
    with pytest.raises(ValueError):
        resolve(FilterSignature(), -40)


def test_filter_signature_equality_and_validation():
    """Signatures compare structurally and only accept known categories."""
    assert FilterSignature("science", "") == FilterSignature(Category.SCIENCE)
    assert FilterSignature("all", "dune") != FilterSignature("all", "Dune")

    with pytest.raises(ValueError):
        FilterSignature(category="poetry")
