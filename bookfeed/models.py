"""Data models for the book feed."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import quote, urlencode


COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
PLACEHOLDER_COVER_URL = "https://via.placeholder.com/260x380?text=No+Image"


class Category(str, Enum):
    """Browsable subject categories."""
    ALL = "all"
    FICTION = "fiction"
    HISTORY = "history"
    SCIENCE = "science"
    FANTASY = "fantasy"


class Endpoint(str, Enum):
    """Remote query kinds."""
    SEARCH_BY_TITLE = "search_by_title"
    SEARCH_BY_SUBJECT_CATEGORY = "search_by_subject_category"
    DEFAULT_BROWSE = "default_browse"


@dataclass(frozen=True)
class FilterSignature:
    """Category plus search term identifying one browsing context."""
    category: Category = Category.ALL
    search_term: str = ""

    def __post_init__(self):
        # Accept plain strings ("science") as well as Category members
        object.__setattr__(self, "category", Category(self.category))


@dataclass(frozen=True)
class PageRequest:
    """A resolved remote query for one page of records."""
    endpoint: Endpoint
    offset: int
    limit: int
    base_url: str
    search_term: Optional[str] = None
    category: Optional[Category] = None

    @property
    def path(self) -> str:
        if self.endpoint is Endpoint.SEARCH_BY_SUBJECT_CATEGORY:
            return f"/subjects/{self.category.value}.json"
        return "/search.json"

    @property
    def params(self) -> Dict[str, str]:
        """Query parameters in the order the catalog documents them."""
        params: Dict[str, str] = {}
        if self.endpoint is Endpoint.SEARCH_BY_TITLE:
            params["title"] = self.search_term
        elif self.endpoint is Endpoint.DEFAULT_BROWSE:
            params["q"] = "book"
        params["limit"] = str(self.limit)
        params["offset"] = str(self.offset)
        return params

    @property
    def url(self) -> str:
        # quote (not quote_plus) so spaces become %20
        query = urlencode(self.params, quote_via=quote, safe="")
        return f"{self.base_url}{self.path}?{query}"

    @property
    def records_field(self) -> str:
        """Name of the response field holding the record array."""
        if self.endpoint is Endpoint.SEARCH_BY_SUBJECT_CATEGORY:
            return "works"
        return "docs"


@dataclass
class BookRecord:
    """Normalized book representation."""
    id: str
    title: str
    authors: List[str] = field(default_factory=list)
    cover_image_id: Optional[str] = None
    subjects: Optional[List[str]] = None
    first_publish_year: Optional[int] = None
    detail_key: Optional[str] = None
    subtitle: Optional[str] = None
    first_sentence: Optional[str] = None

    @property
    def authors_str(self) -> str:
        """Format authors as comma-separated string."""
        return ", ".join(self.authors) if self.authors else "Unknown"

    @property
    def subjects_str(self) -> str:
        """Format subjects as comma-separated string."""
        return ", ".join(self.subjects) if self.subjects else "Unknown"

    @property
    def cover_url(self) -> str:
        """Large cover image URL, or the placeholder when there is no cover."""
        if self.cover_image_id:
            return COVER_URL_TEMPLATE.format(cover_id=self.cover_image_id)
        return PLACEHOLDER_COVER_URL


@dataclass
class BookDetail:
    """Enrichment data for the detail view of a single work."""
    key: str
    title: Optional[str] = None
    description: Optional[str] = None
    subjects: List[str] = field(default_factory=list)
    first_publish_date: Optional[str] = None
    covers: List[int] = field(default_factory=list)
