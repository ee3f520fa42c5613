"""Parse and normalize Open Library API responses."""
import logging
from typing import Any, Dict, List, Optional

from bookfeed.errors import ResponseError
from bookfeed.models import BookDetail, BookRecord, PageRequest

logger = logging.getLogger(__name__)

OPENLIBRARY_URL = "https://openlibrary.org"
NO_DESCRIPTION = "No description available."


def _string_list(value: Any) -> List[str]:
    """Keep only string entries; a bare string becomes a one-item list."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def _parse_authors(raw: Dict[str, Any]) -> List[str]:
    # Subject endpoint: [{"key": ..., "name": ...}]; search endpoint: ["name"]
    # Edition/work JSON may list authors by key only, without names
    authors = raw.get("authors")
    names = []
    if isinstance(authors, list):
        names = [
            a["name"] for a in authors
            if isinstance(a, dict) and isinstance(a.get("name"), str)
        ]
    return names or _string_list(raw.get("author_name"))


def _parse_cover_id(raw: Dict[str, Any]) -> Optional[str]:
    for field_name in ("cover_id", "cover_i"):
        value = raw.get(field_name)
        # bool is an int subclass
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return str(value)
        if isinstance(value, str) and value.isdigit():
            return value
    return None


def _record_id(
    raw: Dict[str, Any],
    title: str,
    authors: List[str],
    year: Optional[int],
    cover_id: Optional[str]
) -> str:
    key = raw.get("key")
    if isinstance(key, str) and key:
        return key

    edition_keys = _string_list(raw.get("edition_key"))
    if edition_keys:
        return edition_keys[0]

    cover_edition_key = raw.get("cover_edition_key")
    if isinstance(cover_edition_key, str) and cover_edition_key:
        return cover_edition_key

    # Stable across pages so the same record dedups
    parts = [title.strip().lower()] + [a.strip().lower() for a in authors]
    parts += [str(year or ""), cover_id or ""]
    return "|".join(parts)


def parse_record(raw: Dict[str, Any]) -> Optional[BookRecord]:
    """
    Parse a single record from either the search or the subjects endpoint.

    Args:
        raw: One entry of a ``docs`` or ``works`` array

    Returns:
        BookRecord or None if the entry has no usable title
    """
    if not isinstance(raw, dict):
        logger.warning(f"Skipping non-object record: {raw!r}")
        return None

    title = raw.get("title")
    if not isinstance(title, str) or not title:
        logger.warning(f"Skipping record without title: {raw.get('key')}")
        return None

    authors = _parse_authors(raw)

    subjects = _string_list(raw.get("subject")) or _string_list(raw.get("subjects"))

    year = raw.get("first_publish_year")
    if not isinstance(year, int) or isinstance(year, bool):
        year = None

    key = raw.get("key")
    detail_key = key if isinstance(key, str) and key else None

    subtitle = raw.get("subtitle")
    first_sentence = _string_list(raw.get("first_sentence"))
    cover_id = _parse_cover_id(raw)

    return BookRecord(
        id=_record_id(raw, title, authors, year, cover_id),
        title=title,
        authors=authors,
        cover_image_id=cover_id,
        subjects=subjects or None,
        first_publish_year=year,
        detail_key=detail_key,
        subtitle=subtitle if isinstance(subtitle, str) and subtitle else None,
        first_sentence=" ".join(first_sentence) or None
    )


def parse_page_response(payload: Dict[str, Any], request: PageRequest) -> List[BookRecord]:
    """
    Parse a full page response.

    Args:
        payload: Decoded JSON body
        request: The request that produced it (selects ``docs`` or ``works``)

    Returns:
        List of BookRecord objects in received order (empty at end of results)

    Raises:
        ResponseError: if the record array is missing or not a list
    """
    if not isinstance(payload, dict):
        raise ResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    items = payload.get(request.records_field)
    if not isinstance(items, list):
        raise ResponseError(
            f"Response for {request.path} has no '{request.records_field}' array"
        )

    records = []
    for item in items:
        record = parse_record(item)
        if record:
            records.append(record)

    return records


def deduplicate_books(books: List[BookRecord]) -> List[BookRecord]:
    """
    Remove duplicate books by ID.

    Args:
        books: List of BookRecord objects

    Returns:
        Deduplicated list of books, first occurrence kept
    """
    seen_ids = set()
    unique_books = []

    for book in books:
        if book.id not in seen_ids:
            seen_ids.add(book.id)
            unique_books.append(book)

    return unique_books


def parse_detail(data: Dict[str, Any], detail_key: str) -> BookDetail:
    """Parse a work/edition JSON document for the detail view."""
    description = data.get("description")
    if isinstance(description, dict):
        description = description.get("value")
    if not isinstance(description, str) or not description.strip():
        description = None

    covers = [
        c for c in data.get("covers") or []
        if isinstance(c, int) and not isinstance(c, bool) and c > 0
    ]

    first_publish_date = data.get("first_publish_date")
    title = data.get("title")

    return BookDetail(
        key=detail_key,
        title=title if isinstance(title, str) else None,
        description=description.strip() if description else None,
        subjects=_string_list(data.get("subjects")),
        first_publish_date=first_publish_date if isinstance(first_publish_date, str) else None,
        covers=covers
    )


def summarize_description(
    record: BookRecord,
    detail: Optional[BookDetail] = None,
    max_length: int = 300
) -> str:
    """
    Pick the best available description and truncate it.

    Falls back from the enriched description to the record's first
    sentence, then its subtitle.
    """
    text = (
        (detail.description if detail else None)
        or record.first_sentence
        or record.subtitle
        or NO_DESCRIPTION
    )
    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text


def openlibrary_url(record: BookRecord) -> Optional[str]:
    """Public catalog page for a record, when it has a detail key."""
    if not record.detail_key:
        return None
    return f"{OPENLIBRARY_URL}{record.detail_key}"
