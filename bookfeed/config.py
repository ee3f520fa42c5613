"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Catalog
    OPENLIBRARY_BASE_URL = os.getenv("OPENLIBRARY_BASE_URL", "https://openlibrary.org")

    # HTTP
    DEFAULT_TIMEOUT = float(os.getenv("BOOK_FEED_TIMEOUT", "10"))
    DEFAULT_MAX_RETRIES = int(os.getenv("BOOK_FEED_MAX_RETRIES", "3"))
    DEFAULT_MAX_CONCURRENT = int(os.getenv("BOOK_FEED_MAX_CONCURRENT", "5"))

    # Feed
    SCROLL_THRESHOLD = float(os.getenv("BOOK_FEED_SCROLL_THRESHOLD", "350"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
