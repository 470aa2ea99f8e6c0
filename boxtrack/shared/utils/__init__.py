"""Shared utilities."""

from boxtrack.shared.utils.generators import generate_cuid
from boxtrack.shared.utils.sanitization import (build_search_document,
                                                normalize_text,
                                                normalize_tags, slugify)

__all__ = [
    "generate_cuid",
    "normalize_text",
    "normalize_tags",
    "slugify",
    "build_search_document",
]
