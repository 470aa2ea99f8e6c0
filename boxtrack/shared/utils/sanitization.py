"""
Text normalization used for search documents and location name comparison.

Names are folded to lowercase ASCII: diacritics are stripped (so "Garaż"
and "garaz" compare equal) and every run of non-alphanumeric characters
collapses to a single separator.
"""

import re
import unicodedata
from collections.abc import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Letters NFKD does not decompose into base + combining mark
_EXTRA_FOLDS = str.maketrans({"ł": "l", "Ł": "L", "ø": "o", "Ø": "O", "ß": "ss", "đ": "d", "Đ": "D"})


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value.translate(_EXTRA_FOLDS))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def normalize_text(value: str | None) -> str:
    """
    Normalize free text into space-separated lowercase ASCII tokens.

    Example:
        normalize_text("  Półka #1 (Garaż) ") -> "polka 1 garaz"
    """
    if not value:
        return ""
    return _NON_ALNUM.sub(" ", _fold(value)).strip()


def slugify(value: str) -> str:
    """
    Normalize a name into an underscore slug.

    Example:
        slugify("Top-Left Corner!") -> "top_left_corner"
    """
    return normalize_text(value).replace(" ", "_")


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """Trim tags, drop empty ones and remove duplicates while keeping order"""
    if not tags:
        return []

    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return result


def build_search_document(
    name: str, description: str | None, tags: Iterable[str] | None
) -> str:
    """Search document = normalize(name) + normalize(description) + normalize(each tag)"""
    parts = [normalize_text(name), normalize_text(description)]
    parts.extend(normalize_text(tag) for tag in tags or [])
    return " ".join(part for part in parts if part)
