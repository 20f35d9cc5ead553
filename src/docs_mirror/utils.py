"""
Utility functions for docs-mirror.

Includes:
- slugify_name: Convert a Drive display name to a URL path segment
- get_unique_slug: Handle sibling collisions with -1, -2 suffixes
"""

import re
from typing import Dict


DEFAULT_SLUG = 'untitled'


def slugify_name(name: str) -> str:
    """
    Convert a Drive file or folder name to a URL-safe path segment.

    - Lowercase
    - Collapse each whitespace run to a single hyphen
    - Remove every character outside [a-z0-9-]
    - Fall back to "untitled" when nothing is left

    Args:
        name: Display name from Drive

    Returns:
        Slug (e.g., "quarterly-report-2024")

    Examples:
        >>> slugify_name("Quarterly  Report 2024")
        "quarterly-report-2024"
        >>> slugify_name("Notes & Ideas")
        "notes--ideas"
        >>> slugify_name("   ")
        "untitled"
    """
    if not name or not name.strip():
        return DEFAULT_SLUG

    slug = name.lower()

    # Whitespace runs become one hyphen
    slug = re.sub(r'\s+', '-', slug)

    slug = re.sub(r'[^a-z0-9\-]', '', slug)

    return slug or DEFAULT_SLUG


def get_unique_slug(base_slug: str, seen_slugs: Dict[str, int]) -> str:
    """
    Get unique slug among siblings, handling duplicates with -1, -2 suffixes.

    - First occurrence: "notes" (no suffix)
    - Second occurrence: "notes-1"
    - Third occurrence: "notes-2"

    Args:
        base_slug: Base slug from slugify_name()
        seen_slugs: Dict tracking seen slugs for one parent (mutated in-place)

    Returns:
        Unique slug with suffix if needed
    """
    if base_slug not in seen_slugs:
        seen_slugs[base_slug] = 0
        return base_slug

    while True:
        seen_slugs[base_slug] += 1
        candidate = f"{base_slug}-{seen_slugs[base_slug]}"
        # A sibling may literally be named "notes-1"
        if candidate not in seen_slugs:
            seen_slugs[candidate] = 0
            return candidate
