"""
Slug Service - URL-safe unique identifiers from display names

Normalizes names into slugs and picks the first free ``base``, ``base-1``,
``base-2``... against the slugs already stored for an entity kind.
"""

import re
import unicodedata
from typing import Callable, Iterable, Optional

from utils.errors import InvalidNameError

_NON_ALNUM = re.compile(r'[^a-z0-9]+')

# (base_slug, exclude_id) -> slugs starting with base_slug
SlugLookup = Callable[[str, Optional[str]], Iterable[str]]


def slugify(name: str) -> str:
    """
    Normalize a display name into a slug.

    Lowercases, strips diacritics, collapses every run of non-alphanumeric
    characters into one hyphen, and trims hyphens from both ends.

    Args:
        name: Display name or title

    Returns:
        Slug string (may be empty if the name has no letters or digits)
    """
    if not name:
        return ''
    decomposed = unicodedata.normalize('NFKD', name)
    ascii_only = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    ascii_only = ascii_only.encode('ascii', 'ignore').decode('ascii')
    return _NON_ALNUM.sub('-', ascii_only.lower()).strip('-')


def next_free_slug(base: str, taken: Iterable[str]) -> str:
    """Return ``base`` if unused, else ``base-N`` with the smallest free N >= 1."""
    taken = set(taken)
    if base not in taken:
        return base

    counter = 1
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"


class SlugResolver:
    """Resolves unique slugs for one entity kind."""

    def __init__(self, lookup: SlugLookup):
        """
        Args:
            lookup: Callable returning existing slugs that start with a base,
                    ignoring the record with ``exclude_id`` when given
        """
        self.lookup = lookup

    def resolve(self, display_name: str, exclude_id: Optional[str] = None) -> str:
        """
        Compute a slug for ``display_name`` that no other record uses.

        Raises:
            InvalidNameError: if the name normalizes to an empty slug
        """
        base = slugify(display_name)
        if not base:
            raise InvalidNameError()
        return next_free_slug(base, self.lookup(base, exclude_id))
