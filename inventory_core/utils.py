"""Small string helpers shared by validators and repositories."""

import re
import unicodedata

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def camel_to_snake(name: str) -> str:
    """Convert ``busLineId`` to ``bus_line_id``; snake_case passes through."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    """Convert ``bus_line_id`` to ``busLineId``."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def slugify(value: str) -> str:
    """Lowercase ASCII slug with dashes, accents stripped."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG.sub("-", normalized.lower()).strip("-")


def create_slug(name: str, prefix: str | None = None, suffix: str | None = None) -> str:
    """
    Build a slug from a display name with optional prefix and suffix.

    Examples:
        create_slug("Central Station", "n", "CDMX01") -> "n-central-station-cdmx01"
        create_slug("Ciudad de México") -> "ciudad-de-mexico"
    """
    parts = [prefix, name, suffix]
    return "-".join(slugify(p) for p in parts if p and slugify(p))


__all__ = ["camel_to_snake", "snake_to_camel", "slugify", "create_slug"]
