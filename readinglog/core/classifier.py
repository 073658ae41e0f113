"""
Category classification for reading log entries.
"""
import logging
from typing import Dict, Mapping, Optional

from readinglog.core.article import Category

# Configure logging
logger = logging.getLogger(__name__)

# Lower-cased Notion select labels
CATEGORY_LABELS: Dict[str, Category] = {
    ".net": Category.DOT_NET,
    "dotnet": Category.DOT_NET,
    "web development": Category.WEB_DEVELOPMENT,
    "development": Category.DEVELOPMENT,
    "software development": Category.DEVELOPMENT,
    "design": Category.DESIGN,
    "software development & design": Category.DEVELOPMENT,
    "internet": Category.INTERNET,
    "technology": Category.TECHNOLOGY,
    "technology & the internet": Category.TECHNOLOGY,
    "science": Category.SCIENCE,
    "space": Category.SPACE,
    "climate change": Category.CLIMATE_CHANGE,
    "gaming": Category.GAMING,
    "business": Category.BUSINESS,
    "business & finance": Category.BUSINESS,
    "sports": Category.SPORTS,
    "fitness": Category.FITNESS,
    "podcasts": Category.PODCASTS,
    "entertainment": Category.ENTERTAINMENT,
    "longform": Category.LONGFORM,
    "journalism": Category.JOURNALISM,
    "politics": Category.POLITICS,
    "song": Category.SONG,
    "in depth": Category.IN_DEPTH,
    "everything": Category.EVERYTHING,
    "everything else": Category.EVERYTHING,
}


def classify_category(label: str, aliases: Optional[Mapping[str, Category]] = None) -> Category:
    """
    Map a lower-cased category label to a Category.

    Labels that are not in the table (including the empty string) fall back
    to Category.EVERYTHING.

    Args:
        label: Lower-cased label as stored in Notion
        aliases: Extra label mappings checked before the built-in table

    Returns:
        The matching Category
    """
    if aliases and label in aliases:
        return aliases[label]

    category = CATEGORY_LABELS.get(label)
    if category is None:
        if label:
            logger.debug(f"Unknown category label '{label}', filing under Everything")
        return Category.EVERYTHING
    return category


def build_aliases(mapping: Optional[Mapping[str, str]]) -> Dict[str, Category]:
    """
    Build an alias table from configuration.

    Args:
        mapping: Label to Category member name, e.g. {"astronomy": "SPACE"}

    Returns:
        Dict mapping lower-cased labels to Categories
    """
    aliases = {}
    for label, name in (mapping or {}).items():
        try:
            aliases[str(label).lower()] = Category[str(name).upper()]
        except KeyError:
            logger.warning(f"Ignoring alias '{label}': unknown category '{name}'")
    return aliases
