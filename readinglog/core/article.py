"""
Article data model for the reading log.
"""
from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    """
    Editorial categories an article can be filed under.

    Member order is the order sections appear in the rendered reading log.
    """
    DOT_NET = "dotnet"
    WEB_DEVELOPMENT = "web_development"
    DEVELOPMENT = "development"
    DESIGN = "design"
    INTERNET = "internet"
    TECHNOLOGY = "technology"
    SCIENCE = "science"
    SPACE = "space"
    CLIMATE_CHANGE = "climate_change"
    GAMING = "gaming"
    BUSINESS = "business"
    SPORTS = "sports"
    FITNESS = "fitness"
    PODCASTS = "podcasts"
    ENTERTAINMENT = "entertainment"
    LONGFORM = "longform"
    JOURNALISM = "journalism"
    POLITICS = "politics"
    SONG = "song"
    IN_DEPTH = "in_depth"
    EVERYTHING = "everything"


@dataclass(frozen=True)
class Article:
    """
    Represents a single reading log entry.
    """
    title: str = ""
    author: str = ""
    url: str = ""
    category: Category = Category.EVERYTHING
