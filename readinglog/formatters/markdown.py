"""
Markdown formatting for the reading log.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, NamedTuple, Optional, Sequence

from readinglog.core.article import Article, Category

# Configure logging
logger = logging.getLogger(__name__)

LINK = "link"
PODCAST = "podcast"


class Section(NamedTuple):
    """
    One section of the reading log: which category it lists and how.
    """
    category: Category
    heading: str
    style: str = LINK


IN_DEPTH_SECTION = Section(Category.IN_DEPTH, "📚 In Depth")

# Topic sections in the order they appear in the reading log
TOPIC_SECTIONS = (
    Section(Category.DOT_NET, "🟣 .NET"),
    Section(Category.WEB_DEVELOPMENT, "🌐 Web Development"),
    Section(Category.DEVELOPMENT, "👨🏼‍💻 Software Development"),
    Section(Category.DESIGN, "🎨 Design"),
    Section(Category.INTERNET, "🕸 Internet"),
    Section(Category.TECHNOLOGY, "🖥 Technology"),
    Section(Category.SCIENCE, "🔬 Science"),
    Section(Category.SPACE, "🚀 Space"),
    Section(Category.CLIMATE_CHANGE, "🌎 Climate Change"),
    Section(Category.GAMING, "🎮 Gaming"),
    Section(Category.BUSINESS, "📈 Business & Finance"),
    Section(Category.SPORTS, "⚾ Sports"),
    Section(Category.FITNESS, "🏃 Fitness"),
    Section(Category.ENTERTAINMENT, "🍿 Entertainment"),
    Section(Category.LONGFORM, "📜 Longform"),
    Section(Category.JOURNALISM, "📰 Journalism"),
    Section(Category.POLITICS, "🏛 Politics"),
    Section(Category.EVERYTHING, "🎒 Everything Else"),
)

PODCAST_SECTION = Section(Category.PODCASTS, "🎧 Podcasts", PODCAST)

SONG_HEADING = "🎵 A Song to Leave You With"
SONG_PLACEHOLDER = "#### Artist - Song"

VIDEO_URL_PREFIXES = (
    "https://www.youtube.com/watch?v=",
    "https://youtube.com/watch?v=",
    "https://youtu.be/",
)

DEFAULT_TITLE = "Reading Log - {date} (#{number})"
DEFAULT_PERMALINK = "/reading-log/{number}/"
DEFAULT_TAGS = ("Reading Log",)
DEFAULT_INTRO = "Introduction Text"
DEFAULT_CLOSING = "Thanks for reading! See you next time."


def video_id(url: str) -> str:
    """
    Strip a known video URL prefix, leaving the video id.

    Args:
        url: Video URL

    Returns:
        The video id, or the url unchanged if no prefix matches
    """
    for prefix in VIDEO_URL_PREFIXES:
        if url.startswith(prefix):
            return url[len(prefix):]
    return url


def format_long_date(moment: datetime) -> str:
    """Format a date as 'October 5, 2026'."""
    return f"{moment:%B} {moment.day}, {moment.year}"


class ReadingLogFormatter:
    """
    Formats articles into a reading log Markdown document.
    """
    def __init__(self,
                 title: str = DEFAULT_TITLE,
                 permalink: str = DEFAULT_PERMALINK,
                 tags: Iterable[str] = DEFAULT_TAGS,
                 intro: str = DEFAULT_INTRO,
                 closing: str = DEFAULT_CLOSING,
                 heading_level: int = 2,
                 sections: Sequence[Section] = TOPIC_SECTIONS):
        """
        Initialize the ReadingLogFormatter.

        Args:
            title: Front matter title pattern with {date} and {number} fields
            permalink: Permalink pattern with a {number} field
            tags: Front matter tags
            intro: Text placed after the front matter
            closing: Text placed at the end of the document
            heading_level: Markdown heading level for sections
            sections: Ordered topic sections
        """
        self.title = title
        self.permalink = permalink
        self.tags = list(tags)
        self.intro = intro
        self.closing = closing
        self.heading_prefix = "#" * heading_level
        self.sections = tuple(sections)

    def format_front_matter(self, log_number: int, now: datetime) -> str:
        """
        Format the front matter block.

        Args:
            log_number: The issue number
            now: Time the reading log is generated, in UTC

        Returns:
            Front matter followed by a blank line
        """
        title = self.title.format(date=format_long_date(now), number=log_number)
        tags = ", ".join(f'"{tag}"' for tag in self.tags)
        lines = [
            "---",
            f'title: "{title}"',
            f"date: {now:%Y-%m-%dT%H:%M:%SZ}",
            f'permalink: "{self.permalink.format(number=log_number)}"',
            f"tags: [{tags}]",
            "---",
            "",
        ]
        return "\n".join(lines) + "\n"

    def format_link(self, article: Article, style: str = LINK) -> str:
        if style == PODCAST:
            return f"[{article.author}: {article.title}]({article.url})"
        return f"[{article.title}]({article.url}) - *{article.author}*"

    def format_section(self, section: Section, articles: Sequence[Article]) -> str:
        """
        Format one category section.

        Args:
            section: The section to format
            articles: All articles of the reading log

        Returns:
            The section text, or an empty string if no article is in it
        """
        matching = [a for a in articles if a.category is section.category]
        if not matching:
            return ""

        lines = [f"{self.heading_prefix} {section.heading}", ""]
        for article in matching:
            lines.append(self.format_link(article, section.style))
            lines.append("")
        lines.extend(["---", ""])
        return "\n".join(lines) + "\n"

    def format_song(self, articles: Sequence[Article]) -> str:
        """
        Format the closing song section.

        The first song article is embedded; without one a placeholder is used.
        """
        lines = [f"{self.heading_prefix} {SONG_HEADING}", ""]

        song = next((a for a in articles if a.category is Category.SONG), None)
        if song is None:
            lines.append(SONG_PLACEHOLDER)
        else:
            lines.append(f"#### {song.author} - {song.title}")
            lines.append("")
            lines.append(f"{{{{< youtube {video_id(song.url)} >}}}}")
        lines.append("")
        return "\n".join(lines) + "\n"

    def format_reading_log(self, articles: Sequence[Article], log_number: int,
                           now: Optional[datetime] = None) -> str:
        """
        Format articles into a reading log.

        Args:
            articles: Articles of the reading log, in display order
            log_number: The issue number
            now: Generation time; defaults to the current UTC time

        Returns:
            The complete Markdown document
        """
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

        parts: List[str] = [
            self.format_front_matter(log_number, now),
            f"{self.intro}\n\n",
            self.format_section(IN_DEPTH_SECTION, articles),
        ]
        parts.extend(self.format_section(section, articles) for section in self.sections)
        parts.append(self.format_section(PODCAST_SECTION, articles))
        parts.append(self.format_song(articles))
        parts.append(f"{self.closing}\n")

        content = "".join(parts)
        logger.debug(f"Formatted reading log #{log_number} with {len(articles)} articles")
        return content
