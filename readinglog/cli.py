"""
Command-line interface for the reading log generator.
"""
import os
import sys
import logging
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from readinglog.config import Config, ConfigurationError, load_settings
from readinglog.core.classifier import build_aliases
from readinglog.fetchers.notion import NotionFetcher
from readinglog.formatters.markdown import (
    DEFAULT_CLOSING,
    DEFAULT_INTRO,
    DEFAULT_PERMALINK,
    DEFAULT_TAGS,
    DEFAULT_TITLE,
    ReadingLogFormatter,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class InvalidLogNumberError(ValueError):
    """
    Raised when the entered reading log number is not a positive integer.
    """


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Logging level name
        log_file: Optional file to log to in addition to stderr
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def parse_log_number(text: Optional[str]) -> int:
    """
    Parse a reading log number entered by the user.

    Args:
        text: Raw input

    Returns:
        The reading log number

    Raises:
        InvalidLogNumberError: If the input is not a positive integer
    """
    try:
        number = int((text or "").strip())
    except ValueError:
        raise InvalidLogNumberError(f"Invalid reading log number: {text!r}") from None
    if number < 1:
        raise InvalidLogNumberError(f"Invalid reading log number: {text!r}")
    return number


def write_reading_log(content: str, output_dir: Union[str, Path], log_number: int) -> Path:
    """
    Append a reading log to <output_dir>/<log_number>.md.

    The file is created if needed; the directory must already exist.

    Args:
        content: Markdown to append
        output_dir: Output directory
        log_number: The issue number

    Returns:
        Path of the written file
    """
    path = Path(output_dir) / f"{log_number}.md"
    with open(path, "a", encoding="utf-8") as f:
        f.write(content)
    return path


def build_formatter(config: Config) -> ReadingLogFormatter:
    return ReadingLogFormatter(
        title=config.get('template.title', DEFAULT_TITLE),
        permalink=config.get('template.permalink', DEFAULT_PERMALINK),
        tags=config.get('template.tags', DEFAULT_TAGS),
        intro=config.get('template.intro', DEFAULT_INTRO),
        closing=config.get('template.closing', DEFAULT_CLOSING),
        heading_level=int(config.get('template.heading_level', 2)),
    )


def run(config: Config) -> int:
    """
    Generate one reading log.

    Args:
        config: Loaded configuration

    Returns:
        Process exit code
    """
    try:
        directories, notion = load_settings(config)
    except ConfigurationError as e:
        print(f"Unable to read settings: {e}")
        return 1

    try:
        log_number = parse_log_number(input("Please Enter Reading Log Number: "))
    except EOFError:
        print("Invalid reading log number: no input")
        return 1
    except InvalidLogNumberError as e:
        print(e)
        return 1

    logger.info(f"Generating reading log #{log_number}")

    aliases = build_aliases(config.get('categories.aliases'))
    with NotionFetcher(notion) as fetcher:
        articles = fetcher.fetch_articles(log_number, aliases)

    markdown = build_formatter(config).format_reading_log(articles, log_number)

    path = write_reading_log(markdown, directories.output, log_number)
    logger.info(f"Wrote reading log #{log_number} with {len(articles)} articles to {path}")
    return 0


def main() -> int:
    """
    Entry point for the command-line script.
    """
    # Explicitly reload environment variables from .env file
    load_dotenv(override=True)

    try:
        config = Config(os.getenv('READINGLOG_CONFIG_PATH'))
        configure_logging(config.get('logging.level', 'INFO'), config.get('logging.file'))
        return run(config)
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
