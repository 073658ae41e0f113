"""
Configuration management for the reading log generator.
"""
import copy
import os
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "readinglog.yaml"

# Default configuration
DEFAULT_CONFIG = {
    "directories": {
        "output": None
    },
    "notion": {
        "token": None,
        "database": None,
        "version": "2022-06-28",
        "page_size": 100,
        "timeout": 30,
        "issue_property": "Issue"
    },
    "logging": {
        "level": "INFO",
        "file": None
    },
    "categories": {
        "aliases": {}
    },
    "template": {
        "title": "Reading Log - {date} (#{number})",
        "permalink": "/reading-log/{number}/",
        "tags": ["Reading Log"],
        "intro": "Introduction Text",
        "closing": "Thanks for reading! See you next time."
    }
}


class ConfigurationError(Exception):
    """
    Raised when required settings are missing or invalid.
    """


class DirectoriesSettings(BaseModel):
    """Where generated reading logs are written."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, coerce_numbers_to_str=True)

    output: str = Field(..., min_length=1, description="Directory reading logs are appended to")


class NotionSettings(BaseModel):
    """Credentials and query options for the Notion database."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, coerce_numbers_to_str=True)

    token: str = Field(..., min_length=1, description="Notion integration bearer token")
    database: str = Field(..., min_length=1, description="Id of the reading log database")
    version: str = Field(default="2022-06-28", min_length=1, description="Notion-Version header")
    page_size: int = Field(default=100, ge=1, le=100, description="Records requested per page")
    timeout: float = Field(default=30, gt=0, description="Per-request timeout in seconds")
    issue_property: str = Field(default="Issue", min_length=1, description="Numeric issue property")


class Config:
    """
    Configuration manager for the reading log generator.

    Values come from DEFAULT_CONFIG, then the config file, then its
    ``.development`` overlay, then READINGLOG_* environment variables.
    """
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from files or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        path = Path(self.config_path)
        for candidate in (path, path.with_name(f"{path.stem}.development{path.suffix}")):
            if not candidate.exists():
                continue
            try:
                user_config = self._read_file(candidate)
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.error(f"Error loading config from {candidate}: {e}")
                logger.error("Using default configuration")
                continue

            if user_config is None:
                continue
            if not isinstance(user_config, dict):
                logger.error(f"Error loading config from {candidate}: expected a mapping, "
                             f"got {type(user_config).__name__}")
                logger.error("Using default configuration")
                continue

            # Update config with user settings
            self._update_dict(config, user_config)

        # Override with environment variables
        self._override_from_env(config)

        return config

    def _read_file(self, path: Path) -> Dict:
        """
        Parse a YAML or JSON config file.

        Args:
            path: Path of the file to read

        Returns:
            Parsed configuration dictionary
        """
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                return yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                return json.load(f)
        raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Recursively update a dictionary.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict, prefix: str = 'READINGLOG_') -> None:
        """
        Override configuration with environment variables.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in os.environ.items():
            if key.startswith(prefix) and key != f"{prefix}CONFIG_PATH":
                # Remove prefix and split by underscore
                parts = key[len(prefix):].lower().split('_')

                target = self._env_target(config, parts)
                if target is None:
                    logger.warning(f"Ignoring {key}: it would replace an existing setting")
                    continue
                current, name = target

                # Set the value; string settings such as ids are kept verbatim
                if name in current and isinstance(current[name], (str, type(None))):
                    current[name] = value
                    continue
                try:
                    current[name] = json.loads(value)
                except json.JSONDecodeError:
                    current[name] = value

    def _env_target(self, config: Dict, parts: List[str]) -> Optional[Tuple[Dict, str]]:
        """
        Find the dictionary and key an environment variable sets.

        The longest existing key wins at each level, so NOTION_PAGE_SIZE
        reaches page_size. Missing levels are created.

        Args:
            config: Configuration dictionary
            parts: Lower-cased variable name split on underscores

        Returns:
            Tuple of (containing dict, key), or None if the path runs
            through an existing non-dict setting
        """
        current = config
        i = 0
        while True:
            for j in range(len(parts), i, -1):
                name = '_'.join(parts[i:j])
                if name in current:
                    break
            if j == len(parts):
                return current, name
            if name not in current:
                current[name] = {}
            elif not isinstance(current[name], dict):
                return None
            current = current[name]
            i = j

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'notion.database')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split('.')
        current = self.config

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current


def _validate_section(config: Config, section: str, model):
    """
    Validate one config section against a settings model.

    Returns:
        Tuple of (settings or None, list of error descriptions)
    """
    try:
        return model.model_validate(config.get(section) or {}), []
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            location = '.'.join(str(part) for part in (section,) + tuple(error['loc']))
            errors.append(f"{location}: {error['msg']}")
        return None, errors


def load_settings(config: Config) -> Tuple[DirectoriesSettings, NotionSettings]:
    """
    Build the typed settings from a Config.

    Args:
        config: Loaded configuration

    Returns:
        Tuple of (DirectoriesSettings, NotionSettings)

    Raises:
        ConfigurationError: If any setting is missing, blank or of the wrong type
    """
    directories, directory_errors = _validate_section(config, 'directories', DirectoriesSettings)
    notion, notion_errors = _validate_section(config, 'notion', NotionSettings)

    errors = directory_errors + notion_errors
    if errors:
        raise ConfigurationError(f"Invalid settings: {'; '.join(errors)}")
    return directories, notion
