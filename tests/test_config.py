import json
import os
from pathlib import Path

import pytest

from readinglog.config import (
    DEFAULT_CONFIG,
    Config,
    ConfigurationError,
    NotionSettings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("READINGLOG_"):
            monkeypatch.delenv(key)


def write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_yaml_file_overrides_defaults(tmp_path: Path) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "notion:\n  database: abc\n  page_size: 50\n")

    config = Config(str(path))

    assert config.get("notion.database") == "abc"
    assert config.get("notion.page_size") == 50
    assert config.get("notion.version") == "2022-06-28"
    assert DEFAULT_CONFIG["notion"]["database"] is None


def test_development_overlay_is_merged(tmp_path: Path) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "directories:\n  output: out\nnotion:\n  token: base\n")
    write_yaml(tmp_path / "readinglog.development.yaml", "notion:\n  token: dev\n")

    config = Config(str(path))

    assert config.get("notion.token") == "dev"
    assert config.get("directories.output") == "out"


def test_json_file_is_supported(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"directories": {"output": "logs"}}), encoding="utf-8")

    assert Config(str(path)).get("directories.output") == "logs"


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    config = Config(str(tmp_path / "missing.yaml"))

    assert config.get("notion.issue_property") == "Issue"
    assert config.get("does.not.exist", "fallback") == "fallback"


def test_unsupported_format_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.ini"
    path.write_text("[notion]\ntoken = x\n", encoding="utf-8")

    assert Config(str(path)).get("notion.token") is None


def test_environment_overrides_file(tmp_path: Path, monkeypatch) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "notion:\n  token: from-file\n")
    monkeypatch.setenv("READINGLOG_NOTION_TOKEN", "from-env")
    monkeypatch.setenv("READINGLOG_NOTION_DATABASE", "1234")
    monkeypatch.setenv("READINGLOG_NOTION_PAGE_SIZE", "25")
    monkeypatch.setenv("READINGLOG_TEMPLATE_TAGS", '["A", "B"]')

    config = Config(str(path))

    assert config.get("notion.token") == "from-env"
    assert config.get("notion.database") == "1234"
    assert config.get("notion.page_size") == 25
    assert config.get("template.tags") == ["A", "B"]


def test_load_settings(tmp_path: Path) -> None:
    path = write_yaml(
        tmp_path / "readinglog.yaml",
        "directories:\n  output: out\nnotion:\n  token: t\n  database: d\n  page_size: 50\n",
    )

    directories, notion = load_settings(Config(str(path)))

    assert directories.output == "out"
    assert notion == NotionSettings(token="t", database="d", page_size=50)
    assert notion.timeout == 30


def test_load_settings_reports_missing_keys(tmp_path: Path) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "notion:\n  token: '  '\n")

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(Config(str(path)))

    message = str(excinfo.value)
    assert "directories.output" in message
    assert "notion.token" in message
    assert "notion.database" in message



@pytest.mark.parametrize("notion_yaml, field", [
    ("  page_size:\n", "notion.page_size"),
    ("  page_size: 500\n", "notion.page_size"),
    ("  page_size: lots\n", "notion.page_size"),
    ("  timeout: 0\n", "notion.timeout"),
])
def test_load_settings_rejects_invalid_values(tmp_path: Path, notion_yaml: str, field: str) -> None:
    path = write_yaml(
        tmp_path / "readinglog.yaml",
        "directories:\n  output: out\nnotion:\n  token: t\n  database: d\n" + notion_yaml,
    )

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(Config(str(path)))

    assert field in str(excinfo.value)


def test_load_settings_accepts_numeric_ids(tmp_path: Path) -> None:
    path = write_yaml(
        tmp_path / "readinglog.yaml",
        "directories:\n  output: out\nnotion:\n  token: t\n  database: 12345\n",
    )

    _, notion = load_settings(Config(str(path)))

    assert notion.database == "12345"


def test_non_mapping_file_is_ignored(tmp_path: Path) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "- a\n- b\n")

    config = Config(str(path))

    assert config.get("notion.version") == "2022-06-28"
    with pytest.raises(ConfigurationError):
        load_settings(config)


def test_environment_cannot_replace_a_setting_with_a_section(tmp_path: Path, monkeypatch) -> None:
    path = write_yaml(tmp_path / "readinglog.yaml", "notion:\n  token: keep\n")
    monkeypatch.setenv("READINGLOG_LOGGING_LEVEL_X", "1")
    monkeypatch.setenv("READINGLOG_NOTION_TOKEN_OLD", "stale")
    monkeypatch.setenv("READINGLOG_CATEGORIES_ALIASES_ASTRONOMY", "SPACE")

    config = Config(str(path))

    assert config.get("logging.level") == "INFO"
    assert config.get("notion.token") == "keep"
    assert config.get("categories.aliases") == {"astronomy": "SPACE"}
