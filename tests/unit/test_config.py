"""Unit tests for config.py"""

import pytest

from pageblocks.config import load_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test away from any real config.yaml or PAGEBLOCKS_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("JSON_INDENT", "MARKDOWN_PRESET", "OUTPUT_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(f"PAGEBLOCKS_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when nothing else is configured."""
    settings = load_config()
    assert settings.json_indent == 2
    assert settings.markdown_preset == "gfm-like"
    assert settings.output_dir == "out"
    assert settings.log_level == "WARNING"


def test_load_config_reads_config_yaml(tmp_path):
    """Values in config.yaml override defaults."""
    (tmp_path / "config.yaml").write_text("output_dir: build\njson_indent: 0\n")
    settings = load_config()
    assert settings.output_dir == "build"
    assert settings.json_indent == 0


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """PAGEBLOCKS_OUTPUT_DIR takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("output_dir: build\n")
    monkeypatch.setenv("PAGEBLOCKS_OUTPUT_DIR", "env-out")
    assert load_config().output_dir == "env-out"


def test_load_config_env_is_coerced(monkeypatch):
    """PAGEBLOCKS_JSON_INDENT env var is coerced to int."""
    monkeypatch.setenv("PAGEBLOCKS_JSON_INDENT", "4")
    assert load_config().json_indent == 4


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("PAGEBLOCKS_LOG_LEVEL", "INFO")
    assert load_config(overrides={"log_level": "DEBUG"}).log_level == "DEBUG"
    assert load_config(overrides={"log_level": None}).log_level == "INFO"


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_rejects_bad_values(monkeypatch):
    """Out-of-range or unknown values fail validation."""
    monkeypatch.setenv("PAGEBLOCKS_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_config()


def test_settings_fields_are_all_consumed():
    """Settings carries only the options the CLI and pipeline read."""
    assert set(load_config().model_dump()) == {"json_indent", "markdown_preset", "output_dir", "log_level"}
