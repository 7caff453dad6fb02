"""Tests for publisher configuration loading and saving."""

import json
from pathlib import Path

import pytest

from typepub.publish import PublisherConfig, load_config, save_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep TYPEPUB_* variables from the environment out of tests."""
    for name in (
        "TYPEPUB_ENDPOINT",
        "TYPEPUB_USERNAME",
        "TYPEPUB_PASSWORD",
        "TYPEPUB_BLOG_ID",
        "TYPEPUB_PROXY_URL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestPublisherConfig:
    """Tests for PublisherConfig dataclass."""

    def test_default_values(self) -> None:
        config = PublisherConfig()

        assert config.endpoint == ""
        assert config.blog_id == "0"
        assert config.use_current_time is True
        assert config.publish_time_offset == 0.0
        assert config.is_complete() is False

    def test_complete(self) -> None:
        config = PublisherConfig(endpoint="https://x/xmlrpc", username="u", password="p")
        assert config.is_complete() is True

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout must be positive"):
            PublisherConfig(timeout=0)

    def test_empty_blog_id_defaults(self) -> None:
        assert PublisherConfig(blog_id="").blog_id == "0"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_from_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(
            json.dumps(
                {
                    "endpoint": "https://blog.example/xmlrpc",
                    "username": "alice",
                    "password": "secret",
                    "blog_id": "3",
                    "use_current_time": False,
                    "publish_time_offset": 8,
                }
            )
        )

        config = load_config(config_path)

        assert config.endpoint == "https://blog.example/xmlrpc"
        assert config.username == "alice"
        assert config.password == "secret"
        assert config.blog_id == "3"
        assert config.use_current_time is False
        assert config.publish_time_offset == 8.0

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "missing.json") == PublisherConfig()

    def test_invalid_json_uses_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        assert load_config(config_path) == PublisherConfig()

    def test_non_object_uses_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text("[1, 2]")

        assert load_config(config_path) == PublisherConfig()

    def test_invalid_values_fall_back(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"publish_time_offset": "soon", "timeout": -1}))

        config = load_config(config_path)

        assert config.publish_time_offset == 0.0
        assert config.timeout == 30.0

    def test_env_overrides(self, tmp_path: Path, monkeypatch) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"endpoint": "https://file", "username": "file"}))
        monkeypatch.setenv("TYPEPUB_ENDPOINT", "https://env")
        monkeypatch.setenv("TYPEPUB_PASSWORD", "envpass")

        config = load_config(config_path)

        assert config.endpoint == "https://env"
        assert config.username == "file"
        assert config.password == "envpass"

    def test_env_ignored_when_disabled(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("TYPEPUB_ENDPOINT", "https://env")

        assert load_config(tmp_path / "missing.json", use_env=False).endpoint == ""


class TestSaveConfig:
    """Tests for save_config function."""

    def test_round_trip(self, tmp_path: Path) -> None:
        config_path = tmp_path / "nested" / "config.json"
        config = PublisherConfig(
            endpoint="https://blog.example/xmlrpc",
            username="alice",
            password="secret",
            proxy_url="https://proxy/{target}",
            publish_time_offset=-2.5,
        )

        save_config(config, config_path)

        assert config_path.exists()
        assert load_config(config_path) == config
