"""Tests for configuration loading."""

import pytest

from wohnung_finder.config import DEFAULT_CONFIG, get_env, load_config


@pytest.fixture
def write_config(tmp_path):
    def _write(text: str) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.example.yaml"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file_gives_defaults(self, write_config):
        config = load_config(write_config(""))

        assert config["poll"]["interval_seconds"] == 30
        assert config["city"] == "Berlin"
        assert config["poll"]["seen_retention_days"] is None

    def test_values_merge_over_defaults(self, write_config):
        config = load_config(write_config("poll:\n  interval_seconds: 60\nproviders:\n  degewo:\n    enabled: false\n"))

        assert config["poll"]["interval_seconds"] == 60
        assert config["poll"]["max_workers"] == 4
        assert config["providers"]["degewo"]["enabled"] is False

    def test_defaults_not_mutated(self, write_config):
        load_config(write_config("poll:\n  interval_seconds: 99\n"))
        assert DEFAULT_CONFIG["poll"]["interval_seconds"] == 30

    def test_env_overrides(self, write_config, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("STATE_FILE", "/tmp/other.json")

        config = load_config(write_config("server:\n  port: 3000\n"))

        assert config["server"]["port"] == 8080
        assert config["storage"]["state_file"] == "/tmp/other.json"

    @pytest.mark.parametrize(
        "text,message",
        [
            ("poll:\n  interval_seconds: 0\n", "interval_seconds"),
            ("poll:\n  max_workers: 0\n", "max_workers"),
            ("poll:\n  seen_retention_days: -3\n", "seen_retention_days"),
            ("http:\n  timeout_seconds: -1\n", "timeout_seconds"),
            ("http:\n  retries: -1\n", "retries"),
            ("providers:\n  degewo: yes\n", "degewo"),
            ("- just\n- a list\n", "mapping"),
        ],
    )
    def test_invalid(self, write_config, text, message):
        with pytest.raises(ValueError, match=message):
            load_config(write_config(text))

    def test_example_config_is_valid(self):
        from pathlib import Path

        example = Path(__file__).parent.parent / "config" / "config.example.yaml"
        config = load_config(str(example))

        assert set(config["providers"]) == {"vonovia", "gewobag", "degewo", "dw", "stadtundland", "berlinovo", "google"}


class TestGetEnv:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("WF_TEST_VALUE", raising=False)
        assert get_env("WF_TEST_VALUE", "fallback") == "fallback"

    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("WF_TEST_VALUE", raising=False)
        with pytest.raises(ValueError, match="WF_TEST_VALUE"):
            get_env("WF_TEST_VALUE", required=True)
