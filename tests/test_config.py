"""Tests for config module."""

import pytest

from loggly_client.config import DEFAULT_ENDPOINT, ClientConfig, load_config, parse_tags


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "LOGGLY_TOKEN", "LOGGLY_ENDPOINT", "LOGGLY_TIMEOUT", "LOGGLY_MAX_WORKERS",
        "LOGGLY_TAGS", "LOGGLY_CONFIG", "METRICS_INTERVAL",
    ):
        monkeypatch.delenv(var, raising=False)


class TestParseTags:
    def test_pairs(self):
        assert parse_tags("a=1,b=2") == {"a": "1", "b": "2"}

    def test_whitespace_stripped(self):
        assert parse_tags(" a = 1 , b=2 ") == {"a": "1", "b": "2"}

    def test_entries_without_equals_ignored(self):
        assert parse_tags("a=1,junk,") == {"a": "1"}


class TestConfigDefaults:
    def test_defaults(self):
        cfg = ClientConfig()
        assert cfg.token == ""
        assert cfg.endpoint == DEFAULT_ENDPOINT == "https://logs-01.loggly.com/"
        assert cfg.timeout == 10.0
        assert cfg.max_workers == 4
        assert cfg.tags == {}
        assert cfg.metrics_interval == 0

    def test_frozen(self):
        cfg = ClientConfig()
        with pytest.raises(AttributeError):
            cfg.token = "x"


class TestLoadConfigCLI:
    def test_cli_overrides(self):
        cfg, options = load_config([
            "--token", "abc",
            "--endpoint", "http://localhost:8080/",
            "--timeout", "2.5",
            "--max-workers", "8",
            "--tag", "env=prod",
            "--tag", "app=web",
            "--bulk",
            "first", "second",
        ])
        assert cfg.token == "abc"
        assert cfg.endpoint == "http://localhost:8080/"
        assert cfg.timeout == 2.5
        assert cfg.max_workers == 8
        assert cfg.tags == {"env": "prod", "app": "web"}
        assert options.bulk is True
        assert options.messages == ("first", "second")
        assert options.file is None

    def test_empty_argv(self):
        cfg, options = load_config([])
        assert cfg == ClientConfig()
        assert options.messages == ()
        assert options.bulk is False


class TestLoadConfigEnv:
    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("LOGGLY_TOKEN", "env-token")
        monkeypatch.setenv("LOGGLY_ENDPOINT", "http://env/")
        monkeypatch.setenv("LOGGLY_TIMEOUT", "3")
        monkeypatch.setenv("LOGGLY_MAX_WORKERS", "2")
        monkeypatch.setenv("LOGGLY_TAGS", "a=1,b=2")
        monkeypatch.setenv("METRICS_INTERVAL", "30")
        cfg, _ = load_config([])
        assert cfg.token == "env-token"
        assert cfg.endpoint == "http://env/"
        assert cfg.timeout == 3.0
        assert cfg.max_workers == 2
        assert cfg.tags == {"a": "1", "b": "2"}
        assert cfg.metrics_interval == 30

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("LOGGLY_TOKEN", "env-token")
        cfg, _ = load_config(["--token", "cli-token"])
        assert cfg.token == "cli-token"

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("LOGGLY_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            load_config([])


class TestLoadConfigYaml:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "loggly.yml"
        path.write_text(
            "token: yaml-token\n"
            "timeout: 7\n"
            "tags:\n"
            "  env: staging\n"
            "  build: 42\n"
        )
        cfg, _ = load_config(["--config", str(path)])
        assert cfg.token == "yaml-token"
        assert cfg.timeout == 7.0
        assert cfg.tags == {"env": "staging", "build": "42"}

    def test_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "loggly.yml"
        path.write_text("token: yaml-token\nendpoint: http://yaml/\nmax_workers: 3\n")
        monkeypatch.setenv("LOGGLY_CONFIG", str(path))
        monkeypatch.setenv("LOGGLY_ENDPOINT", "http://env/")
        cfg, _ = load_config(["--max-workers", "9"])
        assert cfg.token == "yaml-token"
        assert cfg.endpoint == "http://env/"
        assert cfg.max_workers == 9

    def test_cli_tags_merge_over_yaml(self, tmp_path):
        path = tmp_path / "loggly.yml"
        path.write_text("tags:\n  env: staging\n  app: web\n")
        cfg, _ = load_config(["--config", str(path), "--tag", "env=prod"])
        assert cfg.tags == {"env": "prod", "app": "web"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        cfg, _ = load_config(["--config", str(path)])
        assert cfg == ClientConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(["--config", str(path)])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(["--config", str(tmp_path / "nope.yml")])
