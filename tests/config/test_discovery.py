"""Tests for config directory discovery and document loading."""

from pathlib import Path

import pytest

from melange.config.discovery import (
    CONFIG_ENV_VAR,
    ConfigFileError,
    default_config_dir,
    find_config,
    load_document,
)


class TestDefaultConfigDir:
    def test_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_dir() == tmp_path / "informant"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_config_dir() == tmp_path / ".config" / "informant"

    def test_neither_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")
        monkeypatch.delenv("HOME", raising=False)
        assert default_config_dir() is None


class TestFindConfig:
    def test_finds_toml_in_dir(self, config_dir: Path) -> None:
        config_file = config_dir / "informant.toml"
        config_file.write_text("")
        assert find_config(config_dir) == config_file

    def test_toml_preferred_over_yaml(self, config_dir: Path) -> None:
        (config_dir / "informant.yaml").write_text("")
        (config_dir / "informant.toml").write_text("")
        assert find_config(config_dir) == config_dir / "informant.toml"

    def test_json(self, config_dir: Path) -> None:
        config_file = config_dir / "informant.json"
        config_file.write_text("{}")
        assert find_config(config_dir) == config_file

    def test_sibling_file(self, config_dir: Path) -> None:
        sibling = config_dir.parent / "informant.yml"
        sibling.write_text("")
        assert find_config(config_dir) == sibling

    def test_missing_dir(self, tmp_path: Path) -> None:
        assert find_config(tmp_path / "nowhere") is None

    def test_returns_none_when_not_found(self, config_dir: Path) -> None:
        assert find_config(config_dir) is None

    def test_none_dir(self) -> None:
        assert find_config(None) is None

    def test_env_var_override(
        self, config_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (config_dir / "informant.toml").write_text("")
        custom = tmp_path / "custom.yaml"
        custom.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        assert find_config(config_dir) == custom

    def test_env_var_missing_file(
        self, config_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (config_dir / "informant.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        assert find_config(config_dir) is None


class TestLoadDocument:
    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "informant.toml"
        path.write_text('shell = "bash"\n[font]\nsize = 30.0\n')
        assert load_document(path) == {"shell": "bash", "font": {"size": 30.0}}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "informant.yaml"
        path.write_text("shell: zsh\ncommands:\n  lock: [loginctl, lock-session]\n")
        data = load_document(path)
        assert data["shell"] == "zsh"
        assert data["commands"]["lock"] == ["loginctl", "lock-session"]

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "informant.json"
        path.write_text('{"fullscreen": false}')
        assert load_document(path) == {"fullscreen": False}

    @pytest.mark.parametrize("name", ["informant.toml", "informant.yaml", "informant.json"])
    def test_empty_file(self, tmp_path: Path, name: str) -> None:
        path = tmp_path / name
        path.write_text("")
        assert load_document(path) == {}

    def test_no_suffix_read_as_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "informant"
        path.write_text("fullscreen = false\n")
        assert load_document(path) == {"fullscreen": False}

    @pytest.mark.parametrize(
        ("name", "body"),
        [
            ("informant.toml", "shell = \n"),
            ("informant.yaml", "shell: [unclosed\n"),
            ("informant.json", "{not json"),
        ],
    )
    def test_syntax_error(self, tmp_path: Path, name: str, body: str) -> None:
        path = tmp_path / name
        path.write_text(body)
        with pytest.raises(ConfigFileError) as exc_info:
            load_document(path)
        assert exc_info.value.path == path

    def test_top_level_must_be_table(self, tmp_path: Path) -> None:
        path = tmp_path / "informant.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigFileError, match="top level"):
            load_document(path)
