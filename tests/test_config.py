"""Tests for layered settings and the saved login token"""

import os

import pytest

from unisocial.config import (
    Settings,
    clear_saved_token,
    load_config_file,
    load_settings,
    read_saved_token,
    save_token,
    token_path,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME and the working directory at empty temp dirs"""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in ("UNISOCIAL_API_URL", "UNISOCIAL_TOKEN", "UNISOCIAL_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return home, work


class TestConfigFile:
    def test_no_file(self):
        assert load_config_file() == {}

    def test_polling_section_flattened(self, isolated_env):
        home, _ = isolated_env
        (home / ".unisocial.yaml").write_text(
            "api_url: https://social.campus.edu\n"
            "polling:\n"
            "  comments: 10\n"
            "  chat: 1\n"
        )

        config = load_config_file()

        assert config == {
            "api_url": "https://social.campus.edu",
            "comment_poll_interval": 10,
            "chat_poll_interval": 1,
        }

    def test_working_directory_file_wins(self, isolated_env):
        home, work = isolated_env
        (home / ".unisocial.yaml").write_text("api_url: http://home\n")
        (work / ".unisocial.yaml").write_text("api_url: http://work\n")

        assert load_config_file()["api_url"] == "http://work"

    def test_malformed_file_skipped(self, isolated_env):
        home, work = isolated_env
        (work / ".unisocial.yaml").write_text("api_url: [unclosed\n")
        (home / ".unisocial.yaml").write_text("api_url: http://home\n")

        assert load_config_file()["api_url"] == "http://home"

    def test_non_mapping_skipped(self, isolated_env):
        _, work = isolated_env
        (work / ".unisocial.yaml").write_text("- just\n- a list\n")

        assert load_config_file() == {}


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()

        assert settings == Settings()
        assert settings.api_url == "http://localhost:8080"
        assert settings.chat_poll_interval == 2.0
        assert settings.rooms_poll_interval == 5.0

    def test_env_overrides_file(self, isolated_env, monkeypatch):
        _, work = isolated_env
        (work / ".unisocial.yaml").write_text("api_url: http://file\nrequest_timeout: 3\n")
        monkeypatch.setenv("UNISOCIAL_API_URL", "http://env")

        settings = load_settings()

        assert settings.api_url == "http://env"
        assert settings.request_timeout == 3.0

    def test_explicit_override_wins(self, monkeypatch):
        monkeypatch.setenv("UNISOCIAL_API_URL", "http://env")

        settings = load_settings(api_url="http://cli/")

        assert settings.api_url == "http://cli"

    def test_none_override_ignored(self, monkeypatch):
        monkeypatch.setenv("UNISOCIAL_API_URL", "http://env")

        assert load_settings(api_url=None).api_url == "http://env"

    def test_saved_token_used_as_fallback(self):
        save_token("saved-token")
        assert load_settings().token == "saved-token"

    def test_env_token_preferred_over_saved(self, monkeypatch):
        save_token("saved-token")
        monkeypatch.setenv("UNISOCIAL_TOKEN", "env-token")

        assert load_settings().token == "env-token"


class TestSavedToken:
    def test_save_and_read(self):
        path = save_token("abc")

        assert path == token_path()
        assert read_saved_token() == "abc"
        assert path.stat().st_mode & 0o777 == 0o600

    def test_existing_file_tightened(self):
        path = token_path()
        path.parent.mkdir(parents=True)
        path.write_text("old")
        path.chmod(0o644)

        save_token("new")

        assert path.stat().st_mode & 0o777 == 0o600
        assert read_saved_token() == "new"

    def test_created_private_under_permissive_umask(self):
        old_umask = os.umask(0)
        try:
            path = save_token("abc")
        finally:
            os.umask(old_umask)

        assert path.stat().st_mode & 0o777 == 0o600

    def test_read_missing(self):
        assert read_saved_token() is None

    def test_blank_file_treated_as_missing(self):
        path = save_token("  \n")
        assert path.exists()
        assert read_saved_token() is None

    def test_clear(self):
        save_token("abc")

        assert clear_saved_token() is True
        assert read_saved_token() is None
        assert clear_saved_token() is False
