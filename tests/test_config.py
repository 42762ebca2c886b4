"""Tests for application settings."""
import pytest
from pydantic import ValidationError

from passwordle.core.config import DEFAULT_WORDS_PATH, Settings
from passwordle.services.session_manager import SessionManager
from passwordle.services.word_source import WordListSource
from passwordle.storage.memory import InMemoryBackend


class TestSettingsDefaults:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SESSION_STORE_BACKEND", raising=False)
        config = Settings()
        assert config.SESSION_STORE_BACKEND == "memory"
        assert config.SESSION_TTL_SECONDS == 86400
        assert config.DEFAULT_WORD_LENGTH == 5
        assert config.DEFAULT_MAX_GUESSES == 6
        assert config.MAX_GUESSES_LIMIT == 64
        assert config.WORD_SOURCE == "wordlist"
        assert config.WORDS_PATH == str(DEFAULT_WORDS_PATH)
        assert config.CORS_ORIGINS == ["*"]

    def test_packaged_word_list_exists(self):
        assert DEFAULT_WORDS_PATH.exists()


class TestSettingsFromEnv:

    def test_env_binding(self, monkeypatch):
        monkeypatch.setenv("SESSION_STORE_BACKEND", " Redis ")
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")
        monkeypatch.setenv("SESSION_TTL_SECONDS", "120")
        monkeypatch.setenv("MAX_CONFLICT_RETRIES", "0")
        config = Settings()
        assert config.SESSION_STORE_BACKEND == "redis"
        assert config.REDIS_URL == "redis://cache:6379/1"
        assert config.SESSION_TTL_SECONDS == 120
        assert config.MAX_CONFLICT_RETRIES == 0

    def test_cors_origins_parsed(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
        assert Settings().CORS_ORIGINS == ["https://a.example", "https://b.example"]


class TestSettingsValidation:

    @pytest.mark.parametrize("overrides", [
        {"DEFAULT_MAX_GUESSES": 0},
        {"DEFAULT_MAX_GUESSES": 10, "MAX_GUESSES_LIMIT": 8},
        {"DEFAULT_WORD_LENGTH": 0},
        {"SESSION_TTL_SECONDS": 0},
        {"MAX_CONFLICT_RETRIES": -1},
    ])
    def test_rejects_bad_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(**overrides)


class TestManagerFromSettings:

    def test_rules_come_from_settings(self):
        config = Settings(DEFAULT_MAX_GUESSES=4, SESSION_TTL_SECONDS=30)
        manager = SessionManager.from_settings(
            config, InMemoryBackend(), WordListSource(["crane"])
        )
        session = manager.create_session()
        assert session.max_guesses == 4
        assert session.expires_at - session.created_at == pytest.approx(30)

    def test_reward_key_from_settings(self):
        config = Settings(WIN_REWARD_KEY=" 31abhtykwu ")
        manager = SessionManager.from_settings(
            config, InMemoryBackend(), WordListSource(["crane"])
        )
        assert manager.reward_key == "31abhtykwu"
        session = manager.create_session()
        assert manager.submit_guess(session.id, "crane").key == "31abhtykwu"

    def test_no_reward_key_by_default(self):
        manager = SessionManager.from_settings(
            Settings(), InMemoryBackend(), WordListSource(["crane"])
        )
        assert manager.reward_key is None
