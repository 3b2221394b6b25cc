from vs_chatbot.config.settings import APISettings, MemorySettings, RedisSettings


def test_redis_url():
    assert RedisSettings(host="cache", port=6380, db=2).url == "redis://cache:6380/2"
    assert RedisSettings(password="secret").url == "redis://:secret@localhost:6379/0"


def test_cors_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("API_CORS_ORIGINS", "http://a.test, http://b.test")

    assert APISettings().cors_origins == ["http://a.test", "http://b.test"]


def test_memory_settings_from_env(monkeypatch):
    monkeypatch.setenv("MEMORY_BACKEND", "redis")
    monkeypatch.setenv("MEMORY_WINDOW", "4")

    settings = MemorySettings()

    assert settings.backend == "redis"
    assert settings.window == 4
    assert "window" in settings.model_fields_set
