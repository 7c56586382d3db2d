from core.config import Settings

_KEYS = ["DATABASE_URL", "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "TZ", "PORT", "LOG_LEVEL"]


def _clear(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)

    settings = Settings.from_env()

    assert settings.db_host == "localhost"
    assert settings.db_port == 5455
    assert settings.timezone == "Asia/Vientiane"
    assert settings.port == 3001
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("DB_HOST", "pg")
    monkeypatch.setenv("DB_PORT", "5432")
    monkeypatch.setenv("DB_USER", "app")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    monkeypatch.setenv("DB_NAME", "feedback")
    monkeypatch.setenv("TZ", "UTC")
    monkeypatch.setenv("PORT", "not-a-number")

    settings = Settings.from_env()
    kwargs = settings.connect_kwargs()

    assert settings.port == 3001
    assert kwargs == {
        "host": "pg",
        "port": 5432,
        "user": "app",
        "password": "secret",
        "database": "feedback",
        "server_settings": {"timezone": "UTC"},
    }


def test_database_url_wins_and_drops_sslmode(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/feedback?sslmode=disable&application_name=fb")

    kwargs = Settings.from_env().connect_kwargs()

    assert kwargs["dsn"] == "postgresql://u:p@db/feedback?application_name=fb"
    assert "host" not in kwargs
