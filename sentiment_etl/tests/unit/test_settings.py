from sentiment_etl.config.settings import Settings


def test_csv_fields_are_split():
    config = Settings(YOUTUBE_VIDEO_IDS="a, b ,,c", INDONESIA_NEWS_OUTLETS="Kompas,DETIK", _env_file=None)
    assert config.YOUTUBE_VIDEO_IDS == ["a", "b", "c"]
    assert config.INDONESIA_NEWS_OUTLETS == ["kompas", "detik"]


def test_database_url_is_assembled():
    config = Settings(
        DB_USER="etl", DB_PASSWORD="pw", DB_HOST="db", DB_PORT=5433, DB_NAME="topics",
        DATABASE_URL=None, _env_file=None,
    )
    assert config.DATABASE_URL == "postgresql+asyncpg://etl:pw@db:5433/topics"


def test_explicit_database_url_is_kept():
    config = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", _env_file=None)
    assert config.DATABASE_URL == "sqlite+aiosqlite:///:memory:"


def test_validate_for_extraction(test_settings):
    assert test_settings.validate_for_extraction() == []

    broken = Settings(RAPIDAPI_KEY="", EXTRACTION_MAX_CONCURRENCY=0, YOUTUBE_VIDEO_IDS="", _env_file=None)
    problems = broken.validate_for_extraction()
    assert "RAPIDAPI_KEY is not set" in problems
    assert "EXTRACTION_MAX_CONCURRENCY must be at least 1" in problems
    assert "YOUTUBE_VIDEO_IDS must name at least one video" in problems


def test_youtube_video_info_defaults_and_json_override(monkeypatch):
    defaults = Settings(_env_file=None)
    assert defaults.YOUTUBE_VIDEO_INFO["B_NwHxJkKqE"]["author"] == "White House"
    assert set(defaults.YOUTUBE_VIDEO_INFO) == set(defaults.YOUTUBE_VIDEO_IDS)

    monkeypatch.setenv("YOUTUBE_VIDEO_INFO", '{"abc": {"title": "Briefing", "published": "2021-01-05"}}')
    config = Settings(_env_file=None)
    assert config.YOUTUBE_VIDEO_INFO == {"abc": {"title": "Briefing", "published": "2021-01-05"}}
