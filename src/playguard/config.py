from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL, database name taken from the path, e.g. mongodb://localhost/playguard
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []
    sweep_interval_seconds: float = 60.0  # How often open sessions are checked against daily limits
    session_ttl_hours: int = 24  # Hard ceiling for a session, independent of the playtime budget
    timezone: str = "UTC"  # IANA zone that defines the calendar day for daily resets
    close_expired_sessions: bool = True  # Sweeper also closes sessions past their expires_at

    model_config = {
        "env_file": [".env"],
        "env_prefix": "PLAYGUARD_",
        "extra": "ignore",
    }
