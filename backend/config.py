"""Centralized configuration — all env vars in one place."""

import os

DEMO_API_KEY = "123"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # TheSportsDB
        self.sportsdb_api_key: str | None = os.getenv("SPORTSDB_API_KEY")
        self.sportsdb_base_url: str = os.getenv(
            "SPORTSDB_BASE_URL", "https://www.thesportsdb.com/api/v1/json"
        ).rstrip("/")
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

        # Follow-state storage
        self.follows_file: str = os.getenv("FOLLOWS_FILE", os.path.join("data", "follows.json"))
        self.legacy_client_id: str = os.getenv("FOLLOWS_LEGACY_CLIENT_ID", "default")

        self.default_season: str = os.getenv("DEFAULT_SEASON", "2025-2026")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def api_key(self) -> str:
        """Configured key, or the public demo key."""
        return self.sportsdb_api_key or DEMO_API_KEY

    @property
    def upstream_base(self) -> str:
        return f"{self.sportsdb_base_url}/{self.api_key}"

    def validate(self) -> list[str]:
        """Return list of missing env vars (the demo key is rate-limited)."""
        required = ["SPORTSDB_API_KEY"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "SPORTSDB_API_KEY": "sportsdb_api_key",
    }
    return mapping.get(env_var, env_var.lower())
