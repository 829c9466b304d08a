from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_prefix: str = "/api/v1"
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Remote store (Firebase Realtime Database). Unset means local/degraded mode.
    store_url: Optional[str] = None
    store_auth_token: Optional[str] = None
    store_timeout: int = 10

    data_dir: Path = Field(default_factory=lambda: Path(".scout_data"))
    local_storage_file: str = "local_storage.json"
    session_key: str = "pvfc_auth_session"
    shadow_team_prefix: str = "pvfc_shadow_team"
    watchlist_key: str = "pvfc_watchlist_data"

    auth_secret: str = "change-me"
    access_token_expire_days: int = 7

    refresh_interval_seconds: float = 45.0

    ai_api_key: Optional[str] = None
    ai_base_url: str = "https://api.groq.com/openai/v1"
    ai_model: str = "llama-3.3-70b-versatile"
    ai_temperature: float = 0.7
    ai_max_tokens: int = 1024

    club_name: str = "Porto Vitória FC"

    class Config:
        env_prefix = "SCOUT_"
        env_file = ".env"
        case_sensitive = False

    @property
    def local_storage_path(self) -> Path:
        return Path(self.data_dir) / self.local_storage_file


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
