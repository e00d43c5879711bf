from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Data access for the dashboard; falls back to supabase_key

    # Gemini (AI tip generation). The key itself lives on each admin's profile row.
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    gemini_model: str = "gemini-1.5-flash"
    gemini_timeout_seconds: float = 60.0

    # App
    app_name: str = "truescan-admin-panel"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    session_secret: str = "change-me"
    session_max_age: int = 60 * 60 * 12  # seconds
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    login_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    allow_admin_bootstrap: bool = True
    admin_only: bool = True  # sign-in requires an active admin_users row

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def gemini_endpoint(self) -> str:
        return self.gemini_api_url.format(model=self.gemini_model)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
