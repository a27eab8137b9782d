from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str

    # Admin session (JWT in an http-only cookie)
    SESSION_SECRET: str
    SESSION_ISS: str = "mentorhub-api"
    SESSION_AUD: str = "mentorhub-admin"
    ADMIN_SESSION_TTL_SECONDS: int = 60 * 15  # 15 minutes

    # Cookie
    COOKIE_SECURE: bool = False
    COOKIE_DOMAIN: str | None = None

    # Shared secret for the cron trigger (X-API-Key). Empty disables it.
    CRON_SECRET: str = ""

    # Outbound notifications (Apprise API)
    APPRISE_URL: str = "http://apprise:8000"

    # Deployment-local calendar used for "today" and schedule matching
    TIMEZONE: str = "America/Chicago"

    SHIFT_GENERATION_WEEKS: int = 4
    MIN_MENTOR_SIGNUPS: int = 2

    ADMIN_DEFAULT_PASSWORD: str = "changeme"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = ""

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x.strip()]


settings = Settings()
