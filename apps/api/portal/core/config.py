"""Application configuration with environment variables."""

from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    TESTING: bool = False

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Proxy/Load Balancer Settings
    # Set to True when running behind nginx/Cloudflare to trust X-Forwarded-For
    TRUST_PROXY_HEADERS: bool = False

    # Database (DATABASE_URL wins; otherwise assembled from PG* parts)
    DATABASE_URL: str = ""
    PGHOST: str = "localhost"
    PGPORT: int = 5432
    PGUSER: str = "postgres"
    PGPASSWORD: str = ""
    PGDATABASE: str = "onboarding_portal"

    # Main-app session cookie
    SESSION_SECRET: str = "change-this-in-production"
    SESSION_EXPIRES_HOURS: int = 24

    # CMS admin tokens (Authorization: Bearer)
    CMS_JWT_SECRET: str = "change-this-in-production"
    CMS_JWT_EXPIRES_HOURS: int = 24
    CMS_LOCK_DEFAULT_MINUTES: int = 30

    # Password hashing cost
    BCRYPT_ROUNDS: int = 12

    # Identity provider backing /api/auth/login ("demo" only for now)
    IDENTITY_PROVIDER: str = "demo"

    # Chat widget property id, passed through to the frontend
    TAWK_PROPERTY_ID: str = ""

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""  # Secret for /internal/scheduled/* endpoints

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Login attempts
    RATE_LIMIT_API: int = 120  # General API
    REDIS_URL: str = "redis://localhost:6379/0"  # Empty disables the shared store

    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        """Resolved SQLAlchemy URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = f":{quote_plus(self.PGPASSWORD)}" if self.PGPASSWORD else ""
        return (
            f"postgresql+psycopg://{self.PGUSER}{password}"
            f"@{self.PGHOST}:{self.PGPORT}/{self.PGDATABASE}"
        )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV != "dev"


settings = Settings()
