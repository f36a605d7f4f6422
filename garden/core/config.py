from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Upstream chat-completion endpoint (OpenAI-compatible).
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT: float = 30.0

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://garden.example.com,http://localhost:5173"
    CORS_ORIGINS: str = "*"

    # Requests per client address per minute on the API routes. 0 disables.
    RATE_LIMIT_PER_MINUTE: int = 30

    # Key the limit on X-Forwarded-For. Only enable behind a proxy that sets it.
    TRUST_PROXY_HEADERS: bool = False

    # Upper bound on the diary text sent for a monthly retrospective.
    MONTHLY_MAX_CHARS: int = 25_000

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
