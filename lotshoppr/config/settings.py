from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./lotshoppr.db"
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    debug: bool = False

    # CORS - intake form host and local dashboard
    cors_origins: list[str] = ["http://localhost:3000"]

    # Lead storage backend: "sql" or "memory"
    lead_store: str = "sql"

    # OpenAI offer extraction
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 20.0

    # Redis / Celery
    redis_url: str = ""
    celery_broker_url: str = ""
    celery_result_backend: str = ""

    # Email
    email_provider: str = "smtp"  # "smtp" or "sendgrid"
    sendgrid_api_key: str = ""
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    email_from_address: str = "deals@lotshoppr.app"
    email_from_name: str = "LotShoppr"

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_deployed(self) -> bool:
        return self.environment.lower() in ("production", "staging")

    @property
    def effective_celery_broker(self) -> str:
        return self.celery_broker_url or self.redis_url or "memory://"

    @property
    def effective_celery_backend(self) -> str:
        return self.celery_result_backend or self.redis_url or "cache+memory://"

    def validate_production(self) -> None:
        """Raise if production is using insecure or missing values."""
        if self.is_production and not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY must be set in production")
        if self.is_production and self.lead_store != "sql":
            raise ValueError("LEAD_STORE must be 'sql' in production")
        if self.is_production and "sqlite" in self.database_url:
            raise ValueError("DATABASE_URL must point at a server database in production")
        if self.is_production and not self.redis_url:
            raise ValueError("REDIS_URL must be set in production")
        if self.is_production and self.email_provider == "sendgrid" and not self.sendgrid_api_key:
            raise ValueError("SENDGRID_API_KEY must be set when EMAIL_PROVIDER is sendgrid")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
