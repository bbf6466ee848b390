"""Tests for settings - production checks and Celery fallbacks."""

import pytest

from lotshoppr.config.settings import Settings


def production(**overrides) -> Settings:
    values = dict(
        environment="production",
        openai_api_key="sk-test",
        lead_store="sql",
        database_url="postgresql://lotshoppr@db/lotshoppr",
        redis_url="redis://cache:6379/0",
    )
    values.update(overrides)
    return Settings(**values)


class TestValidateProduction:

    def test_complete_production_config_passes(self):
        production().validate_production()

    @pytest.mark.parametrize("overrides,message", [
        ({"openai_api_key": ""}, "OPENAI_API_KEY"),
        ({"lead_store": "memory"}, "LEAD_STORE"),
        ({"database_url": "sqlite:///./lotshoppr.db"}, "DATABASE_URL"),
        ({"redis_url": ""}, "REDIS_URL"),
        ({"email_provider": "sendgrid", "sendgrid_api_key": ""}, "SENDGRID_API_KEY"),
    ])
    def test_missing_values_raise(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            production(**overrides).validate_production()

    def test_development_is_not_checked(self):
        Settings(environment="development", openai_api_key="", lead_store="memory").validate_production()


class TestEnvironmentFlags:

    def test_staging_is_deployed_but_not_production(self):
        settings = Settings(environment="Staging")
        assert settings.is_deployed
        assert not settings.is_production

    def test_celery_falls_back_to_memory(self):
        settings = Settings(redis_url="", celery_broker_url="", celery_result_backend="")
        assert settings.effective_celery_broker == "memory://"
        assert settings.effective_celery_backend == "cache+memory://"

    def test_celery_uses_redis_url(self):
        settings = Settings(redis_url="redis://cache:6379/0", celery_broker_url="")
        assert settings.effective_celery_broker == "redis://cache:6379/0"
