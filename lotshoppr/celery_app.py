"""Celery application configuration.

Uses Redis as broker when configured, falls back to memory:// for local dev/tests.
Dealer emails are delivered from here so an SMTP or SendGrid hiccup is retried
instead of failing the HTTP request that drafted them.
"""

from celery import Celery

from lotshoppr.config.settings import get_settings

settings = get_settings()

app = Celery("lotshoppr")

app.conf.update(
    broker_url=settings.effective_celery_broker,
    result_backend=settings.effective_celery_backend,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_routes={
        "lotshoppr.tasks.email_tasks.*": {"queue": "email"},
    },
)

app.autodiscover_tasks(["lotshoppr.tasks"])
