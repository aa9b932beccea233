from celery import Celery

from backoffice.config import settings
from backoffice.logging import configure_logging

configure_logging()

celery_app = Celery(
    "backoffice",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["backoffice.tasks.siigo"],
)
celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)
