"""
Celery application - optional worker + beat deployment of the expiry sweep.
Challenge: Some deployments run the sweep outside the API process.
Design: Same broker as the rest of the stack (RabbitMQ); Redis as result backend.
Set SWEEPER_ENABLED=false on the API when running beat, so only one sweeper runs.
"""

from celery import Celery

from auction_house.config import get_settings

settings = get_settings()

celery_app = Celery(
    "auction_house",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["auction_house.queue.tasks"],
)

# Task settings: retries, time limits, serialization
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=60,
    worker_prefetch_multiplier=1,  # Fair distribution
    beat_schedule={
        "expire-auctions": {
            "task": "auction_house.queue.tasks.expire_auctions_task",
            "schedule": settings.sweeper_interval_seconds,
        },
    },
)
