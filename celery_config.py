# 📄 File: celery_config.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the FarmX background worker, which quietly finishes interrupted
# purchases on a timer.
#
# 🧪 Purpose (Technical Summary):
# Celery configuration with Redis as broker and result backend, queue definitions and
# the beat schedule for checkout reconciliation.
#
# 🔗 Dependencies:
# - celery, kombu
# - Redis server (message broker)
# - farmx.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - farmx/background_jobs/tasks/order_reconciliation.py
# - Docker Compose services (celery worker and beat)

from datetime import timedelta

from celery import Celery
from kombu import Queue

from farmx.shared.config.settings import get_settings

settings = get_settings()

RECONCILE_TASK = "farmx.background_jobs.tasks.order_reconciliation.reconcile_checkout_orders"


class CeleryConfig:
    """
    Celery configuration class for the FarmX backend.
    """

    # =========================================================================
    # BROKER AND BACKEND SETTINGS
    # =========================================================================

    broker_url = settings.CELERY_BROKER_URL
    result_backend = settings.CELERY_RESULT_BACKEND

    broker_connection_retry_on_startup = True
    broker_connection_max_retries = 10
    result_expires = timedelta(hours=24)

    # =========================================================================
    # TASK SETTINGS
    # =========================================================================

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    task_default_queue = "default"
    task_time_limit = 300  # 5 minutes hard limit
    task_soft_time_limit = 240
    task_acks_late = True
    worker_prefetch_multiplier = 1

    task_routes = {
        RECONCILE_TASK: {"queue": "reconciliation"},
    }

    task_queues = (
        Queue("reconciliation", routing_key="reconciliation"),
        Queue("default", routing_key="default"),
    )

    worker_hijack_root_logger = False

    # =========================================================================
    # BEAT SCHEDULER SETTINGS
    # =========================================================================

    beat_schedule = {
        "reconcile-checkout-orders": {
            "task": RECONCILE_TASK,
            "schedule": timedelta(minutes=settings.RECONCILIATION_INTERVAL_MINUTES),
            "options": {"queue": "reconciliation"},
        },
    }


class ProductionCeleryConfig(CeleryConfig):
    """Production-specific Celery configuration."""

    broker_use_ssl = True
    redis_backend_use_ssl = True


def get_celery_config() -> CeleryConfig:
    """Pick the configuration class for the current environment."""
    if settings.ENVIRONMENT in ("staging", "production"):
        return ProductionCeleryConfig()
    return CeleryConfig()


# Create Celery app with configuration
app = Celery("farmx_backend")
app.config_from_object(get_celery_config())
app.autodiscover_tasks(["farmx.background_jobs.tasks.order_reconciliation"], related_name=None)


if __name__ == "__main__":
    app.start()
