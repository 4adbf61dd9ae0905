import os

from celery import Celery
from celery.signals import setup_logging

# Deployed workers default to production settings; tests and local runs set
# DJANGO_SETTINGS_MODULE explicitly (pytest uses config.settings.test).
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("fiscalflow")

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")


@setup_logging.connect
def config_loggers(*args, **kwargs):
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)


# Picks up fiscalflow.notifications.tasks and any other app task modules.
app.autodiscover_tasks()
