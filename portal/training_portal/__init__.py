# Charge l'application Celery au démarrage de Django pour que @shared_task l'utilise.
from .celery import app as celery_app

__all__ = ('celery_app',)
