"""Application Celery du portail (tâches fire-and-forget vers les services tiers)."""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'training_portal.settings')

app = Celery('training_portal')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
