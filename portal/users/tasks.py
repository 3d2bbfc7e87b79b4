"""
Tâches Celery pour l'application users.

- Notification du workflow de complétion de profil (fire-and-forget depuis
  la page `/set-password/`).
"""
from celery import shared_task
import logging

from core.exceptions import UpstreamUnavailable
from .webhooks import notify_profile_completed

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def notify_profile_completed_task(self, payload: dict):
    """
    Envoie la complétion de profil au webhook n8n de façon asynchrone.

    Args:
        payload: {email, first_name, last_name, user_id}

    Returns:
        bool: True si le webhook a accepté la notification, False s'il n'est pas configuré
    """
    try:
        sent = notify_profile_completed(payload)
    except UpstreamUnavailable as exc:
        logger.warning(f"Webhook de profil en échec pour {payload.get('email')}: {exc}")
        raise self.retry(exc=exc, countdown=60)

    if sent:
        logger.info(f"Complétion de profil transmise pour {payload.get('email')}")
    return sent
