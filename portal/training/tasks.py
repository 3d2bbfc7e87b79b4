"""
Tâches Celery pour l'application training.

- Relais asynchrone des paliers de visionnage vers le CRM. Pas de nouvel
  essai: un palier perdu reste perdu, le suivi est best effort.
- Nettoyage périodique des états de lecture abandonnés.
"""
from celery import shared_task
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .engagement import forward_milestone

logger = logging.getLogger(__name__)

@shared_task(ignore_result=True)
def forward_milestone_task(payload: dict):
    """
    Args:
        payload: {email, milestone, percentage?, watchedSeconds?} (voir MilestoneEvent.as_payload)

    Returns:
        bool: True si le palier a été enregistré dans le CRM
    """
    try:
        return forward_milestone(
            payload['email'],
            payload['milestone'],
            percentage=payload.get('percentage'),
            watched_seconds=payload.get('watchedSeconds'),
        )
    except Exception as exc:
        logger.warning(f"Relais du palier {payload.get('milestone')} abandonné: {exc}")
        return False

def dispatch_milestone(event):
    """Planifie le relais d'un `MilestoneEvent` sans attendre (fire-and-forget)."""
    try:
        forward_milestone_task.delay(event.as_payload())
    except Exception as exc:
        # Broker indisponible: l'événement est abandonné, la lecture continue
        logger.warning(f"Palier {event.milestone} non planifié pour {event.email}: {exc}")

@shared_task
def cleanup_stale_playback_states():
    """
    Supprime les états de lecture inactifs depuis plus de
    PLAYBACK_STATE_RETENTION_DAYS jours (onglets fermés depuis longtemps).

    Planifiée une fois par jour via Celery Beat (CELERY_BEAT_SCHEDULE).

    Returns:
        int: Nombre d'états supprimés
    """
    from .models import PlaybackState

    threshold = timezone.now() - timedelta(days=settings.PLAYBACK_STATE_RETENTION_DAYS)
    count, _ = PlaybackState.objects.filter(updated_at__lt=threshold).delete()

    logger.info(f"Cleaned up {count} stale playback states")
    return count
