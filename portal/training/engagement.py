"""
Relais des paliers de visionnage vers le CRM (HubSpot), en best effort.

Pour un palier donné:
- `started` / `50%` / `75%` / `completed` → note associée au contact;
- dès qu'un temps regardé est fourni (y compris avec une note) et qu'un nom
  d'événement personnalisé est configuré → événement comportemental.

`forward_milestone` ne lève jamais: un CRM injoignable, un jeton absent ou un
contact inconnu se traduisent simplement par `False` ("non suivi").
"""

import logging

from django.conf import settings
from django.utils import timezone

from core.exceptions import NotConfigured, SubjectNotFound, UpstreamUnavailable
from .hubspot import HubSpotClient
from .progress import COMPLETED, HALF, STARTED, THREE_QUARTERS

logger = logging.getLogger(__name__)

NOTE_MILESTONES = (STARTED, HALF, THREE_QUARTERS, COMPLETED)


def note_body(milestone, percentage=None):
    """Texte de la note CRM pour un palier."""
    label = settings.TRAINING_NOTE_LABEL
    if milestone == STARTED:
        return f"▶ Started watching the {label}."
    if milestone == COMPLETED:
        return f"✅ Completed the {label} (watched 100%)."
    if percentage is None:
        percentage = milestone.rstrip('%')
    return f"\U0001f4fa Reached {percentage}% of the {label}."


def forward_milestone(email, milestone, percentage=None, watched_seconds=None, client=None):
    """Relaie un palier au CRM.

    Retour:
    - bool: True si au moins une écriture CRM (note ou événement) a abouti.
    """
    try:
        client = client or HubSpotClient()
    except NotConfigured:
        logger.warning(f"HubSpot non configuré, palier {milestone} non suivi pour {email}")
        return False

    try:
        contact_id = client.find_contact_id(email)
        if not contact_id:
            raise SubjectNotFound(email)
    except SubjectNotFound:
        # Pas un contact suivi: succès silencieux, la vidéo continue
        logger.info(f"Contact HubSpot introuvable pour {email}, palier {milestone} ignoré")
        return False
    except UpstreamUnavailable as exc:
        logger.warning(f"Recherche du contact {email} en échec: {exc}")
        return False

    tracked = False

    if milestone in NOTE_MILESTONES:
        try:
            client.create_note(contact_id, note_body(milestone, percentage), timezone.now().isoformat())
            tracked = True
        except UpstreamUnavailable as exc:
            logger.warning(f"Note HubSpot non créée ({email}, {milestone}): {exc}")

    event_name = settings.HUBSPOT_VIDEO_CUSTOM_EVENT
    if watched_seconds is not None and event_name:
        properties = {
            'milestone': milestone,
            'watched_seconds': int(round(watched_seconds)),
        }
        if percentage is not None:
            properties['percentage'] = percentage
        try:
            client.send_behavioral_event(event_name, email, properties, object_id=contact_id)
            tracked = True
        except UpstreamUnavailable as exc:
            logger.warning(f"Événement HubSpot non envoyé ({email}, {milestone}): {exc}")

    if tracked:
        logger.info(f"Palier {milestone} suivi pour {email}")
    return tracked
