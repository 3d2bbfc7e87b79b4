"""
Webhooks n8n: demande d'invitation et complétion de profil.

Aucune logique métier ici: on met en forme la requête, on la transmet telle
quelle et on traduit la réponse pour la vue appelante.
"""

import logging

import requests
from django.conf import settings

from core.exceptions import NotConfigured, UpstreamUnavailable

logger = logging.getLogger(__name__)

INVITE_SENT = 'sent'
ALREADY_REGISTERED = 'already_registered'


class InviteRejected(UpstreamUnavailable):
    """Le workflow d'invitation a refusé la demande.

    `user_message` est le message renvoyé par le workflow (champ `message`),
    destiné à l'utilisateur; `None` si le workflow n'en fournit pas.
    """

    def __init__(self, message, status_code=None, body=None, user_message=None):
        super().__init__(message, status_code=status_code, body=body)
        self.user_message = user_message


def request_invite(email, session=None):
    """Demande l'envoi d'une invitation pour `email`.

    Retour:
    - INVITE_SENT si le workflow a accepté la demande;
    - ALREADY_REGISTERED si le compte existe déjà (HTTP 409).

    Lève:
    - NotConfigured si N8N_INVITE_WEBHOOK est vide;
    - InviteRejected pour toute autre réponse non-2xx;
    - UpstreamUnavailable si le webhook est injoignable.
    """
    url = settings.N8N_INVITE_WEBHOOK
    if not url:
        raise NotConfigured("N8N_INVITE_WEBHOOK manquant")

    http = session or requests
    try:
        response = http.post(url, json={'email': email}, timeout=settings.WEBHOOK_TIMEOUT)
    except requests.RequestException as exc:
        logger.error(f"Webhook d'invitation injoignable: {exc}")
        raise UpstreamUnavailable("Invite webhook unreachable") from exc

    if response.status_code == 409:
        logger.info(f"Invitation ignorée, compte existant: {email}")
        return ALREADY_REGISTERED

    if not response.ok:
        try:
            data = response.json()
        except ValueError:
            data = {}
        user_message = data.get('message') if isinstance(data, dict) else None
        logger.warning(f"Webhook d'invitation: {response.status_code} {response.text[:500]}")
        raise InviteRejected("Invite webhook rejected the request", status_code=response.status_code,
                             body=response.text, user_message=user_message)

    logger.info(f"Invitation demandée pour {email}")
    return INVITE_SENT


def notify_profile_completed(payload, session=None):
    """Transmet {email, first_name, last_name, user_id} au workflow de profil.

    Retour:
    - bool: False si le webhook n'est pas configuré (rien à faire).
    """
    url = settings.N8N_PROFILE_WEBHOOK
    if not url:
        logger.debug("N8N_PROFILE_WEBHOOK absent, notification de profil ignorée")
        return False

    http = session or requests
    try:
        response = http.post(url, json=payload, timeout=settings.WEBHOOK_TIMEOUT)
    except requests.RequestException as exc:
        raise UpstreamUnavailable("Profile webhook unreachable") from exc
    if not response.ok:
        raise UpstreamUnavailable("Profile webhook rejected the request",
                                  status_code=response.status_code, body=response.text)
    return True
