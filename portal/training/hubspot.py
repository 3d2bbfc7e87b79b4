"""
Client HTTP HubSpot (Files API, Marketing Videos, CRM, événements comportementaux).

Le client ne fait que transporter: il renvoie le JSON brut de HubSpot et lève
`UpstreamUnavailable` pour toute erreur réseau ou statut non-2xx. La mise en
forme des réponses se fait dans `training.views` / `training.engagement`.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from django.conf import settings

from core.exceptions import NotConfigured, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Association HUBSPOT_DEFINED "note → contact"
NOTE_TO_CONTACT_ASSOCIATION = 202


class HubSpotClient:
    """Wrapper autour des endpoints HubSpot utilisés par le portail."""

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        token = token if token is not None else settings.HUBSPOT_PRIVATE_APP_TOKEN
        if not token:
            raise NotConfigured("HUBSPOT_PRIVATE_APP_TOKEN manquant")
        self._token = token
        self._base_url = (base_url or settings.HUBSPOT_API_BASE).rstrip('/')
        self._session = session or requests.Session()
        self._timeout = timeout or settings.HUBSPOT_TIMEOUT

    # ------------------------------------------------------------------
    # Vidéo
    # ------------------------------------------------------------------
    def get_file(self, file_id: str) -> dict:
        """Files API v3: fichier vidéo avec son URL d'hébergement."""
        return self._request('GET', f'/files/v3/files/{file_id}')

    def get_marketing_video(self, video_id: str) -> dict:
        """Marketing Videos v3: URL du lecteur intégré, flux et vignette."""
        return self._request('GET', f'/marketing/v3/videos/{video_id}')

    # ------------------------------------------------------------------
    # CRM
    # ------------------------------------------------------------------
    def find_contact_id(self, email: str) -> Optional[str]:
        """Recherche un contact par email; None s'il n'existe pas."""
        data = self._request('POST', '/crm/v3/objects/contacts/search', json={
            'filterGroups': [{'filters': [{'propertyName': 'email', 'operator': 'EQ', 'value': email}]}],
            'properties': ['id', 'email'],
            'limit': 1,
        })
        results = data.get('results') or []
        if not results:
            return None
        return results[0].get('id')

    def create_note(self, contact_id: str, body: str, timestamp: str) -> dict:
        return self._request('POST', '/crm/v3/objects/notes', json={
            'properties': {
                'hs_note_body': body,
                'hs_timestamp': timestamp,
            },
            'associations': [{
                'to': {'id': contact_id},
                'types': [{
                    'associationCategory': 'HUBSPOT_DEFINED',
                    'associationTypeId': NOTE_TO_CONTACT_ASSOCIATION,
                }],
            }],
        })

    def send_behavioral_event(self, event_name: str, email: str, properties: dict,
                              object_id: Optional[str] = None) -> dict:
        """Événement comportemental personnalisé (Events API v3)."""
        payload = {
            'eventName': event_name,
            'email': email,
            'properties': properties,
        }
        if object_id:
            payload['objectId'] = object_id
        return self._request('POST', '/events/v3/send', json=payload)

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json: Optional[dict] = None) -> dict:
        headers = {
            'Authorization': f'Bearer {self._token}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        url = f'{self._base_url}{path}'
        try:
            response = self._session.request(method, url, json=json, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error(f"HubSpot injoignable ({method} {path}): {exc}")
            raise UpstreamUnavailable("HubSpot unreachable") from exc

        if not response.ok:
            logger.error(f"HubSpot API error: {method} {path} -> {response.status_code} {response.text[:500]}")
            raise UpstreamUnavailable("HubSpot API error", status_code=response.status_code, body=response.text)

        # /events/v3/send répond 204 sans corps
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("Invalid HubSpot response", status_code=response.status_code,
                                      body=response.text) from exc
