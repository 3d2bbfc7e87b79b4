"""
Client HTTP du fournisseur d'identité (Supabase Auth / GoTrue).

Le portail ne gère ni mots de passe ni jetons lui-même: il se contente de
consommer quelques opérations du fournisseur:
- connexion email + mot de passe;
- vérification d'un `token_hash` (OTP/invitation);
- validation d'une paire access/refresh reçue dans le fragment d'URL;
- lecture/mise à jour de l'utilisateur courant, rafraîchissement, déconnexion.

Chaque méthode renvoie un `dict` simple et lève `IdentityProviderError` en cas
d'échec (réseau, statut non-2xx, réponse inexploitable).
"""

import base64
import json
import logging
import time

import requests
from django.conf import settings

from core.exceptions import NotConfigured, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Types acceptés par /verify pour un token_hash
OTP_TYPES = ('invite', 'magiclink', 'recovery', 'email', 'signup', 'email_change')

class IdentityProviderError(UpstreamUnavailable):
    """Échec d'un appel au fournisseur d'identité.

    `error_code` reprend le code machine du fournisseur (ex: 'otp_expired',
    'invalid_credentials') quand il est disponible.
    """

    def __init__(self, message, status_code=None, body=None, error_code=None):
        super().__init__(message, status_code=status_code, body=body)
        self.error_code = error_code

class IdentityClient:
    """Wrapper minimal autour de l'API REST `/auth/v1` du fournisseur."""

    def __init__(self, base_url=None, anon_key=None, *, session=None, timeout=None):
        base_url = base_url if base_url is not None else settings.SUPABASE_URL
        anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        if not base_url or not anon_key:
            raise NotConfigured("SUPABASE_URL / SUPABASE_ANON_KEY manquants")
        self._base_url = base_url.rstrip('/') + '/auth/v1'
        self._anon_key = anon_key
        self._session = session or requests.Session()
        self._timeout = timeout or settings.IDENTITY_TIMEOUT

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def sign_in_with_password(self, email, password):
        payload = self._request('POST', '/token', params={'grant_type': 'password'},
                                json={'email': email, 'password': password})
        return self._session_from_payload(payload)

    def verify_otp(self, token_hash, otp_type):
        """Vérifie un lien magique / d'invitation (`token_hash` + `type`)."""
        if otp_type not in OTP_TYPES:
            raise IdentityProviderError(f"Type OTP non supporté: {otp_type}", error_code='validation_failed')
        payload = self._request('POST', '/verify', json={'type': otp_type, 'token_hash': token_hash})
        return self._session_from_payload(payload)

    def set_session(self, access_token, refresh_token):
        """Valide une paire de jetons reçue côté client (flux implicite).

        Le jeton d'accès est vérifié en lisant l'utilisateur courant; la
        session renvoyée a la même forme que celle des autres flux.
        """
        user = self.get_user(access_token)
        return {
            'access_token': access_token,
            'refresh_token': refresh_token,
            'expires_at': self._decode_expiry(access_token),
            'user': user,
        }

    def refresh_session(self, refresh_token):
        payload = self._request('POST', '/token', params={'grant_type': 'refresh_token'},
                                json={'refresh_token': refresh_token})
        return self._session_from_payload(payload)

    def sign_out(self, access_token):
        self._request('POST', '/logout', access_token=access_token, expect_json=False)

    # ------------------------------------------------------------------
    # Utilisateur courant
    # ------------------------------------------------------------------
    def get_user(self, access_token):
        return self._request('GET', '/user', access_token=access_token)

    def update_user(self, access_token, password=None, data=None):
        """Met à jour le mot de passe et/ou les métadonnées de l'utilisateur."""
        body = {}
        if password:
            body['password'] = password
        if data:
            body['data'] = data
        return self._request('PUT', '/user', access_token=access_token, json=body)

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------
    def _request(self, method, path, *, params=None, json=None, access_token=None, expect_json=True):
        headers = {
            'apikey': self._anon_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if access_token:
            headers['Authorization'] = f'Bearer {access_token}'

        url = f'{self._base_url}{path}'
        try:
            response = self._session.request(method, url, params=params, json=json,
                                             headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error(f"Fournisseur d'identité injoignable ({method} {path}): {exc}")
            raise IdentityProviderError("Identity provider unreachable") from exc

        if response.status_code >= 400:
            error_code, message = self._parse_error(response)
            logger.warning(
                f"Fournisseur d'identité: {method} {path} -> {response.status_code} "
                f"({error_code}) {response.text[:500]}"
            )
            raise IdentityProviderError(message, status_code=response.status_code,
                                        body=response.text, error_code=error_code)

        if not expect_json or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise IdentityProviderError("Invalid identity provider response",
                                        status_code=response.status_code, body=response.text) from exc

    @staticmethod
    def _parse_error(response):
        try:
            data = response.json()
        except ValueError:
            return None, f"HTTP {response.status_code}"
        if not isinstance(data, dict):
            return None, f"HTTP {response.status_code}"
        error_code = data.get('error_code') or data.get('error')
        message = data.get('msg') or data.get('error_description') or data.get('message') or f"HTTP {response.status_code}"
        return error_code, message

    def _session_from_payload(self, payload):
        access_token = payload.get('access_token')
        if not access_token:
            raise IdentityProviderError("Identity provider returned no session", body=str(payload)[:500])
        expires_at = payload.get('expires_at')
        if not expires_at and payload.get('expires_in'):
            expires_at = int(time.time()) + int(payload['expires_in'])
        return {
            'access_token': access_token,
            'refresh_token': payload.get('refresh_token', ''),
            'expires_at': expires_at,
            'user': payload.get('user') or {},
        }

    @staticmethod
    def _decode_expiry(access_token):
        """Lit `exp` dans un JWT sans vérifier la signature (le fournisseur l'a fait)."""
        try:
            segment = access_token.split('.')[1]
            segment += '=' * (-len(segment) % 4)
            claims = json.loads(base64.urlsafe_b64decode(segment.encode('ascii')))
            return int(claims['exp'])
        except (IndexError, KeyError, TypeError, ValueError):
            return None
