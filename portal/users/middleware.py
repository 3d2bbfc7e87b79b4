"""
Session Gate: cohérence entre la session Django et celle du fournisseur d'identité.

Pour chaque requête authentifiée:
- sans jetons du fournisseur en session → déconnexion;
- jeton d'accès expiré → rafraîchissement; en cas d'échec → déconnexion.

Le middleware ne redirige pas lui-même: une fois l'utilisateur redevenu
anonyme, `LoginRequiredMixin` renvoie vers `/login/` et les API répondent 401.
"""

import logging

from django.contrib import messages

from core.exceptions import NotConfigured
from .identity import IdentityClient, IdentityProviderError
from . import session as idp

logger = logging.getLogger(__name__)

# L'admin Django repose sur les comptes locaux (ModelBackend)
EXCLUDED_PREFIXES = ('/admin/', '/static/')


class IdentitySessionMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.user.is_authenticated and not request.path.startswith(EXCLUDED_PREFIXES):
            self._check_identity_session(request)
        return self.get_response(request)

    def _check_identity_session(self, request):
        tokens = idp.get_tokens(request)
        if not tokens or not tokens.get('access_token'):
            logger.info(f"Session sans jetons fournisseur pour {request.user.email}, déconnexion")
            idp.end_session(request)
            return

        if not idp.is_expired(tokens):
            return

        email = request.user.email
        try:
            refreshed = IdentityClient().refresh_session(tokens.get('refresh_token', ''))
        except (IdentityProviderError, NotConfigured) as exc:
            logger.warning(f"Rafraîchissement de session impossible pour {email}: {exc}")
            idp.end_session(request)
            messages.warning(request, "Your session has expired. Please sign in again.")
            return

        idp.store_tokens(request, refreshed)
        logger.debug(f"Jeton d'accès rafraîchi pour {email}")
