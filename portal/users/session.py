"""
Liaison entre une session du fournisseur d'identité et la session Django.

Les jetons (access/refresh/expiration) sont rangés dans
``request.session['idp_session']``; l'utilisateur Django connecté est le
miroir local du compte distant.
"""

import logging
import time

from django.contrib.auth import login, logout

from .models import User

logger = logging.getLogger(__name__)

SESSION_KEY = 'idp_session'
BACKEND_PATH = 'users.backends.IdentityProviderBackend'
# Marge avant expiration à partir de laquelle on rafraîchit le jeton
EXPIRY_LEEWAY_SECONDS = 30


def establish_session(request, idp_session, user=None):
    """Connecte l'utilisateur Django correspondant à une session du fournisseur.

    Paramètres:
    - idp_session (dict): {access_token, refresh_token, expires_at, user}.
    - user (User|None): miroir déjà résolu (ex: par le backend), sinon
      synchronisé depuis `idp_session['user']`.

    Retour:
    - User: l'utilisateur connecté.
    """
    if user is None:
        user = User.objects.sync_from_identity(idp_session.get('user') or {})

    # login() régénère la clé de session: on stocke les jetons après
    login(request, user, backend=BACKEND_PATH)
    store_tokens(request, idp_session)
    logger.info(f"Session établie pour {user.email}")
    return user


def store_tokens(request, idp_session):
    request.session[SESSION_KEY] = {
        'access_token': idp_session['access_token'],
        'refresh_token': idp_session.get('refresh_token', ''),
        'expires_at': idp_session.get('expires_at'),
    }


def get_tokens(request):
    return request.session.get(SESSION_KEY)


def is_expired(tokens, now=None):
    """Vrai si le jeton d'accès expire dans moins de EXPIRY_LEEWAY_SECONDS."""
    expires_at = tokens.get('expires_at')
    if not expires_at:
        return False
    now = now if now is not None else time.time()
    return float(expires_at) - EXPIRY_LEEWAY_SECONDS <= now


def end_session(request):
    """Vide complètement la session puis déconnecte l'utilisateur."""
    request.session.flush()
    logout(request)
