"""
Backend d'authentification délégué au fournisseur d'identité.

`authenticate()` vérifie email + mot de passe auprès du fournisseur et renvoie
le miroir local, avec la session distante attachée dans `user.idp_session`
pour que la vue de connexion puisse la ranger dans la session Django.
"""

import logging

from django.contrib.auth.backends import BaseBackend

from core.exceptions import NotConfigured
from .identity import IdentityClient, IdentityProviderError
from .models import User

logger = logging.getLogger(__name__)


class IdentityProviderBackend(BaseBackend):

    def authenticate(self, request, email=None, password=None, **kwargs):
        email = email or kwargs.get('username')
        if not email or not password:
            return None

        try:
            idp_session = IdentityClient().sign_in_with_password(email, password)
        except NotConfigured:
            logger.error("Connexion impossible: fournisseur d'identité non configuré")
            return None
        except IdentityProviderError as exc:
            logger.info(f"Connexion refusée pour {email}: {exc.error_code or exc}")
            return None

        user = User.objects.sync_from_identity(idp_session.get('user') or {'email': email})
        if not self.user_can_authenticate(user):
            return None
        user.idp_session = idp_session
        return user

    def get_user(self, user_id):
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
        return user if self.user_can_authenticate(user) else None

    @staticmethod
    def user_can_authenticate(user):
        return getattr(user, 'is_active', True)
