"""
Fixtures pytest pour l'app users (simples et réutilisables).
- idp_session: session renvoyée par le fournisseur d'identité.
- identity_configured: URL/clé du fournisseur renseignées.
- identity_client: IdentityClient simulé, injecté dans les vues, le backend et le middleware.
"""
from unittest.mock import patch

import pytest


@pytest.fixture
def idp_session():
    return {
        'access_token': 'new-access',
        'refresh_token': 'new-refresh',
        'expires_at': 4102444800,
        'user': {'id': 'idp-999', 'email': 'invitee@example.com', 'user_metadata': {}},
    }


@pytest.fixture
def identity_configured(settings):
    settings.SUPABASE_URL = 'https://project.supabase.test'
    settings.SUPABASE_ANON_KEY = 'anon-key'
    return settings


@pytest.fixture
def identity_client(identity_configured):
    """Même mock pour toutes les instanciations de IdentityClient."""
    with patch('users.views.IdentityClient') as views_cls, \
            patch('users.backends.IdentityClient', new=views_cls), \
            patch('users.middleware.IdentityClient', new=views_cls):
        yield views_cls.return_value
