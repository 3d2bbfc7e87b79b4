"""
Tests du backend d'authentification délégué au fournisseur d'identité.
"""
import pytest

from users.backends import IdentityProviderBackend
from users.identity import IdentityProviderError
from users.models import User


@pytest.mark.django_db
class TestIdentityProviderBackend:
    def test_authenticate_returns_mirror_with_session(self, rf, identity_client, idp_session):
        identity_client.sign_in_with_password.return_value = idp_session

        user = IdentityProviderBackend().authenticate(rf.post('/login/'), email='invitee@example.com',
                                                      password='Secret123!')

        assert user.email == 'invitee@example.com'
        assert user.idp_session is idp_session
        assert not user.has_usable_password()
        identity_client.sign_in_with_password.assert_called_once_with('invitee@example.com', 'Secret123!')

    def test_rejected_credentials(self, rf, identity_client):
        identity_client.sign_in_with_password.side_effect = IdentityProviderError('bad', 400)
        assert IdentityProviderBackend().authenticate(rf.post('/'), email='a@example.com', password='x') is None

    def test_missing_credentials(self, rf, identity_client):
        assert IdentityProviderBackend().authenticate(rf.post('/'), email='a@example.com') is None
        identity_client.sign_in_with_password.assert_not_called()

    def test_not_configured(self, rf):
        assert IdentityProviderBackend().authenticate(rf.post('/'), email='a@example.com', password='x') is None

    def test_inactive_mirror_is_refused(self, rf, identity_client, idp_session):
        User.objects.create_user('invitee@example.com', is_active=False)
        identity_client.sign_in_with_password.return_value = idp_session
        assert IdentityProviderBackend().authenticate(rf.post('/'), email='invitee@example.com',
                                                      password='Secret123!') is None

    def test_get_user(self, user):
        backend = IdentityProviderBackend()
        assert backend.get_user(user.pk) == user
        assert backend.get_user(999999) is None
