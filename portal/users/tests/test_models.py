"""
Tests du modèle User (miroir local du compte fournisseur).
"""
import pytest

from users.models import User


@pytest.mark.django_db
class TestUserManager:
    def test_create_user_normalises_email(self):
        user = User.objects.create_user('Rep@Example.COM')
        assert user.email == 'rep@example.com'
        assert user.is_active
        assert not user.has_usable_password()

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user('')

    def test_create_superuser(self):
        admin = User.objects.create_superuser('admin@example.com', 'AdminPass1!')
        assert admin.is_staff and admin.is_superuser
        assert admin.check_password('AdminPass1!')

    def test_sync_creates_mirror_with_metadata(self):
        user = User.objects.sync_from_identity({
            'id': 'idp-1', 'email': 'Rep@Example.com',
            'user_metadata': {'first_name': 'Jane', 'last_name': 'Smith'},
        })
        assert (user.email, user.idp_user_id, user.first_name, user.last_name) == (
            'rep@example.com', 'idp-1', 'Jane', 'Smith')

    def test_sync_updates_existing_provider_id(self, user):
        synced = User.objects.sync_from_identity({'id': 'idp-new', 'email': user.email})
        assert synced.pk == user.pk
        user.refresh_from_db()
        assert user.idp_user_id == 'idp-new'

    def test_sync_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.sync_from_identity({'id': 'idp-1'})


@pytest.mark.django_db
class TestUser:
    def test_full_name_falls_back_to_email(self):
        user = User.objects.create_user('anon@example.com')
        assert user.get_full_name() == 'anon@example.com'
        assert user.get_short_name() == 'anon@example.com'

    def test_str(self, user):
        assert str(user) == 'Jane Smith (rep@example.com)'

    def test_complete_profile(self, user):
        assert not user.has_completed_profile
        user.complete_profile(' Janet ', 'Doe ')
        user.refresh_from_db()
        assert (user.first_name, user.last_name) == ('Janet', 'Doe')
        assert user.has_completed_profile
