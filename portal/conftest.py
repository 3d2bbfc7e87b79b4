import pytest


@pytest.fixture(autouse=True)
def isolated_third_parties(settings):
    """Neutralise les services tiers pendant les tests.
    - Aucun jeton/URL de service externe: chaque test configure ce qu'il utilise.
    - Cache mémoire vidé entre deux tests (métadonnées vidéo).
    - Tâches Celery exécutées en mode synchrone.
    """
    settings.SUPABASE_URL = ''
    settings.SUPABASE_ANON_KEY = ''
    settings.HUBSPOT_PRIVATE_APP_TOKEN = ''
    settings.HUBSPOT_VIDEO_SOURCE = 'files'
    settings.HUBSPOT_VIDEO_CUSTOM_EVENT = ''
    settings.N8N_INVITE_WEBHOOK = ''
    settings.N8N_PROFILE_WEBHOOK = ''
    settings.ELEVENLABS_AGENT_ID = ''
    settings.ELEVENLABS_CONVERSATION_SIGNATURE = ''
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CACHES = {'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'}}

    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    from users.models import User
    return User.objects.create_user(
        email='rep@example.com',
        first_name='Jane',
        last_name='Smith',
        idp_user_id='idp-123',
    )


@pytest.fixture
def client_logged(client, user):
    """Client connecté avec des jetons fournisseur valides en session."""
    client.force_login(user)
    session = client.session
    session['idp_session'] = {'access_token': 'access-tok', 'refresh_token': 'refresh-tok', 'expires_at': None}
    session.save()
    return client
