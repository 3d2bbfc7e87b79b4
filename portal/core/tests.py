import pytest
from django.urls import reverse


@pytest.mark.django_db
class TestDashboardView:
    def test_anonymous_redirects_to_login(self, client):
        resp = client.get(reverse('core:dashboard'))
        assert resp.status_code == 302
        assert resp.headers['Location'].startswith('/login/')

    def test_renders_player_container(self, client_logged, settings):
        settings.TRAINING_VIDEO_TITLE = 'US Sales Reps Introduction'
        resp = client_logged.get(reverse('core:dashboard'))
        assert resp.status_code == 200
        content = resp.content.decode()
        assert 'US Sales Reps Introduction' in content
        assert 'data-video-endpoint="/api/hubspot-video/"' in content
        assert 'data-playback-endpoint="/api/playback-events/"' in content
        assert 'Sign Out' in content
        assert 'no-cache' in resp.headers['Cache-Control']

    def test_player_container_carries_no_identity(self, client_logged):
        # Le lecteur n'envoie que l'identifiant d'onglet; l'email est lu côté serveur
        content = client_logged.get(reverse('core:dashboard')).content.decode()
        assert 'data-email' not in content
        assert 'id="video-player"' in content

    def test_agent_card_hidden_without_agent(self, client_logged):
        resp = client_logged.get(reverse('core:dashboard'))
        assert resp.context['agent'] is None
        assert b'elevenlabs.io' not in resp.content

    def test_agent_card_shown_when_configured(self, client_logged, settings):
        settings.ELEVENLABS_AGENT_ID = 'agent_123'
        resp = client_logged.get(reverse('core:dashboard'))
        assert b'agent_id=agent_123' in resp.content
        assert b'api.qrserver.com' in resp.content


class TestNoCacheMiddleware:
    def test_headers_on_pages(self, client, db):
        resp = client.get(reverse('users:login'))
        assert resp.headers['Cache-Control'].startswith('no-cache')
        assert resp.headers['Pragma'] == 'no-cache'
