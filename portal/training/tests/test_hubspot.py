"""
Tests du client HubSpot (transport HTTP simulé par une session mock).
"""
from unittest.mock import Mock

import pytest
import requests

from core.exceptions import NotConfigured, UpstreamUnavailable
from training.hubspot import NOTE_TO_CONTACT_ASSOCIATION, HubSpotClient


def _response(status=200, payload=None, text=None):
    resp = Mock()
    resp.status_code = status
    resp.ok = status < 400
    resp.content = b'' if payload is None and text is None else b'x'
    resp.text = text if text is not None else str(payload)
    resp.json.return_value = payload
    return resp


@pytest.fixture
def http():
    return Mock()


@pytest.fixture
def client(http):
    return HubSpotClient('pat-token', base_url='https://api.test/', session=http, timeout=3)


class TestHubSpotClient:
    def test_missing_token_is_not_configured(self, settings):
        settings.HUBSPOT_PRIVATE_APP_TOKEN = ''
        with pytest.raises(NotConfigured):
            HubSpotClient()

    def test_get_file_sends_bearer_token(self, client, http):
        http.request.return_value = _response(payload={'id': '42', 'url': 'https://cdn/video.mp4'})
        assert client.get_file('42') == {'id': '42', 'url': 'https://cdn/video.mp4'}

        method, url = http.request.call_args.args
        assert (method, url) == ('GET', 'https://api.test/files/v3/files/42')
        assert http.request.call_args.kwargs['headers']['Authorization'] == 'Bearer pat-token'
        assert http.request.call_args.kwargs['timeout'] == 3

    def test_get_marketing_video_path(self, client, http):
        http.request.return_value = _response(payload={'id': '7'})
        client.get_marketing_video('7')
        assert http.request.call_args.args[1] == 'https://api.test/marketing/v3/videos/7'

    def test_error_status_raises_upstream_unavailable(self, client, http):
        http.request.return_value = _response(status=404, payload={'message': 'not found'})
        with pytest.raises(UpstreamUnavailable) as excinfo:
            client.get_file('missing')
        assert excinfo.value.status_code == 404

    def test_transport_error_raises_upstream_unavailable(self, client, http):
        http.request.side_effect = requests.ConnectionError('boom')
        with pytest.raises(UpstreamUnavailable):
            client.get_file('42')

    def test_find_contact_id(self, client, http):
        http.request.return_value = _response(payload={'total': 1, 'results': [{'id': '901'}]})
        assert client.find_contact_id('rep@example.com') == '901'

        body = http.request.call_args.kwargs['json']
        assert body['filterGroups'][0]['filters'][0] == {
            'propertyName': 'email', 'operator': 'EQ', 'value': 'rep@example.com',
        }

    def test_find_contact_id_without_results(self, client, http):
        http.request.return_value = _response(payload={'total': 0, 'results': []})
        assert client.find_contact_id('nobody@example.com') is None

    def test_create_note_associates_contact(self, client, http):
        http.request.return_value = _response(status=201, payload={'id': 'note-1'})
        client.create_note('901', 'hello', '2026-01-01T00:00:00+00:00')

        body = http.request.call_args.kwargs['json']
        assert body['properties']['hs_note_body'] == 'hello'
        assert body['associations'][0]['to'] == {'id': '901'}
        assert body['associations'][0]['types'][0]['associationTypeId'] == NOTE_TO_CONTACT_ASSOCIATION

    def test_behavioral_event_accepts_empty_body(self, client, http):
        http.request.return_value = _response(status=204)
        assert client.send_behavioral_event('pe_video', 'rep@example.com', {'milestone': '50%'}, object_id='901') == {}

        body = http.request.call_args.kwargs['json']
        assert body == {
            'eventName': 'pe_video',
            'email': 'rep@example.com',
            'properties': {'milestone': '50%'},
            'objectId': '901',
        }
