"""
Tests des liens vers l'agent conversationnel.
"""
from urllib.parse import parse_qs, urlparse

from training.agent import build_agent_links, encode_uri_component


def test_no_agent_configured_returns_none():
    assert build_agent_links('rep@example.com') is None


def test_encode_uri_component_matches_browser_semantics():
    assert encode_uri_component('a+b@example.com') == 'a%2Bb%40example.com'
    assert encode_uri_component("it's (fine)!~*") == "it's%20(fine)!~*"
    assert encode_uri_component('x/y?z=1&w') == 'x%2Fy%3Fz%3D1%26w'


def test_links_embed_agent_and_email(settings):
    settings.ELEVENLABS_AGENT_ID = 'agent_123'
    settings.ELEVENLABS_CONVERSATION_SIGNATURE = 'sig_456'

    links = build_agent_links('jane+sales@example.com')

    assert links['agent_url'] == (
        'https://elevenlabs.io/app/talk-to?agent_id=agent_123'
        '&conversation_signature=sig_456'
        '&var_hubspot_email=jane%2Bsales%40example.com'
    )
    qr = urlparse(links['qr_url'])
    assert qr.netloc == 'api.qrserver.com'
    params = parse_qs(qr.query)
    assert params['size'] == ['160x160']
    assert params['data'] == [links['agent_url']]
